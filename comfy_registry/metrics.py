"""Minimal in-memory metrics collector.

Purpose:
    - Counters for resolver, selection and config diagnostics.
    - Zero external deps; can be swapped by Prometheus exporter later.

Core API (intentionally tiny):
    inc(name, labels=None, value=1)
    snapshot() -> dict (copy for safe reading)

Thread-safety: coarse RLock; overhead negligible for low event volume.

Metric names (documented for discoverability):
    - model_resolve_total{source}                     # exact|id_map|variant|miss
    - component_selection_miss_total{family,type}
    - env_override_total{path}
    - config_validation_errors_total{code,path}
"""
from __future__ import annotations

from threading import RLock
from time import time
from typing import Any, Dict, Tuple

_COUNTERS: Dict[Tuple[str, Tuple[Tuple[str, str], ...]], float] = {}
_LOCK = RLock()


def _norm_labels(labels: dict[str, Any] | None) -> Tuple[Tuple[str, str], ...]:
    if not labels:
        return tuple()
    return tuple(sorted((str(k), str(v)) for k, v in labels.items()))


def _render(name: str, labels: Tuple[Tuple[str, str], ...]) -> str:
    if not labels:
        return name
    return name + "{" + ",".join(f"{k}={v}" for k, v in labels) + "}"


def inc(
    name: str,
    labels: dict[str, Any] | None = None,
    value: float = 1.0,
) -> None:
    key = (name, _norm_labels(labels))
    with _LOCK:
        _COUNTERS[key] = _COUNTERS.get(key, 0.0) + value


def snapshot() -> dict[str, Any]:
    with _LOCK:
        counters = {
            _render(name, labels): v
            for (name, labels), v in _COUNTERS.items()
        }
        return {
            "ts": time(),
            "counters": counters,
        }


def reset_for_tests() -> None:  # pragma: no cover
    with _LOCK:
        _COUNTERS.clear()


__all__ = [
    "inc",
    "snapshot",
    "reset_for_tests",
]


# ------------------- Helper wrappers -------------------

def inc_model_resolve(source: str) -> None:
    """Increment resolver outcome counter.

    source: exact | id_map | variant | miss
    """
    inc("model_resolve_total", {"source": source})


def inc_component_selection_miss(component_type: str, family: str) -> None:
    inc(
        "component_selection_miss_total",
        {"type": component_type, "family": family},
    )


__all__ += ["inc_model_resolve", "inc_component_selection_miss"]
