"""Configuration loading & validation.

Precedence (last wins): base.yaml -> overrides.local.yaml -> ENV (COMFYREG__*).

Unknown keys are rejected at every level. Sub-sections are validated one by
one so the error names the offending section.
"""
from __future__ import annotations

import os
import pathlib
import threading
from functools import lru_cache
from typing import Any, Dict, Type

import yaml
from pydantic import BaseModel, ConfigDict, Field

from comfy_registry import metrics
from comfy_registry.errors import validate_error_type
from comfy_registry.log import configure_logging, get_logger

from .schemas.observability import LoggingConfig
from .schemas.resolver import ResolverConfig

log = get_logger("config")


class AggregatedConfig(BaseModel):
    schema_version: int = 1
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    resolver: ResolverConfig = Field(default_factory=ResolverConfig)

    model_config = ConfigDict(extra="forbid")


DEFAULT_CONFIG_DIR = "configs"
CONFIG_DIR_ENV = "COMFYREG_CONFIG_DIR"
ENV_PREFIX = "COMFYREG__"

SUB_SCHEMA_CLASSES: Dict[str, Type[BaseModel]] = {
    "logging": LoggingConfig,
    "resolver": ResolverConfig,
}


class ConfigError(Exception):
    error_type = "config-invalid"


def _load_yaml_if_exists(path: pathlib.Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path.name}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{path.name}: top level must be a mapping")
    return data


def _merge_dict(
    base: Dict[str, Any], override: Dict[str, Any]
) -> Dict[str, Any]:
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            base[k] = _merge_dict(base[k], v)
        else:
            base[k] = v
    return base


def _cast_env_value(value: str) -> Any:
    if value.lower() in {"true", "false"}:
        return value.lower() == "true"
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        return value


def _apply_env(cfg: Dict[str, Any]) -> None:
    prefix_len = len(ENV_PREFIX)
    for env_key, value in sorted(os.environ.items()):
        if not env_key.startswith(ENV_PREFIX):
            continue
        path_parts = env_key[prefix_len:].lower().split("__")
        target = cfg
        for part in path_parts[:-1]:
            if part not in target or not isinstance(target[part], dict):
                target[part] = {}
            target = target[part]
        target[path_parts[-1]] = _cast_env_value(value)
        dotted_path = ".".join(path_parts)
        metrics.inc("env_override_total", {"path": dotted_path})
        log.info("config-env-override path=%s value=*** source=env", dotted_path)


_lock = threading.Lock()


def _resolve_config_dir() -> pathlib.Path:
    """Resolve config directory each call honoring env var changes."""
    return pathlib.Path(os.getenv(CONFIG_DIR_ENV, DEFAULT_CONFIG_DIR))


def _normalize_and_validate(raw: Dict[str, Any]) -> None:
    """Apply normalizations and bounds validation in place.

    Normalizations:
      - resolver.strip_prefixes: comma separated string -> list; every
        prefix gets a trailing '/'.
    Validations (error -> raise):
      - resolver.strip_prefixes entries must be non-empty.
    """
    errors: list[tuple[str, str, str]] = []  # (path, code, msg)
    resolver = raw.get("resolver")
    if isinstance(resolver, dict) and "strip_prefixes" in resolver:
        prefixes = resolver["strip_prefixes"]
        if isinstance(prefixes, str):
            prefixes = prefixes.split(",")
        if isinstance(prefixes, list):
            normalized = []
            for p in prefixes:
                p = str(p).strip()
                if not p or p == "/":
                    errors.append(
                        (
                            "resolver.strip_prefixes",
                            "config-out-of-range",
                            "empty prefix",
                        )
                    )
                    continue
                normalized.append(p if p.endswith("/") else p + "/")
            resolver["strip_prefixes"] = normalized

    if errors:
        for path, code, _ in errors:
            validate_error_type(code)
            metrics.inc(
                "config_validation_errors_total",
                {"path": path, "code": code},
            )
        details = ", ".join(f"{p}:{c}:{m}" for p, c, m in errors)
        raise ConfigError(f"config validation failed: {details}")


def _validate_sub_schemas(raw: Dict[str, Any]) -> Dict[str, Any]:
    validated: Dict[str, Any] = {}
    for name, cls in SUB_SCHEMA_CLASSES.items():
        if name in raw:
            try:
                validated[name] = cls.model_validate(raw[name] or {})
            except Exception as e:  # noqa: BLE001
                metrics.inc(
                    "config_validation_errors_total",
                    {"path": name, "code": "config-invalid"},
                )
                raise ConfigError(
                    f"Validation failed for section '{name}': {e}"
                ) from e
    return validated


@lru_cache(maxsize=1)
def get_config() -> AggregatedConfig:  # noqa: D401
    with _lock:
        cfg_dir = _resolve_config_dir()
        base_cfg = _load_yaml_if_exists(cfg_dir / "base.yaml")
        overrides_cfg = _load_yaml_if_exists(cfg_dir / "overrides.local.yaml")
        merged = _merge_dict(base_cfg, overrides_cfg)
        _apply_env(merged)
        _normalize_and_validate(merged)
        validated_sub = _validate_sub_schemas(merged)
        try:
            agg = AggregatedConfig.model_validate({**merged, **validated_sub})
        except Exception as e:  # noqa: BLE001
            raise ConfigError(str(e)) from e
        configure_logging(agg.logging)
        log.debug("config loaded from %s", cfg_dir)
        return agg


def clear_config_cache() -> None:
    """Clear cached config (primarily for tests)."""
    get_config.cache_clear()


def as_dict() -> Dict[str, Any]:
    return get_config().model_dump()
