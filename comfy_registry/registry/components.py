"""System component table (VAE, CLIP and T5 encoders).

Static, process-wide and read-only: built once at import, keyed by the file
name a backend exposes for the component. Higher ``priority`` wins when
several components fit the same type and model family.

Queries below are pure reads. Unknown names and empty filters are normal
outcomes (``None`` / ``[]``), never exceptions.
"""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from comfy_registry import metrics
from .exceptions import ComponentNotFoundError, UnknownComponentTypeError

COMPONENT_TYPES = ("vae", "clip", "t5")

SUPPORTED_MODEL_FORMATS = (
    ".safetensors",
    ".ckpt",
    ".pt",
    ".pth",
    ".bin",
    ".gguf",
)


class ComponentConfig(BaseModel):
    type: str
    model_family: str
    priority: float

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("type")
    @classmethod
    def _known_type(cls, v: str) -> str:
        if v not in COMPONENT_TYPES:
            raise ValueError(f"unknown component type: {v}")
        return v

    @field_validator("model_family")
    @classmethod
    def _family_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("model_family cannot be empty")
        return v


@dataclass(frozen=True, slots=True)
class ComponentFilter:
    type: Optional[str] = None
    model_family: Optional[str] = None

    def matches(self, config: ComponentConfig) -> bool:
        if self.type is not None and config.type != self.type:
            return False
        if (
            self.model_family is not None
            and config.model_family != self.model_family
        ):
            return False
        return True


@dataclass(frozen=True, slots=True)
class ComponentEntry:
    name: str
    config: ComponentConfig


@dataclass(frozen=True, slots=True)
class LoaderNode:
    node: str
    field: str


def _build(
    table: Dict[str, Dict[str, object]]
) -> Mapping[str, ComponentConfig]:
    return MappingProxyType(
        {name: ComponentConfig(**raw) for name, raw in table.items()}
    )


# Order is significant: queries return entries in this order and ties on
# priority resolve to the earliest entry.
SYSTEM_COMPONENTS: Mapping[str, ComponentConfig] = _build(
    {
        # FLUX
        "ae.safetensors": {"type": "vae", "model_family": "FLUX", "priority": 100},
        "flux_vae.safetensors": {"type": "vae", "model_family": "FLUX", "priority": 80},
        "clip_l.safetensors": {"type": "clip", "model_family": "FLUX", "priority": 100},
        "t5xxl_fp16.safetensors": {"type": "t5", "model_family": "FLUX", "priority": 100},
        "t5xxl_fp8_e4m3fn.safetensors": {"type": "t5", "model_family": "FLUX", "priority": 80},
        "t5xxl_fp8_e4m3fn_scaled.safetensors": {"type": "t5", "model_family": "FLUX", "priority": 70},
        "t5-v1_1-xxl-encoder.safetensors": {"type": "t5", "model_family": "FLUX", "priority": 50},
        # SD3
        "clip_g.safetensors": {"type": "clip", "model_family": "SD3", "priority": 100},
        "sd3_vae.safetensors": {"type": "vae", "model_family": "SD3", "priority": 100},
        # SDXL
        "sdxl_vae_fp16fix.safetensors": {"type": "vae", "model_family": "SDXL", "priority": 100},
        "sdxl_vae.safetensors": {"type": "vae", "model_family": "SDXL", "priority": 90},
        # SD1
        "vae-ft-mse-840000-ema-pruned.safetensors": {"type": "vae", "model_family": "SD1", "priority": 100},
        "kl-f8-anime2.safetensors": {"type": "vae", "model_family": "SD1", "priority": 60},
    }
)

COMPONENT_NODE_MAPPINGS: Mapping[str, LoaderNode] = MappingProxyType(
    {
        "clip": LoaderNode(node="CLIPLoader", field="clip_name"),
        # T5 encoders load through the CLIP loader as well
        "t5": LoaderNode(node="CLIPLoader", field="clip_name"),
        "vae": LoaderNode(node="VAELoader", field="vae_name"),
    }
)


def get_component_config(name: str) -> ComponentConfig | None:
    return SYSTEM_COMPONENTS.get(name)


def get_all_component_configs(
    type: str | None = None,
    model_family: str | None = None,
) -> List[ComponentConfig]:
    """Return configs matching every supplied field, in table order."""
    flt = ComponentFilter(type=type, model_family=model_family)
    return [c for c in SYSTEM_COMPONENTS.values() if flt.matches(c)]


def get_all_components_with_names(
    type: str | None = None,
    model_family: str | None = None,
) -> List[ComponentEntry]:
    """Like ``get_all_component_configs`` but keeps the registry key."""
    flt = ComponentFilter(type=type, model_family=model_family)
    return [
        ComponentEntry(name=name, config=config)
        for name, config in SYSTEM_COMPONENTS.items()
        if flt.matches(config)
    ]


def get_optimal_component_entry(
    type: str,
    model_family: str,
    available: Iterable[str] | None = None,
) -> ComponentEntry | None:
    """Same selection as ``get_optimal_component``, keeping the name.

    With ``available`` only components whose file name is in it compete.
    """
    on_server = set(available) if available is not None else None
    best: ComponentEntry | None = None
    for entry in get_all_components_with_names(
        type=type, model_family=model_family
    ):
        if on_server is not None and entry.name not in on_server:
            continue
        # strict comparison keeps the first entry on ties
        if best is None or entry.config.priority > best.config.priority:
            best = entry
    return best


def get_optimal_component(
    type: str, model_family: str
) -> ComponentConfig | None:
    """Highest-priority component for ``type`` within ``model_family``.

    Ties go to the entry that appears first in ``SYSTEM_COMPONENTS``.
    """
    entry = get_optimal_component_entry(type, model_family)
    return entry.config if entry is not None else None


def require_optimal_component(
    type: str,
    model_family: str,
    available: Iterable[str] | None = None,
) -> ComponentEntry:
    """Strict selection used by pipeline stages that cannot run without it.

    ``available`` is the file list the backend reports for the component's
    loader node; the best registered component present there is returned.
    """
    if type not in COMPONENT_TYPES:
        raise UnknownComponentTypeError(type)
    entry = get_optimal_component_entry(type, model_family, available)
    if entry is None:
        metrics.inc_component_selection_miss(type, model_family)
        raise ComponentNotFoundError(type, model_family)
    return entry


def get_loader_node(type: str) -> LoaderNode | None:
    return COMPONENT_NODE_MAPPINGS.get(type)


def is_supported_model_file(name: str) -> bool:
    return name.lower().endswith(SUPPORTED_MODEL_FORMATS)


__all__ = [
    "COMPONENT_TYPES",
    "COMPONENT_NODE_MAPPINGS",
    "SUPPORTED_MODEL_FORMATS",
    "SYSTEM_COMPONENTS",
    "ComponentConfig",
    "ComponentEntry",
    "ComponentFilter",
    "LoaderNode",
    "get_all_component_configs",
    "get_all_components_with_names",
    "get_component_config",
    "get_loader_node",
    "get_optimal_component",
    "get_optimal_component_entry",
    "is_supported_model_file",
    "require_optimal_component",
]
