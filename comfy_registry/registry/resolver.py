"""Model name resolution.

Maps whatever a caller passes (registry file name, public model id, or a
bare variant name, optionally with a provider prefix) to a registry
``ModelConfig`` or to a concrete file the backend actually has.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from comfy_registry import metrics
from comfy_registry.config import get_config
from comfy_registry.log import get_logger

from .exceptions import ModelResolverError
from .models import (
    CUSTOM_SD_CONFIG,
    MODEL_REGISTRY,
    ModelConfig,
    get_model_config,
    get_models_by_variant,
)

log = get_logger(__name__)

MODEL_ID_VARIANT_MAP = {
    # FLUX
    "flux-1-dev": "dev",
    "flux-dev": "dev",
    "flux-1-schnell": "schnell",
    "flux-schnell": "schnell",
    "flux-1-kontext-dev": "kontext",
    "flux-kontext-dev": "kontext",
    "flux-1-krea-dev": "krea",
    "flux-krea-dev": "krea",
    # SD3
    "stable-diffusion-35": "sd35",
    "stable-diffusion-35-inclclip": "sd35-inclclip",
    # SD1 / SDXL
    "stable-diffusion-15": "sd15-t2i",
    "stable-diffusion-xl": "sdxl-t2i",
    "stable-diffusion-xl-i2i": "sdxl-i2i",
    "stable-diffusion-custom": "custom-sd",
    "stable-diffusion-custom-refiner": "custom-sd",
}


@dataclass(frozen=True, slots=True)
class WorkflowDetection:
    architecture: str
    is_supported: bool
    variant: Optional[str] = None


def clean_model_name(model_name: str) -> str:
    for prefix in get_config().resolver.strip_prefixes:
        if model_name.startswith(prefix):
            return model_name[len(prefix):]
    return model_name


def _matches_variant(name: str, variant: str) -> bool:
    return (
        name == variant
        or name.endswith(f"-{variant}")
        or name.endswith(variant)
    )


def resolve_model(model_name: str) -> ModelConfig | None:
    """Resolve a model name to its static registry config.

    Order: exact file name, public id -> variant map, variant suffix
    fallback. Returns ``None`` when nothing applies.
    """
    cfg = get_config().resolver
    clean = clean_model_name(model_name)
    log.debug("resolving static model config for %s", model_name)

    config = get_model_config(clean, case_insensitive=cfg.case_insensitive)
    if config is not None:
        metrics.inc_model_resolve("exact")
        return config

    mapped = MODEL_ID_VARIANT_MAP.get(clean)
    if mapped:
        for filename, model_config in MODEL_REGISTRY.items():
            if model_config.variant == mapped:
                log.debug("%s -> %s via id map (%s)", clean, filename, mapped)
                metrics.inc_model_resolve("id_map")
                return model_config

    if cfg.variant_suffix_fallback:
        for filename, model_config in MODEL_REGISTRY.items():
            if _matches_variant(clean, model_config.variant):
                log.debug("%s -> %s via variant match", clean, filename)
                metrics.inc_model_resolve("variant")
                return model_config

    log.debug("no static config found for %s", model_name)
    metrics.inc_model_resolve("miss")
    return None


def resolve_model_filename(model_id: str, available: Iterable[str]) -> str:
    """Pick the file to load for ``model_id`` from the backend's file list.

    A literal file name wins when the backend has it. Otherwise candidates of
    the mapped variant (or ``model_id`` taken as a variant) are tried in
    registry priority order.
    """
    clean = clean_model_name(model_id)
    if not clean:
        raise ModelResolverError(
            "Empty model id", reason=ModelResolverError.Reasons.INVALID_MODEL_ID
        )
    on_server = set(available)
    if clean in on_server:
        return clean

    variant = MODEL_ID_VARIANT_MAP.get(clean, clean)
    if variant == "custom-sd":
        filename = CUSTOM_SD_CONFIG["model_filename"]
        if filename in on_server:
            return filename
        raise ModelResolverError(
            "Custom SD model file not found. Please ensure "
            f"'{filename}' is in the ComfyUI models folder",
            reason=ModelResolverError.Reasons.MODEL_NOT_FOUND,
        )

    candidates: List[str] = get_models_by_variant(variant)
    for name in candidates:
        if name in on_server:
            log.debug("%s resolved to %s (variant %s)", model_id, name, variant)
            return name

    raise ModelResolverError(
        f"Model not found: {model_id}",
        reason=ModelResolverError.Reasons.MODEL_NOT_FOUND,
    )


def detect_model_type(model_id: str) -> WorkflowDetection:
    config = resolve_model(model_id)
    if config is None:
        return WorkflowDetection(architecture="unknown", is_supported=False)
    return WorkflowDetection(
        architecture=config.model_family,
        is_supported=True,
        variant=config.variant,
    )


__all__ = [
    "MODEL_ID_VARIANT_MAP",
    "WorkflowDetection",
    "clean_model_name",
    "detect_model_type",
    "resolve_model",
    "resolve_model_filename",
]
