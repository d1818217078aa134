"""Encoder and VAE selection over the system component table."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from .components import get_all_components_with_names, get_optimal_component_entry
from .models import CUSTOM_SD_CONFIG, get_model_config

CLIP_L = "clip_l.safetensors"
CLIP_G = "clip_g.safetensors"

# T5 encoders shared by SD3.5 and FLUX pipelines
_SD35_T5_FAMILIES = ("SD3", "FLUX")

# Families whose checkpoints are paired with a standalone VAE file
_EXTERNAL_VAE_FAMILIES = ("SD1", "SDXL")


@dataclass(frozen=True, slots=True)
class EncoderSelection:
    mode: str  # triple | dual_clip | t5
    clip_l: Optional[str] = None
    clip_g: Optional[str] = None
    t5: Optional[str] = None


def detect_sd35_encoders() -> EncoderSelection | None:
    """Pick the text encoders for an SD3.5 checkpoint without built-in CLIPs.

    Returns ``None`` when neither the CLIP pair nor a T5 encoder is known.
    """
    clips = get_all_components_with_names(type="clip")
    clip_l = next((c.name for c in clips if c.name == CLIP_L), None)
    clip_g = next(
        (
            c.name
            for c in clips
            if c.name == CLIP_G and c.config.model_family == "SD3"
        ),
        None,
    )

    t5 = None
    best = None
    for entry in get_all_components_with_names(type="t5"):
        if entry.config.model_family not in _SD35_T5_FAMILIES:
            continue
        if best is None or entry.config.priority > best.config.priority:
            best = entry
    if best is not None:
        t5 = best.name

    if clip_l and clip_g and t5:
        return EncoderSelection(mode="triple", clip_l=clip_l, clip_g=clip_g, t5=t5)
    if clip_l and clip_g:
        return EncoderSelection(mode="dual_clip", clip_l=clip_l, clip_g=clip_g)
    if t5:
        return EncoderSelection(mode="t5", t5=t5)
    return None


def select_vae(
    model_file_name: str,
    *,
    available: Iterable[str] | None = None,
    is_custom_sd: bool = False,
    custom_vae: str | None = None,
) -> str | None:
    """External VAE file to load next to ``model_file_name``, if any.

    ``available`` is the backend's VAE file list; ``None`` skips the
    availability check. FLUX and SD3 checkpoints need no separate VAE. Custom
    SD models take ``custom_vae`` when present, else the fixed custom VAE,
    else their built-in one (``None``).
    """
    on_server = set(available) if available is not None else None

    def _present(name: str) -> bool:
        return on_server is None or name in on_server

    if is_custom_sd or model_file_name == CUSTOM_SD_CONFIG["model_filename"]:
        if custom_vae and _present(custom_vae):
            return custom_vae
        fixed = CUSTOM_SD_CONFIG["vae_filename"]
        return fixed if _present(fixed) else None

    config = get_model_config(model_file_name)
    if config is None or config.model_family not in _EXTERNAL_VAE_FAMILIES:
        return None
    entry = get_optimal_component_entry("vae", config.model_family, on_server)
    return entry.name if entry is not None else None


__all__ = [
    "EncoderSelection",
    "detect_sd35_encoders",
    "select_vae",
]
