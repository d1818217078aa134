"""Variant -> workflow routing and output filename prefixes."""
from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

FLUX_FILENAME_PREFIXES = {
    "DEV": "LobeChat/%year%-%month%-%day%/FLUX_Dev",
    "KONTEXT": "LobeChat/%year%-%month%-%day%/FLUX_Kontext",
    "KREA": "LobeChat/%year%-%month%-%day%/FLUX_Krea",
    "SCHNELL": "LobeChat/%year%-%month%-%day%/FLUX_Schnell",
}

SD_FILENAME_PREFIXES = {
    "CUSTOM": "LobeChat/%year%-%month%-%day%/CustomSD",
    "SD15": "LobeChat/%year%-%month%-%day%/SD15",
    "SD35": "LobeChat/%year%-%month%-%day%/SD35",
    "SDXL": "LobeChat/%year%-%month%-%day%/SDXL",
}

UNKNOWN_FILENAME_PREFIX = "LobeChat/%year%-%month%-%day%/Unknown"

VARIANT_WORKFLOW_MAP: Mapping[str, str] = MappingProxyType(
    {
        "dev": "flux-dev",
        "schnell": "flux-schnell",
        "kontext": "flux-kontext",
        "krea": "flux-dev",
        # sd35 checkpoints need external encoders; inclclip ones carry them
        "sd35": "sd35",
        "sd35-inclclip": "simple-sd",
        "sd15-t2i": "simple-sd",
        "sdxl-t2i": "simple-sd",
        "sdxl-i2i": "simple-sd",
        "custom-sd": "simple-sd",
    }
)

ARCHITECTURE_DEFAULT_MAP: Mapping[str, str] = MappingProxyType(
    {
        "FLUX": "flux-dev",
        "SD3": "sd35",
        "SD1": "simple-sd",
        "SDXL": "simple-sd",
    }
)

_WORKFLOW_DEFAULT_TYPE = {
    "flux-dev": "DEV",
    "flux-schnell": "SCHNELL",
    "flux-kontext": "KONTEXT",
    "sd35": "SD35",
    "simple-sd": "SD15",
}

_VARIANT_TYPE_OVERRIDE = {
    "krea": "KREA",
    "sd35": "SD35",
    "sd35-inclclip": "SD35",
    "sdxl-t2i": "SDXL",
    "sdxl-i2i": "SDXL",
    "custom-sd": "CUSTOM",
    # architectures
    "FLUX": "DEV",
    "SD3": "SD35",
    "SD1": "SD15",
    "SDXL": "SDXL",
}


def get_workflow_name(
    architecture: str, variant: str | None = None
) -> str | None:
    if variant and variant in VARIANT_WORKFLOW_MAP:
        return VARIANT_WORKFLOW_MAP[variant]
    return ARCHITECTURE_DEFAULT_MAP.get(architecture)


def get_workflow_filename_prefix(
    workflow_name: str, variant: str | None = None
) -> str:
    if variant and variant in _VARIANT_TYPE_OVERRIDE:
        kind = _VARIANT_TYPE_OVERRIDE[variant]
    else:
        kind = _WORKFLOW_DEFAULT_TYPE.get(workflow_name)
    if kind is None:
        return UNKNOWN_FILENAME_PREFIX
    if kind in FLUX_FILENAME_PREFIXES:
        return FLUX_FILENAME_PREFIXES[kind]
    return SD_FILENAME_PREFIXES.get(kind, UNKNOWN_FILENAME_PREFIX)


__all__ = [
    "ARCHITECTURE_DEFAULT_MAP",
    "UNKNOWN_FILENAME_PREFIX",
    "VARIANT_WORKFLOW_MAP",
    "get_workflow_filename_prefix",
    "get_workflow_name",
]
