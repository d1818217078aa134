"""Main checkpoint registry (FLUX + SD families).

Unlike system components, checkpoint priorities run 1..10 with lower values
preferred: 1 is the canonical release file, higher numbers are quantized or
community repacks of the same variant.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

MODEL_FAMILIES = ("FLUX", "SD1", "SDXL", "SD3")

MODEL_VARIANTS = (
    "dev",
    "schnell",
    "kontext",
    "krea",
    "sd35",
    "sd35-inclclip",
    "sd15-t2i",
    "sdxl-t2i",
    "sdxl-i2i",
    "custom-sd",
)

RECOMMENDED_DTYPES = ("default", "fp8_e4m3fn", "fp8_e4m3fn_fast", "fp8_e5m2")

# Both custom SD ids load the same fixed checkpoint; the VAE file is optional.
CUSTOM_SD_CONFIG = MappingProxyType(
    {
        "model_filename": "custom_sd_lobe.safetensors",
        "vae_filename": "custom_sd_vae_lobe.safetensors",
    }
)


class ModelConfig(BaseModel):
    model_family: str
    priority: int = Field(ge=1, le=10)
    variant: str
    recommended_dtype: Optional[str] = None

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("model_family")
    @classmethod
    def _known_family(cls, v: str) -> str:
        if v not in MODEL_FAMILIES:
            raise ValueError(f"unknown model family: {v}")
        return v

    @field_validator("variant")
    @classmethod
    def _known_variant(cls, v: str) -> str:
        if v not in MODEL_VARIANTS:
            raise ValueError(f"unknown variant: {v}")
        return v

    @field_validator("recommended_dtype")
    @classmethod
    def _known_dtype(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in RECOMMENDED_DTYPES:
            raise ValueError(f"unknown dtype: {v}")
        return v


def _flux(variant: str, priority: int, dtype: str | None = None) -> dict:
    return {
        "model_family": "FLUX",
        "variant": variant,
        "priority": priority,
        "recommended_dtype": dtype,
    }


FLUX_MODEL_REGISTRY: Dict[str, dict] = {
    "flux1-dev.safetensors": _flux("dev", 1, "default"),
    "flux1-dev-fp8.safetensors": _flux("dev", 2, "fp8_e4m3fn"),
    "flux_dev.safetensors": _flux("dev", 3),
    "flux1-schnell.safetensors": _flux("schnell", 1, "default"),
    "flux1-schnell-fp8.safetensors": _flux("schnell", 2, "fp8_e4m3fn"),
    "flux_schnell.safetensors": _flux("schnell", 3),
    "flux1-kontext-dev.safetensors": _flux("kontext", 1, "default"),
    "flux1-krea-dev.safetensors": _flux("krea", 1, "default"),
    "flux_krea_dev.safetensors": _flux("krea", 2),
}

SD_MODEL_REGISTRY: Dict[str, dict] = {
    "sd3.5_large.safetensors": {"model_family": "SD3", "variant": "sd35", "priority": 1},
    "sd3.5_large_turbo.safetensors": {"model_family": "SD3", "variant": "sd35", "priority": 2},
    "sd3.5_medium.safetensors": {"model_family": "SD3", "variant": "sd35", "priority": 3},
    "sd3.5_large_fp8_scaled.safetensors": {"model_family": "SD3", "variant": "sd35-inclclip", "priority": 1},
    "sd3.5_medium_incl_clips_t5xxlfp8scaled.safetensors": {"model_family": "SD3", "variant": "sd35-inclclip", "priority": 2},
    "v1-5-pruned-emaonly.safetensors": {"model_family": "SD1", "variant": "sd15-t2i", "priority": 1},
    "custom_sd_lobe.safetensors": {"model_family": "SD1", "variant": "custom-sd", "priority": 1},
    "sd_xl_base_1.0.safetensors": {"model_family": "SDXL", "variant": "sdxl-t2i", "priority": 1},
    "sdxl_base.safetensors": {"model_family": "SDXL", "variant": "sdxl-t2i", "priority": 2},
    "sdxl_turbo.safetensors": {"model_family": "SDXL", "variant": "sdxl-t2i", "priority": 3},
    "sd_xl_refiner_1.0.safetensors": {"model_family": "SDXL", "variant": "sdxl-i2i", "priority": 1},
}

MODEL_REGISTRY: Mapping[str, ModelConfig] = MappingProxyType(
    {
        name: ModelConfig(**raw)
        for name, raw in {**FLUX_MODEL_REGISTRY, **SD_MODEL_REGISTRY}.items()
    }
)


def get_models_by_variant(variant: str) -> List[str]:
    """File names of ``variant``, best (lowest priority number) first."""
    matching = [
        (name, cfg.priority)
        for name, cfg in MODEL_REGISTRY.items()
        if cfg.variant == variant
    ]
    # sorted() is stable, so equal priorities keep table order
    return [name for name, _ in sorted(matching, key=lambda item: item[1])]


def get_model_config(
    model_name: str,
    *,
    case_insensitive: bool = False,
    model_family: str | None = None,
    variant: str | None = None,
    priority: int | None = None,
    recommended_dtype: str | None = None,
) -> ModelConfig | None:
    config = MODEL_REGISTRY.get(model_name)
    if config is None and case_insensitive:
        lowered = model_name.lower()
        for registry_name, registry_config in MODEL_REGISTRY.items():
            if registry_name.lower() == lowered:
                config = registry_config
                break
    if config is None:
        return None

    if variant is not None and config.variant != variant:
        return None
    if priority is not None and config.priority != priority:
        return None
    if model_family is not None and config.model_family != model_family:
        return None
    if (
        recommended_dtype is not None
        and config.recommended_dtype != recommended_dtype
    ):
        return None
    return config


def get_all_model_names() -> List[str]:
    return list(MODEL_REGISTRY.keys())


__all__ = [
    "CUSTOM_SD_CONFIG",
    "MODEL_FAMILIES",
    "MODEL_REGISTRY",
    "MODEL_VARIANTS",
    "RECOMMENDED_DTYPES",
    "ModelConfig",
    "get_all_model_names",
    "get_model_config",
    "get_models_by_variant",
]
