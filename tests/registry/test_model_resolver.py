import os
import textwrap

import pytest

from comfy_registry import metrics
from comfy_registry.config import clear_config_cache
from comfy_registry.registry.exceptions import ModelResolverError
from comfy_registry.registry.models import MODEL_REGISTRY
from comfy_registry.registry.resolver import (
    clean_model_name,
    detect_model_type,
    resolve_model,
    resolve_model_filename,
)


def _counters():
    return metrics.snapshot()["counters"]


def test_clean_model_name_strips_default_prefix():
    assert clean_model_name("comfyui/flux1-dev.safetensors") == "flux1-dev.safetensors"
    assert clean_model_name("flux1-dev.safetensors") == "flux1-dev.safetensors"


def test_resolve_exact_file_name():
    config = resolve_model("comfyui/flux1-dev.safetensors")
    assert config is MODEL_REGISTRY["flux1-dev.safetensors"]
    assert _counters()["model_resolve_total{source=exact}"] == 1


def test_resolve_via_model_id_map():
    config = resolve_model("comfyui/stable-diffusion-35")
    assert config is not None
    assert config.variant == "sd35"
    assert config is MODEL_REGISTRY["sd3.5_large.safetensors"]
    assert _counters()["model_resolve_total{source=id_map}"] == 1


def test_resolve_via_variant_suffix():
    config = resolve_model("my-custom-schnell")
    assert config is not None
    assert config.variant == "schnell"
    assert _counters()["model_resolve_total{source=variant}"] == 1


def test_resolve_unknown_returns_none():
    assert resolve_model("comfyui/totally-unknown-model") is None
    assert _counters()["model_resolve_total{source=miss}"] == 1


def test_variant_fallback_can_be_disabled():
    os.environ["COMFYREG__RESOLVER__VARIANT_SUFFIX_FALLBACK"] = "false"
    clear_config_cache()
    assert resolve_model("my-custom-schnell") is None


def test_case_insensitive_from_config(tmp_path):
    (tmp_path / "base.yaml").write_text(
        textwrap.dedent(
            """
            resolver:
              case_insensitive: true
              strip_prefixes: [comfyui, local]
            """
        ),
        encoding="utf-8",
    )
    os.environ["COMFYREG_CONFIG_DIR"] = str(tmp_path)
    clear_config_cache()
    config = resolve_model("local/FLUX1-DEV.safetensors")
    assert config is MODEL_REGISTRY["flux1-dev.safetensors"]


def test_resolve_model_filename_prefers_literal_file():
    available = ["flux_dev.safetensors", "flux1-dev.safetensors"]
    assert resolve_model_filename("flux_dev.safetensors", available) == (
        "flux_dev.safetensors"
    )


def test_resolve_model_filename_uses_variant_priority():
    available = ["sd3.5_medium.safetensors", "sd3.5_large.safetensors"]
    assert (
        resolve_model_filename("stable-diffusion-35", available)
        == "sd3.5_large.safetensors"
    )
    assert (
        resolve_model_filename("comfyui/flux-dev", ["flux_dev.safetensors"])
        == "flux_dev.safetensors"
    )


def test_resolve_model_filename_accepts_bare_variant():
    assert (
        resolve_model_filename("kontext", ["flux1-kontext-dev.safetensors"])
        == "flux1-kontext-dev.safetensors"
    )


def test_resolve_model_filename_not_found():
    with pytest.raises(ModelResolverError) as exc:
        resolve_model_filename("flux-schnell", ["flux1-dev.safetensors"])
    assert exc.value.reason == ModelResolverError.Reasons.MODEL_NOT_FOUND


def test_resolve_model_filename_empty_id():
    with pytest.raises(ModelResolverError) as exc:
        resolve_model_filename("comfyui/", [])
    assert exc.value.reason == ModelResolverError.Reasons.INVALID_MODEL_ID


@pytest.mark.parametrize(
    "model_id",
    ["stable-diffusion-custom", "stable-diffusion-custom-refiner"],
)
def test_resolve_model_filename_custom_sd(model_id):
    available = ["custom_sd_lobe.safetensors", "other_model.safetensors"]
    assert resolve_model_filename(model_id, available) == (
        "custom_sd_lobe.safetensors"
    )


def test_resolve_model_filename_custom_sd_missing():
    with pytest.raises(ModelResolverError) as exc:
        resolve_model_filename(
            "stable-diffusion-custom-refiner", ["other_model.safetensors"]
        )
    assert str(exc.value) == (
        "Custom SD model file not found. Please ensure "
        "'custom_sd_lobe.safetensors' is in the ComfyUI models folder"
    )
    assert exc.value.reason == ModelResolverError.Reasons.MODEL_NOT_FOUND


def test_detect_model_type():
    detection = detect_model_type("comfyui/flux1-krea-dev.safetensors")
    assert detection.is_supported
    assert detection.architecture == "FLUX"
    assert detection.variant == "krea"

    unknown = detect_model_type("comfyui/unknown-model")
    assert not unknown.is_supported
    assert unknown.architecture == "unknown"
    assert unknown.variant is None
