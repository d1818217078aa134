"""Central error taxonomy for registry lookups and configuration."""
from __future__ import annotations

_ALLOWED_ERROR_TYPES = {
    # component selection
    "component-not-found",
    "unknown-component-type",
    # model resolution
    "model-not-found",
    # config
    "config-out-of-range",
    "config-invalid",
    # fallback
    "registry-internal",
}


def validate_error_type(code: str) -> str:
    assert (
        code in _ALLOWED_ERROR_TYPES
    ), f"Unknown error_type '{code}' (not in taxonomy)"
    return code


def map_exception(e: Exception) -> str:
    code = getattr(e, "error_type", None)
    if isinstance(code, str) and code in _ALLOWED_ERROR_TYPES:
        return code
    return "registry-internal"


__all__ = ["validate_error_type", "map_exception"]
