"""Registry exception hierarchy.

Plain lookups report "not found" as ``None`` or an empty list. These
exceptions are raised only by the strict helpers that pipeline stages call
when a missing component or model means the job cannot proceed.
"""


class RegistryError(Exception):
    """Base registry exception."""

    error_type = "registry-internal"


class UnknownComponentTypeError(RegistryError):
    """Raised when a component type is outside the known set."""

    error_type = "unknown-component-type"

    def __init__(self, component_type: str):
        super().__init__(f"Unknown component type: {component_type}")
        self.component_type = component_type


class ComponentNotFoundError(RegistryError):
    """Raised when no component matches a type/family pair."""

    error_type = "component-not-found"

    def __init__(self, component_type: str, model_family: str):
        super().__init__(
            f"No {component_type} component available for {model_family}"
        )
        self.component_type = component_type
        self.model_family = model_family


class ModelResolverError(RegistryError):
    """Raised when a model id cannot be mapped to an available file."""

    error_type = "model-not-found"

    class Reasons:
        MODEL_NOT_FOUND = "MODEL_NOT_FOUND"
        INVALID_MODEL_ID = "INVALID_MODEL_ID"

    def __init__(self, message: str, reason: str = Reasons.MODEL_NOT_FOUND):
        super().__init__(message)
        self.reason = reason
