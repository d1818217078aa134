"""Registry lookups (system components + checkpoints)."""

from .components import (  # noqa: F401
    COMPONENT_TYPES,
    SYSTEM_COMPONENTS,
    ComponentConfig,
    ComponentEntry,
    get_all_component_configs,
    get_all_components_with_names,
    get_component_config,
    get_optimal_component,
    require_optimal_component,
)
from .exceptions import (  # noqa: F401
    ComponentNotFoundError,
    ModelResolverError,
    RegistryError,
    UnknownComponentTypeError,
)
from .models import (  # noqa: F401
    MODEL_REGISTRY,
    ModelConfig,
    get_all_model_names,
    get_model_config,
    get_models_by_variant,
)

__all__ = [
    "COMPONENT_TYPES",
    "SYSTEM_COMPONENTS",
    "ComponentConfig",
    "ComponentEntry",
    "get_all_component_configs",
    "get_all_components_with_names",
    "get_component_config",
    "get_optimal_component",
    "require_optimal_component",
    "ComponentNotFoundError",
    "ModelResolverError",
    "RegistryError",
    "UnknownComponentTypeError",
    "MODEL_REGISTRY",
    "ModelConfig",
    "get_all_model_names",
    "get_model_config",
    "get_models_by_variant",
]
