"""Config subsystem public API.

Provides:
    get_config() -> AggregatedConfig (schema_version + sections)
    as_dict()    -> dict representation
    ConfigError  -> raised on validation / unknown key
"""

from .loader import (  # noqa: F401
    AggregatedConfig,
    ConfigError,
    as_dict,
    clear_config_cache,
    get_config,
)

__all__ = [
    "AggregatedConfig",
    "ConfigError",
    "as_dict",
    "clear_config_cache",
    "get_config",
]
