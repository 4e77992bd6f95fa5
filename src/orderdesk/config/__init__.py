"""Application configuration helpers."""

from __future__ import annotations

from .env import env_flag, optional_env_var, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .logging import configure_logging
from .storage import StorageConfig, get_storage_config
from .store import StoreConfig, StoreMode, get_store_config

__all__ = [
    "ConfigurationError",
    "MissingConfigurationError",
    "StorageConfig",
    "StoreConfig",
    "StoreMode",
    "configure_logging",
    "env_flag",
    "get_storage_config",
    "get_store_config",
    "optional_env_var",
    "require_env_var",
    "require_env_vars",
]
