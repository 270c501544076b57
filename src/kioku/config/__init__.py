"""Application configuration helpers."""

from __future__ import annotations

from .env import require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .myanimelist import MyAnimeListConfig, get_myanimelist_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config
from .sync import ImportConfig, get_import_config

__all__ = [
    "CacheConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "ImportConfig",
    "MissingConfigurationError",
    "MyAnimeListConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "get_database_config",
    "get_import_config",
    "get_myanimelist_config",
    "get_storage_config",
    "require_env_var",
    "require_env_vars",
]
