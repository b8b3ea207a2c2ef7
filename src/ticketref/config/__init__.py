"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_int_env_var
from .errors import ConfigurationError
from .logging import configure_logging
from .references import (
    ReconcilerSettings,
    ReferenceSettings,
    get_reconciler_settings,
    get_reference_settings,
)
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "ReconcilerSettings",
    "ReferenceSettings",
    "StorageConfig",
    "configure_logging",
    "get_database_config",
    "get_reconciler_settings",
    "get_reference_settings",
    "get_storage_config",
    "optional_int_env_var",
]
