"""Application configuration helpers."""

from __future__ import annotations

from .errors import ConfigurationError
from .logging import configure_logging
from .storage import (
    DatabaseConfig,
    StorageConfig,
    get_database_config,
    get_database_uri,
    get_storage_config,
)
from .sync import RENEC_SOURCE_URL, SyncConfig, get_sync_config
from .validation import ValidationConfig, get_validation_config

__all__ = [
    "RENEC_SOURCE_URL",
    "ConfigurationError",
    "DatabaseConfig",
    "StorageConfig",
    "SyncConfig",
    "ValidationConfig",
    "configure_logging",
    "get_database_config",
    "get_database_uri",
    "get_storage_config",
    "get_sync_config",
    "get_validation_config",
]
