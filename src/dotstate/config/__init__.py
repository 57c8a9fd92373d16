"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_dir, optional_env_var
from .errors import ConfigurationError
from .logging import configure_logging, get_log_level
from .scripts import ScriptConfig, get_script_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "ScriptConfig",
    "StorageConfig",
    "configure_logging",
    "get_database_config",
    "get_log_level",
    "get_script_config",
    "get_storage_config",
    "optional_env_dir",
    "optional_env_var",
]
