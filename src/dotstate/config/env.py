"""Environment variable loaders for configuration."""

from __future__ import annotations

import os
from pathlib import Path

from .errors import ConfigurationError


def optional_env_var(name: str) -> str | None:
    """Return an environment variable, treating blank values as unset."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value


def optional_env_dir(name: str) -> Path | None:
    """Return the directory named by ``name``, or ``None`` when unset.

    A path that exists but is not a directory is rejected. A missing path is
    accepted so callers can create it on demand.
    """

    value = optional_env_var(name)
    if value is None:
        return None
    path = Path(value).expanduser()
    if path.exists() and not path.is_dir():
        raise ConfigurationError(name, f"{path} is not a directory")
    return path
