"""Shared logging helpers for dotstate."""

from __future__ import annotations

import logging

from .env import optional_env_var
from .errors import ConfigurationError

LOG_LEVEL_ENV_VAR = "DOTSTATE_LOG_LEVEL"


def get_log_level() -> int:
    """Return the level named by ``DOTSTATE_LOG_LEVEL`` (default INFO)."""

    value = optional_env_var(LOG_LEVEL_ENV_VAR)
    if value is None:
        return logging.INFO
    level = logging.getLevelNamesMapping().get(value.strip().upper())
    if level is None:
        raise ConfigurationError(LOG_LEVEL_ENV_VAR, f"unknown log level {value!r}")
    return level


def configure_logging(*, level: int | None = None, force: bool = False) -> None:
    """Initialise the root logger once with a terse format suitable for CLI output.

    ``level`` defaults to ``DOTSTATE_LOG_LEVEL``. Pass ``force=True`` to
    reconfigure during tests or specialised entry points.
    """

    logging.basicConfig(
        level=get_log_level() if level is None else level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
