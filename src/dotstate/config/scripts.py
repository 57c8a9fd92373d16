"""Script execution configuration."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .env import optional_env_dir
from .errors import ConfigurationError

WORKING_DIR_ENV_VAR = "DOTSTATE_SCRIPT_WORKING_DIR"
TEMP_DIR_ENV_VAR = "DOTSTATE_SCRIPT_TEMP_DIR"


@dataclass(frozen=True, slots=True)
class ScriptConfig:
    """Where scripts run and where their temporary files are written."""

    working_dir: Path
    temp_dir: Path | None = None


def get_script_config() -> ScriptConfig:
    working_dir = optional_env_dir(WORKING_DIR_ENV_VAR)
    if working_dir is not None and not working_dir.is_dir():
        raise ConfigurationError(WORKING_DIR_ENV_VAR, f"{working_dir} does not exist")
    return ScriptConfig(
        working_dir=working_dir or Path.home(),
        temp_dir=optional_env_dir(TEMP_DIR_ENV_VAR),
    )
