"""Dispatch over the closed target-state and destination-state unions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .dest_state import DestStateAbsent, DestStateDir, DestStateFile, DestStateSymlink
from .errors import UnsupportedStateError
from .target_state import (
    TargetStateAbsent,
    TargetStateDir,
    TargetStateFile,
    TargetStateScript,
    TargetStateSymlink,
)

if TYPE_CHECKING:
    from .dest_state import DestStateEntry
    from .ports.system import System
    from .target_state import TargetStateEntry


def _require_target(value: object) -> TargetStateEntry:
    match value:
        case (
            TargetStateAbsent()
            | TargetStateDir()
            | TargetStateFile()
            | TargetStateSymlink()
            | TargetStateScript()
        ):
            return value
        case _:
            raise UnsupportedStateError(f"Unsupported target state entry: {value!r}")


def _require_dest(value: object) -> DestStateEntry:
    match value:
        case DestStateAbsent() | DestStateDir() | DestStateFile() | DestStateSymlink():
            return value
        case _:
            raise UnsupportedStateError(f"Unsupported destination state entry: {value!r}")


def apply_entry(target: TargetStateEntry, system: System, dest: DestStateEntry) -> None:
    """Converge ``dest`` to ``target`` using ``system`` for every side effect."""

    _require_target(target).apply(system, _require_dest(dest))


def entry_equal(target: TargetStateEntry, dest: DestStateEntry) -> bool:
    """Return whether applying ``target`` to ``dest`` would change nothing."""

    return _require_target(target).equal(_require_dest(dest))


def evaluate_entry(target: TargetStateEntry) -> None:
    """Force lazy computation so that read and render errors surface early."""

    _require_target(target).evaluate()
