"""Application orchestration entry points."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, TypeAlias

from dotstate.adapters.dry_run import DryRunSystem
from dotstate.adapters.os_system import OsSystem
from dotstate.adapters.sqlalchemy.state_store import (
    SqlAlchemyPersistentState,
    is_started,
    startup,
)
from dotstate.config.logging import configure_logging
from dotstate.config.scripts import get_script_config
from dotstate.domain.reconcile import apply_entry, entry_equal, evaluate_entry
from dotstate.domain.target_state import TargetStateScript

if TYPE_CHECKING:
    from collections.abc import Iterable

    from dotstate.config.scripts import ScriptConfig
    from dotstate.domain.dest_state import DestStateEntry
    from dotstate.domain.ports.system import System
    from dotstate.domain.target_state import TargetStateEntry

EntryPair: TypeAlias = "tuple[TargetStateEntry, DestStateEntry]"


log = getLogger(__name__)


@dataclass(slots=True)
class ReconcileResult:
    """Summary of one reconciliation pass."""

    checked: int = 0
    unchanged: int = 0
    applied: int = 0
    scripts: int = 0


def reconcile_entries(
    pairs: Iterable[EntryPair],
    system: System,
    *,
    dry_run: bool = False,
) -> ReconcileResult:
    """Converge every destination entry to its target, in the given order.

    All targets are evaluated before the first mutation, so a target whose
    contents cannot be read aborts the pass with nothing changed.
    """

    entries = list(pairs)
    for target, _dest in entries:
        evaluate_entry(target)

    effective_system: System = DryRunSystem(system) if dry_run else system
    result = ReconcileResult()
    log.info("Reconciling %d entries (dry_run=%s)", len(entries), dry_run)

    for target, dest in entries:
        result.checked += 1
        if isinstance(target, TargetStateScript):
            apply_entry(target, effective_system, dest)
            result.scripts += 1
            continue
        if entry_equal(target, dest):
            result.unchanged += 1
            continue
        log.info("Updating %s", dest.path)
        apply_entry(target, effective_system, dest)
        result.applied += 1

    log.info(
        f"Finished reconciliation: checked={result.checked}, unchanged={result.unchanged}, "
        f"applied={result.applied}, scripts={result.scripts}"
    )
    return result


def build_os_system(
    *,
    database_uri: str | None = None,
    script_config: ScriptConfig | None = None,
    log_level: int | None = None,
) -> OsSystem:
    """Return a filesystem ``System`` whose persistent state lives in SQLite.

    Logging is configured here unless the root logger already has handlers.
    """

    configure_logging(level=log_level)
    if not is_started():
        startup(database_uri=database_uri)
    return OsSystem(
        persistent_state=SqlAlchemyPersistentState(),
        script_config=script_config or get_script_config(),
    )
