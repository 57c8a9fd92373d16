"""Reconciliation core: target state, destination state and their convergence."""

from __future__ import annotations

from .dest_state import (
    DEST_STATE_TYPES,
    DestStateAbsent,
    DestStateDir,
    DestStateEntry,
    DestStateFile,
    DestStateSymlink,
)
from .errors import ReconcileError, ScriptError, UnsupportedStateError
from .lazy import LazyContents, LazyLinkname, sha256_sum
from .reconcile import apply_entry, entry_equal, evaluate_entry
from .script_once import SCRIPT_ONCE_STATE_BUCKET, ScriptOnceState, script_once_key
from .target_state import (
    TARGET_STATE_TYPES,
    TargetStateAbsent,
    TargetStateDir,
    TargetStateEntry,
    TargetStateFile,
    TargetStateScript,
    TargetStateSymlink,
)

__all__ = [
    "DEST_STATE_TYPES",
    "SCRIPT_ONCE_STATE_BUCKET",
    "TARGET_STATE_TYPES",
    "DestStateAbsent",
    "DestStateDir",
    "DestStateEntry",
    "DestStateFile",
    "DestStateSymlink",
    "LazyContents",
    "LazyLinkname",
    "ReconcileError",
    "ScriptError",
    "ScriptOnceState",
    "TargetStateAbsent",
    "TargetStateDir",
    "TargetStateEntry",
    "TargetStateFile",
    "TargetStateScript",
    "TargetStateSymlink",
    "UnsupportedStateError",
    "apply_entry",
    "entry_equal",
    "evaluate_entry",
    "script_once_key",
    "sha256_sum",
]
