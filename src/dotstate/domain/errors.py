"""Exceptions raised by the reconciliation core and its adapters."""

from __future__ import annotations


class ReconcileError(RuntimeError):
    """Base class for reconciliation failures."""


class UnsupportedStateError(ReconcileError):
    """Raised for a state value or filesystem object the core cannot represent."""


class ScriptError(ReconcileError):
    """Raised when a script exits unsuccessfully."""

    def __init__(self, name: str, *, returncode: int | None = None) -> None:
        message = f"Script {name!r} failed"
        if returncode is not None:
            message = f"{message} with exit status {returncode}"
        super().__init__(message)
        self.name = name
        self.returncode = returncode
