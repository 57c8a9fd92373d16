"""SQLAlchemy adapter package for dotstate."""

from __future__ import annotations

from .mappings import create_all_tables, metadata, state_entry_table
from .state_store import (
    SqlAlchemyPersistentState,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyPersistentState",
    "StartupError",
    "configured_engine",
    "create_all_tables",
    "is_started",
    "metadata",
    "shutdown",
    "startup",
    "state_entry_table",
]
