"""Domain port definitions for adapters."""

from __future__ import annotations

from .system import PersistentState, System

__all__ = ["PersistentState", "System"]
