"""Ports for the side-effecting collaborators of the reconciliation core."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pathlib import Path


@runtime_checkable
class PersistentState(Protocol):
    """Bucketed key-value store that outlives a single reconciliation pass."""

    def get(self, bucket: str, key: bytes) -> bytes | None: ...

    def set(self, bucket: str, key: bytes, value: bytes) -> None: ...


@runtime_checkable
class System(PersistentState, Protocol):
    """Capabilities the core needs to converge a destination entry.

    Every method raises on failure. Implementations never retry and never
    roll back earlier calls.
    """

    def chmod(self, path: Path, perm: int) -> None: ...

    def mkdir(self, path: Path, perm: int) -> None: ...

    def remove_all(self, path: Path) -> None: ...

    def run_script(self, name: str, contents: bytes) -> None: ...

    def write_file(self, path: Path, contents: bytes, perm: int) -> None: ...

    def write_symlink(self, linkname: str, path: Path) -> None: ...


__all__ = ["PersistentState", "System"]
