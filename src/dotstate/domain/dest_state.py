"""Observed state of a single destination path."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeAlias

if TYPE_CHECKING:
    from pathlib import Path

    from .lazy import LazyContents, LazyLinkname
    from .ports.system import System


@dataclass(frozen=True, slots=True)
class DestStateAbsent:
    """Nothing exists at ``path``."""

    path: Path

    def remove(self, system: System) -> None:
        _ = system


@dataclass(frozen=True, slots=True)
class DestStateDir:
    path: Path
    perm: int

    def remove(self, system: System) -> None:
        system.remove_all(self.path)


@dataclass(frozen=True, slots=True)
class DestStateFile:
    path: Path
    perm: int
    lazy_contents: LazyContents

    def contents(self) -> bytes:
        return self.lazy_contents.contents()

    def contents_sha256(self) -> bytes:
        return self.lazy_contents.contents_sha256()

    def remove(self, system: System) -> None:
        system.remove_all(self.path)


@dataclass(frozen=True, slots=True)
class DestStateSymlink:
    path: Path
    lazy_linkname: LazyLinkname

    def linkname(self) -> str:
        return self.lazy_linkname.linkname()

    def remove(self, system: System) -> None:
        system.remove_all(self.path)


DestStateEntry: TypeAlias = DestStateAbsent | DestStateDir | DestStateFile | DestStateSymlink

DEST_STATE_TYPES: tuple[type[DestStateEntry], ...] = (
    DestStateAbsent,
    DestStateDir,
    DestStateFile,
    DestStateSymlink,
)
