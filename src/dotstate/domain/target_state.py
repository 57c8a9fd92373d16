"""Desired state of a single destination path.

Every variant converges one destination entry and never recurses: walking a
directory tree (including pruning the children of an ``exact`` directory) is
the caller's job.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING, Protocol, TypeAlias

from .dest_state import DestStateAbsent, DestStateDir, DestStateFile, DestStateSymlink
from .script_once import SCRIPT_ONCE_STATE_BUCKET, ScriptOnceState, script_once_key

if TYPE_CHECKING:
    from .dest_state import DestStateEntry
    from .lazy import LazyContents, LazyLinkname
    from .ports.system import System

log = getLogger(__name__)


class Clock(Protocol):
    def __call__(self) -> datetime: ...


def _utcnow() -> datetime:
    return datetime.now(UTC)


def is_empty(data: bytes) -> bool:
    """Return whether ``data`` holds nothing but whitespace."""

    return not data.strip()


@dataclass(frozen=True, slots=True)
class TargetStateAbsent:
    """The destination path should not exist."""

    def apply(self, system: System, dest: DestStateEntry) -> None:
        match dest:
            case DestStateAbsent():
                return
            case _:
                system.remove_all(dest.path)

    def equal(self, dest: DestStateEntry) -> bool:
        return isinstance(dest, DestStateAbsent)

    def evaluate(self) -> None:
        return None


@dataclass(frozen=True, slots=True)
class TargetStateDir:
    """The destination path should be a directory with ``perm``.

    ``exact`` marks directories whose unmanaged children the tree walker removes.
    """

    perm: int
    exact: bool = False

    def apply(self, system: System, dest: DestStateEntry) -> None:
        match dest:
            case DestStateDir(perm=perm) if perm == self.perm:
                return
            case DestStateDir():
                system.chmod(dest.path, self.perm)
            case _:
                dest.remove(system)
                system.mkdir(dest.path, self.perm)

    def equal(self, dest: DestStateEntry) -> bool:
        match dest:
            case DestStateDir(perm=perm):
                return perm == self.perm
            case _:
                return False

    def evaluate(self) -> None:
        return None


@dataclass(frozen=True, slots=True)
class TargetStateFile:
    """The destination path should be a regular file."""

    lazy_contents: LazyContents
    perm: int

    def contents(self) -> bytes:
        return self.lazy_contents.contents()

    def contents_sha256(self) -> bytes:
        return self.lazy_contents.contents_sha256()

    def apply(self, system: System, dest: DestStateEntry) -> None:
        match dest:
            case DestStateFile():
                # Only SHA256 sums are compared, so last-written states can be
                # checked without keeping the full contents around.
                if dest.contents_sha256() == self.contents_sha256():
                    if dest.perm != self.perm:
                        system.chmod(dest.path, self.perm)
                    return
            case _:
                dest.remove(system)
        system.write_file(dest.path, self.contents(), self.perm)

    def equal(self, dest: DestStateEntry) -> bool:
        match dest:
            case DestStateFile(perm=perm) if perm == self.perm:
                return dest.contents_sha256() == self.contents_sha256()
            case _:
                return False

    def evaluate(self) -> None:
        self.contents_sha256()


@dataclass(frozen=True, slots=True)
class TargetStateSymlink:
    """The destination path should be a symlink pointing at ``linkname``."""

    lazy_linkname: LazyLinkname

    def linkname(self) -> str:
        return self.lazy_linkname.linkname()

    def apply(self, system: System, dest: DestStateEntry) -> None:
        linkname = self.linkname()
        if isinstance(dest, DestStateSymlink) and dest.linkname() == linkname:
            return
        dest.remove(system)
        system.write_symlink(linkname, dest.path)

    def equal(self, dest: DestStateEntry) -> bool:
        match dest:
            case DestStateSymlink():
                return dest.linkname() == self.linkname()
            case _:
                return False

    def evaluate(self) -> None:
        self.linkname()


@dataclass(frozen=True, slots=True)
class TargetStateScript:
    """A script to run, optionally at most once per (name, contents) pair."""

    name: str
    lazy_contents: LazyContents
    once: bool = False
    clock: Clock = field(default=_utcnow, compare=False, repr=False)

    def contents(self) -> bytes:
        return self.lazy_contents.contents()

    def contents_sha256(self) -> bytes:
        return self.lazy_contents.contents_sha256()

    def apply(self, system: System, dest: DestStateEntry) -> None:
        _ = dest
        key: bytes | None = None
        executed_at: datetime | None = None
        if self.once:
            key = script_once_key(self.name, self.contents_sha256())
            if system.get(SCRIPT_ONCE_STATE_BUCKET, key) is not None:
                log.debug("Skipping script %s: already run", self.name)
                return
            executed_at = self.clock()

        contents = self.contents()
        if is_empty(contents):
            log.debug("Skipping script %s: empty", self.name)
            return

        system.run_script(self.name, contents)

        if key is not None and executed_at is not None:
            state = ScriptOnceState(name=self.name, executed_at=executed_at)
            system.set(SCRIPT_ONCE_STATE_BUCKET, key, state.to_json())

    def equal(self, dest: DestStateEntry) -> bool:
        # Whether a script needs to run is tracked in the persistent state,
        # not derived from the destination.
        _ = dest
        return True

    def evaluate(self) -> None:
        self.contents_sha256()


TargetStateEntry: TypeAlias = (
    TargetStateAbsent | TargetStateDir | TargetStateFile | TargetStateSymlink | TargetStateScript
)

TARGET_STATE_TYPES: tuple[type[TargetStateEntry], ...] = (
    TargetStateAbsent,
    TargetStateDir,
    TargetStateFile,
    TargetStateSymlink,
    TargetStateScript,
)
