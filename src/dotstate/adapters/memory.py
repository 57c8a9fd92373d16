"""In-memory ``System`` for tests and previews.

``MemorySystem`` keeps a flat map of paths to nodes, records every call it
receives and can derive the destination state of any path, so a full
apply/re-observe/apply cycle runs without touching the disk. Parent
directories are not tracked.
"""

from __future__ import annotations

import errno
import os
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Final, TypeAlias

from dotstate.domain.dest_state import (
    DestStateAbsent,
    DestStateDir,
    DestStateFile,
    DestStateSymlink,
)
from dotstate.domain.errors import ScriptError, UnsupportedStateError
from dotstate.domain.lazy import LazyContents, LazyLinkname

if TYPE_CHECKING:
    from pathlib import Path

    from dotstate.domain.dest_state import DestStateEntry
    from dotstate.domain.ports.system import PersistentState

MUTATING_CALLS: Final[frozenset[str]] = frozenset(
    {"chmod", "mkdir", "remove_all", "write_file", "write_symlink"}
)


class MemoryPersistentState:
    """Bucketed key-value store held in a dict."""

    def __init__(self) -> None:
        self.buckets: dict[str, dict[bytes, bytes]] = {}

    def get(self, bucket: str, key: bytes) -> bytes | None:
        return self.buckets.get(bucket, {}).get(key)

    def set(self, bucket: str, key: bytes, value: bytes) -> None:
        self.buckets.setdefault(bucket, {})[key] = value


@dataclass(frozen=True, slots=True)
class MemoryDir:
    perm: int


@dataclass(frozen=True, slots=True)
class MemoryFile:
    contents: bytes
    perm: int


@dataclass(frozen=True, slots=True)
class MemorySymlink:
    linkname: str


MemoryNode: TypeAlias = MemoryDir | MemoryFile | MemorySymlink


@dataclass(frozen=True, slots=True)
class SystemCall:
    method: str
    args: tuple[object, ...]


def _os_error(cls: type[OSError], code: int, path: Path) -> OSError:
    return cls(code, os.strerror(code), str(path))


@dataclass(slots=True)
class MemorySystem:
    nodes: dict[Path, MemoryNode] = field(default_factory=dict)
    persistent_state: PersistentState = field(default_factory=MemoryPersistentState)
    failing_scripts: set[str] = field(default_factory=set)
    failures: dict[str, Exception] = field(default_factory=dict)
    calls: list[SystemCall] = field(default_factory=list)

    def _record(self, method: str, *args: object) -> None:
        self.calls.append(SystemCall(method, args))
        failure = self.failures.get(method)
        if failure is not None:
            raise failure

    def calls_to(self, method: str) -> list[SystemCall]:
        return [call for call in self.calls if call.method == method]

    @property
    def mutations(self) -> list[SystemCall]:
        return [call for call in self.calls if call.method in MUTATING_CALLS]

    @property
    def scripts_run(self) -> list[tuple[str, bytes]]:
        return [
            (str(call.args[0]), bytes(call.args[1]))  # type: ignore[arg-type]
            for call in self.calls_to("run_script")
        ]

    def reset_calls(self) -> None:
        self.calls.clear()

    def dest_state(self, path: Path) -> DestStateEntry:
        """Return the destination state a scan of ``path`` would observe."""

        match self.nodes.get(path):
            case None:
                return DestStateAbsent(path)
            case MemoryDir(perm=perm):
                return DestStateDir(path, perm=perm)
            case MemoryFile(contents=contents, perm=perm):
                return DestStateFile(path, perm=perm, lazy_contents=LazyContents.from_bytes(contents))
            case MemorySymlink(linkname=linkname):
                return DestStateSymlink(path, lazy_linkname=LazyLinkname.from_str(linkname))

    def chmod(self, path: Path, perm: int) -> None:
        self._record("chmod", path, perm)
        match self.nodes.get(path):
            case None:
                raise _os_error(FileNotFoundError, errno.ENOENT, path)
            case MemoryDir() | MemoryFile() as node:
                self.nodes[path] = replace(node, perm=perm)
            case MemorySymlink():
                raise UnsupportedStateError(f"Cannot change permissions of symlink {path}")

    def mkdir(self, path: Path, perm: int) -> None:
        self._record("mkdir", path, perm)
        if path in self.nodes:
            raise _os_error(FileExistsError, errno.EEXIST, path)
        self.nodes[path] = MemoryDir(perm)

    def remove_all(self, path: Path) -> None:
        self._record("remove_all", path)
        for candidate in [p for p in self.nodes if p == path or path in p.parents]:
            del self.nodes[candidate]

    def run_script(self, name: str, contents: bytes) -> None:
        self._record("run_script", name, contents)
        if name in self.failing_scripts:
            raise ScriptError(name, returncode=1)

    def write_file(self, path: Path, contents: bytes, perm: int) -> None:
        self._record("write_file", path, contents, perm)
        if isinstance(self.nodes.get(path), MemoryDir):
            raise _os_error(IsADirectoryError, errno.EISDIR, path)
        self.nodes[path] = MemoryFile(contents, perm)

    def write_symlink(self, linkname: str, path: Path) -> None:
        self._record("write_symlink", linkname, path)
        if path in self.nodes:
            raise _os_error(FileExistsError, errno.EEXIST, path)
        self.nodes[path] = MemorySymlink(linkname)

    def get(self, bucket: str, key: bytes) -> bytes | None:
        self._record("get", bucket, key)
        return self.persistent_state.get(bucket, key)

    def set(self, bucket: str, key: bytes, value: bytes) -> None:
        self._record("set", bucket, key, value)
        self.persistent_state.set(bucket, key, value)
