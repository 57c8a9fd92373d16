"""Filesystem and subprocess backed ``System``."""

from __future__ import annotations

import os
import shutil
import stat
import subprocess
import tempfile
from dataclasses import dataclass, field
from functools import partial
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

from dotstate.config.scripts import ScriptConfig, get_script_config
from dotstate.domain.dest_state import (
    DestStateAbsent,
    DestStateDir,
    DestStateFile,
    DestStateSymlink,
)
from dotstate.domain.errors import ScriptError, UnsupportedStateError
from dotstate.domain.lazy import LazyContents, LazyLinkname

if TYPE_CHECKING:
    from dotstate.domain.dest_state import DestStateEntry
    from dotstate.domain.ports.system import PersistentState

log = getLogger(__name__)

_SCRIPT_PERM = 0o700


def read_dest_state(path: Path) -> DestStateEntry:
    """Observe what currently exists at ``path`` without following symlinks.

    File contents and link targets are only read when first requested.
    """

    try:
        info = path.lstat()
    except FileNotFoundError:
        return DestStateAbsent(path)

    mode = info.st_mode
    if stat.S_ISDIR(mode):
        return DestStateDir(path, perm=stat.S_IMODE(mode))
    if stat.S_ISREG(mode):
        return DestStateFile(
            path,
            perm=stat.S_IMODE(mode),
            lazy_contents=LazyContents(path.read_bytes),
        )
    if stat.S_ISLNK(mode):
        return DestStateSymlink(path, lazy_linkname=LazyLinkname(partial(os.readlink, path)))
    raise UnsupportedStateError(f"Unsupported file type at {path}: {stat.filemode(mode)}")


@dataclass(slots=True)
class OsSystem:
    """Apply changes to the real filesystem.

    Permissions are set explicitly after every create so that the process
    umask never leaves a path with different bits than requested.
    """

    persistent_state: PersistentState
    script_config: ScriptConfig = field(default_factory=get_script_config)

    def chmod(self, path: Path, perm: int) -> None:
        log.info("chmod %o %s", perm, path)
        path.chmod(perm)

    def mkdir(self, path: Path, perm: int) -> None:
        log.info("mkdir %o %s", perm, path)
        path.mkdir(mode=perm)
        path.chmod(perm)

    def remove_all(self, path: Path) -> None:
        log.info("remove %s", path)
        try:
            mode = path.lstat().st_mode
        except FileNotFoundError:
            return
        if stat.S_ISDIR(mode):
            shutil.rmtree(path)
        else:
            path.unlink()

    def run_script(self, name: str, contents: bytes) -> None:
        log.info("run script %s", name)
        temp_dir = self.script_config.temp_dir
        if temp_dir is not None:
            temp_dir.mkdir(parents=True, exist_ok=True)
        fd, script_name = tempfile.mkstemp(prefix=f"{Path(name).name}.", dir=temp_dir)
        script_path = Path(script_name)
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(contents)
            script_path.chmod(_SCRIPT_PERM)
            completed = subprocess.run(  # noqa: S603
                [str(script_path)],
                cwd=self.script_config.working_dir,
                check=False,
            )
        finally:
            script_path.unlink(missing_ok=True)
        if completed.returncode != 0:
            raise ScriptError(name, returncode=completed.returncode)

    def write_file(self, path: Path, contents: bytes, perm: int) -> None:
        log.info("write %o %s", perm, path)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
        tmp = Path(tmp_name)
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(contents)
            tmp.chmod(perm)
            tmp.replace(path)
        except BaseException:
            tmp.unlink(missing_ok=True)
            raise

    def write_symlink(self, linkname: str, path: Path) -> None:
        log.info("symlink %s -> %s", path, linkname)
        path.symlink_to(linkname)

    def get(self, bucket: str, key: bytes) -> bytes | None:
        return self.persistent_state.get(bucket, key)

    def set(self, bucket: str, key: bytes, value: bytes) -> None:
        self.persistent_state.set(bucket, key, value)
