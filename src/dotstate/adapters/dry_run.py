"""``System`` wrapper that reports mutations instead of performing them."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from dotstate.domain.ports.system import System

log = getLogger(__name__)


@dataclass(slots=True)
class DryRunSystem:
    """Forward reads to ``system`` and drop every write.

    Persistent state writes are dropped too, so a dry run never marks a
    once-script as executed.
    """

    system: System

    def chmod(self, path: Path, perm: int) -> None:
        log.info("[dry-run] chmod %o %s", perm, path)

    def mkdir(self, path: Path, perm: int) -> None:
        log.info("[dry-run] mkdir %o %s", perm, path)

    def remove_all(self, path: Path) -> None:
        log.info("[dry-run] remove %s", path)

    def run_script(self, name: str, contents: bytes) -> None:
        log.info("[dry-run] run script %s (%d bytes)", name, len(contents))

    def write_file(self, path: Path, contents: bytes, perm: int) -> None:
        log.info("[dry-run] write %o %s (%d bytes)", perm, path, len(contents))

    def write_symlink(self, linkname: str, path: Path) -> None:
        log.info("[dry-run] symlink %s -> %s", path, linkname)

    def get(self, bucket: str, key: bytes) -> bytes | None:
        return self.system.get(bucket, key)

    def set(self, bucket: str, key: bytes, value: bytes) -> None:
        _ = value
        log.info("[dry-run] set %s/%s", bucket, key.decode(errors="replace"))
