"""Lazily computed, cached file contents and symlink targets.

Each value is computed at most once per instance. A failure is cached as
well and raised again on every later access, so repeated comparisons never
re-read a source that already failed.
"""

from __future__ import annotations

import hashlib
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable


def sha256_sum(data: bytes) -> bytes:
    """Return the raw SHA256 digest of ``data``."""

    return hashlib.sha256(data).digest()


class LazyContents:
    """Contents that are read or rendered on first use."""

    __slots__ = ("_contents", "_contents_error", "_contents_func", "_contents_sha256")

    def __init__(
        self,
        contents_func: Callable[[], bytes] | None = None,
        *,
        contents: bytes | None = None,
        contents_sha256: bytes | None = None,
    ) -> None:
        if contents_func is None and contents is None:
            raise ValueError("LazyContents needs either contents or a contents function")
        self._contents_func = contents_func
        self._contents = contents
        self._contents_sha256 = contents_sha256
        self._contents_error: Exception | None = None

    @classmethod
    def from_bytes(cls, contents: bytes) -> LazyContents:
        return cls(contents=contents)

    def contents(self) -> bytes:
        if self._contents is not None:
            return self._contents
        if self._contents_error is not None:
            raise self._contents_error.with_traceback(None)
        contents_func = self._contents_func
        if contents_func is None:
            raise RuntimeError("LazyContents has neither contents nor a contents function")
        try:
            self._contents = contents_func()
        except Exception as exc:
            self._contents_error = exc
            raise
        self._contents_func = None
        return self._contents

    def contents_sha256(self) -> bytes:
        if self._contents_sha256 is None:
            self._contents_sha256 = sha256_sum(self.contents())
        return self._contents_sha256


class LazyLinkname:
    """Symlink target that is resolved on first use."""

    __slots__ = ("_linkname", "_linkname_error", "_linkname_func")

    def __init__(
        self,
        linkname_func: Callable[[], str] | None = None,
        *,
        linkname: str | None = None,
    ) -> None:
        if linkname_func is None and linkname is None:
            raise ValueError("LazyLinkname needs either a linkname or a linkname function")
        self._linkname_func = linkname_func
        self._linkname = linkname
        self._linkname_error: Exception | None = None

    @classmethod
    def from_str(cls, linkname: str) -> LazyLinkname:
        return cls(linkname=linkname)

    def linkname(self) -> str:
        if self._linkname is not None:
            return self._linkname
        if self._linkname_error is not None:
            raise self._linkname_error.with_traceback(None)
        linkname_func = self._linkname_func
        if linkname_func is None:
            raise RuntimeError("LazyLinkname has neither a linkname nor a linkname function")
        try:
            self._linkname = linkname_func()
        except Exception as exc:
            self._linkname_error = exc
            raise
        self._linkname_func = None
        return self._linkname
