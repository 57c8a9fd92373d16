"""Bookkeeping for scripts that run at most once.

Records live in the ``scriptOnce`` bucket of the persistent state. The key
is ``"<name>:<hex sha256 of contents>"`` and must stay stable across
releases: changing it makes every previously run script run again.
"""

from __future__ import annotations

from datetime import datetime  # noqa: TC003
from typing import Final

from pydantic import BaseModel, ConfigDict, Field

SCRIPT_ONCE_STATE_BUCKET: Final[str] = "scriptOnce"


class ScriptOnceState(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    executed_at: datetime = Field(alias="executedAt")

    def to_json(self) -> bytes:
        return self.model_dump_json(by_alias=True).encode()

    @classmethod
    def from_json(cls, data: bytes) -> ScriptOnceState:
        return cls.model_validate_json(data)


def script_once_key(name: str, contents_sha256: bytes) -> bytes:
    return f"{name}:{contents_sha256.hex()}".encode()
