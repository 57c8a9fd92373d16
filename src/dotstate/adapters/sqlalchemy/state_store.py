"""SQLAlchemy-backed persistent state."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy import create_engine, delete, insert, select
from sqlalchemy.orm import Session, sessionmaker

from dotstate.config.storage import get_database_config

from .mappings import create_all_tables, state_entry_table

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when the SQLAlchemy state store is used before initialisation."""


@dataclass(slots=True)
class _AdapterState:
    _engine: Engine | None = None
    _session_factory: sessionmaker[Session] | None = None

    @property
    def engine(self) -> Engine | None:
        return self._engine

    @engine.setter
    def engine(self, value: Engine | None) -> None:
        self._session_factory = None
        self._engine = value

    @property
    def session_factory(self) -> sessionmaker[Session]:
        if self._engine is None:
            raise StartupError(
                "SQLAlchemy state store not initialised. Call dotstate.adapters.sqlalchemy."
                "state_store.startup() before requesting persistent state."
            )
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        return self._session_factory


_STATE = _AdapterState()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Initialise the SQLAlchemy engine, tables, and session factory."""

    if _STATE.engine is not None and not force:
        raise StartupError(
            "SQLAlchemy state store already initialised. Pass force=True to reconfigure."
        )

    resolved_engine = engine or create_engine(
        database_uri or get_database_config().uri, future=True
    )
    create_all_tables(resolved_engine)
    log.debug("Persistent state store ready at %s", resolved_engine.url)

    _STATE.engine = resolved_engine


def configured_engine() -> Engine | None:
    """Return the engine currently managed by the adapter (if any)."""

    return _STATE.engine


def is_started() -> bool:
    """Return whether the adapter has been initialised."""

    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the managed engine and reset state (primarily for tests)."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.engine = None


class SqlAlchemyPersistentState:
    """Bucketed key-value store in the ``state_entry`` table.

    ``set`` replaces a key inside one transaction, so readers see either the
    old or the new value.
    """

    def __init__(self, session_factory: sessionmaker[Session] | None = None) -> None:
        self.session_factory: sessionmaker[Session] = session_factory or _STATE.session_factory

    def get(self, bucket: str, key: bytes) -> bytes | None:
        stmt = (
            select(state_entry_table.c.value)
            .where(state_entry_table.c.bucket == bucket)
            .where(state_entry_table.c.key == key)
        )
        with self.session_factory() as session:
            return session.execute(stmt).scalar_one_or_none()

    def set(self, bucket: str, key: bytes, value: bytes) -> None:
        with self.session_factory.begin() as session:
            session.execute(
                delete(state_entry_table)
                .where(state_entry_table.c.bucket == bucket)
                .where(state_entry_table.c.key == key)
            )
            session.execute(
                insert(state_entry_table).values(
                    bucket=bucket,
                    key=key,
                    value=value,
                    updated_at=datetime.now(UTC),
                )
            )
