"""SQLAlchemy-backed unit of work for element reconciliation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from osmsync.adapters.sqlalchemy.mappings import start_mappers
from osmsync.adapters.sqlalchemy.migrations import upgrade_head
from osmsync.adapters.sqlalchemy.repositories import SqlAlchemyElementStore
from osmsync.config import get_database_uri
from osmsync.domain.ports.unit_of_work import ElementRepositories

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when the element database is used before ``startup()`` or reconfigured twice."""


_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Open the element database, migrate it to the latest schema and map the model."""

    global _engine, _session_factory  # noqa: PLW0603

    if _engine is not None and not force:
        raise StartupError("Element database already started. Pass force=True to reconfigure.")

    resolved_engine = engine or create_engine(database_uri or get_database_uri())
    start_mappers()
    upgrade_head(engine=resolved_engine)
    log.debug("Element database ready at %s", resolved_engine.url)

    _engine = resolved_engine
    _session_factory = sessionmaker(bind=resolved_engine, expire_on_commit=False)


def is_started() -> bool:
    return _engine is not None


def shutdown() -> None:
    """Dispose the engine and forget it (primarily for tests)."""

    global _engine, _session_factory  # noqa: PLW0603

    if _engine is not None:
        _engine.dispose()
    _engine = None
    _session_factory = None


class SqlAlchemyElementUnitOfWork:
    """One session per ``with`` block; the element store lives as long as the block."""

    def __init__(self) -> None:
        if _session_factory is None:
            raise StartupError(
                "Element database not started. Call osmsync.adapters.sqlalchemy."
                "unit_of_work.startup() before opening a unit of work."
            )
        self.session_factory: sessionmaker[Session] = _session_factory
        self._session: Session | None = None
        self._repositories: ElementRepositories | None = None

    def __enter__(self) -> SqlAlchemyElementUnitOfWork:
        if self._session is not None:
            raise StartupError("Unit of work already entered")
        self._session = self.session_factory()
        self._repositories = ElementRepositories(elements=SqlAlchemyElementStore(self._session))
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self.session
        if exc_type is not None:
            session.rollback()
        session.close()
        self._session = None
        self._repositories = None
        return False

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work session not open")
        return self._session

    @property
    def repositories(self) -> ElementRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work session not open")
        return self._repositories

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


if TYPE_CHECKING:
    from osmsync.domain.ports.unit_of_work import ElementUnitOfWork

    _uow_check: ElementUnitOfWork = SqlAlchemyElementUnitOfWork()
