from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker

from osmsync.adapters.sqlalchemy import SqlAlchemyElementStore, start_mappers
from osmsync.adapters.sqlalchemy.migrations import upgrade_head
from osmsync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyElementUnitOfWork,
    shutdown,
    startup,
)
from tests.helpers.elements import FakeElementStore

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture
def fake_store() -> FakeElementStore:
    return FakeElementStore()


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    start_mappers()
    upgrade_head(engine=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, future=True)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sqlite_store(sqlite_session: Session) -> SqlAlchemyElementStore:
    return SqlAlchemyElementStore(sqlite_session)


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyElementUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyElementUnitOfWork:
        return SqlAlchemyElementUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()
