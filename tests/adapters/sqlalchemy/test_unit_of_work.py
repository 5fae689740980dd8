from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine

from osmsync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyElementUnitOfWork,
    StartupError,
    is_started,
    shutdown,
    startup,
)
from osmsync.domain.model import ElementCategory, ElementData

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.engine import Engine


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def test_sqlalchemy_unit_of_work_requires_startup() -> None:
    with pytest.raises(StartupError):
        SqlAlchemyElementUnitOfWork()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_engine("sqlite+pysqlite:///:memory:", future=True)
    engine_b = create_engine("sqlite+pysqlite:///:memory:", future=True)

    startup(engine=engine_a, force=True)

    with pytest.raises(StartupError):
        startup(engine=engine_b)

    startup(engine=engine_b, force=True)
    assert is_started()
    assert SqlAlchemyElementUnitOfWork().session_factory.kw["bind"] is engine_b


def test_repositories_require_open_unit_of_work(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with pytest.raises(StartupError):
        _ = SqlAlchemyElementUnitOfWork().repositories


def test_unit_of_work_persists_committed_elements(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with SqlAlchemyElementUnitOfWork() as uow:
        uow.repositories.elements.create(ElementCategory.WAY, ElementData(osm_id=1))
        uow.commit()

    with SqlAlchemyElementUnitOfWork() as uow:
        assert uow.repositories.elements.find_one(ElementCategory.WAY, 1) is not None


def test_unit_of_work_rolls_back_on_error(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with pytest.raises(RuntimeError), SqlAlchemyElementUnitOfWork() as uow:
        uow.repositories.elements.create(ElementCategory.NODE, ElementData(osm_id=2))
        raise RuntimeError("boom")

    with SqlAlchemyElementUnitOfWork() as uow:
        assert uow.repositories.elements.find_one(ElementCategory.NODE, 2) is None


def test_shutdown_forgets_engine(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    shutdown()

    assert not is_started()
    with pytest.raises(StartupError):
        SqlAlchemyElementUnitOfWork()


def test_unit_of_work_cannot_be_entered_twice(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    uow = SqlAlchemyElementUnitOfWork()

    with uow, pytest.raises(StartupError):
        uow.__enter__()
