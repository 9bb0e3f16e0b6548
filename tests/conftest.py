from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker

from renecsync.adapters.sqlalchemy import start_mappers
from renecsync.adapters.sqlalchemy.migrations import upgrade_head
from renecsync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyInspectionUnitOfWork,
    SqlAlchemyRegistryUnitOfWork,
    shutdown,
    startup,
)

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


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
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyRegistryUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyRegistryUnitOfWork:
        return SqlAlchemyRegistryUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()


@pytest.fixture
def sqlite_inspection_unit_of_work(
    sqlite_unit_of_work: Callable[[], SqlAlchemyRegistryUnitOfWork],
) -> Callable[[], SqlAlchemyInspectionUnitOfWork]:
    _ = sqlite_unit_of_work

    def factory() -> SqlAlchemyInspectionUnitOfWork:
        return SqlAlchemyInspectionUnitOfWork()

    return factory
