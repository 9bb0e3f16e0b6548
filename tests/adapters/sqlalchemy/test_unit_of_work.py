from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine, select

from renecsync.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyInspectionUnitOfWork,
    SqlAlchemyRegistryUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)
from renecsync.domain.model import RegistryEntity, Standard, SyncJob

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.engine import Engine


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def test_registry_unit_of_work_requires_startup() -> None:
    assert not is_started()
    with pytest.raises(StartupError):
        SqlAlchemyRegistryUnitOfWork()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_engine("sqlite+pysqlite:///:memory:", future=True)
    engine_b = create_engine("sqlite+pysqlite:///:memory:", future=True)

    startup(engine=engine_a, force=True)

    with pytest.raises(StartupError):
        startup(engine=engine_b)

    startup(engine=engine_b, force=True)
    assert configured_engine() is engine_b


def test_repositories_unavailable_outside_context(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    uow = SqlAlchemyRegistryUnitOfWork()

    with pytest.raises(StartupError):
        _ = uow.repositories


def test_commit_persists_across_units_of_work(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    now = datetime.now(tz=UTC)

    with SqlAlchemyRegistryUnitOfWork() as uow:
        identities = uow.repositories.standards.upsert_many(
            [Standard(code="EC0249", title="Consultoría")]
        )
        uow.repositories.sync_jobs.add(SyncJob(started_at=now, completed_at=now))
        uow.commit()

    with SqlAlchemyInspectionUnitOfWork() as uow:
        inspector = uow.repositories.inspector
        assert inspector.count(RegistryEntity.STANDARD) == 1
        assert inspector.count(RegistryEntity.SYNC_JOB) == 1

    with SqlAlchemyRegistryUnitOfWork() as uow:
        assert uow.repositories.standards.identity_map() == identities


def test_exception_rolls_back_pending_writes(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with pytest.raises(RuntimeError), SqlAlchemyRegistryUnitOfWork() as uow:
        uow.repositories.standards.upsert_many([Standard(code="EC0249", title="Consultoría")])
        raise RuntimeError("boom")

    with SqlAlchemyRegistryUnitOfWork() as uow:
        stored = uow.session.execute(select(Standard)).scalars().all()

    assert stored == []
