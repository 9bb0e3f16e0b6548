"""SQLAlchemy adapter package for renecsync."""

from __future__ import annotations

from .mappings import TABLE_BY_ENTITY, mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyAccreditationRepository,
    SqlAlchemyCenterRepository,
    SqlAlchemyCertifierRepository,
    SqlAlchemyCommitteeRepository,
    SqlAlchemyOccupationRepository,
    SqlAlchemyOfferingRepository,
    SqlAlchemyRegistryInspector,
    SqlAlchemySectorRepository,
    SqlAlchemyStandardRepository,
    SqlAlchemySyncJobRepository,
    UnsupportedDialectError,
)
from .unit_of_work import (
    SqlAlchemyInspectionUnitOfWork,
    SqlAlchemyRegistryUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "TABLE_BY_ENTITY",
    "SqlAlchemyAccreditationRepository",
    "SqlAlchemyCenterRepository",
    "SqlAlchemyCertifierRepository",
    "SqlAlchemyCommitteeRepository",
    "SqlAlchemyInspectionUnitOfWork",
    "SqlAlchemyOccupationRepository",
    "SqlAlchemyOfferingRepository",
    "SqlAlchemyRegistryInspector",
    "SqlAlchemyRegistryUnitOfWork",
    "SqlAlchemySectorRepository",
    "SqlAlchemyStandardRepository",
    "SqlAlchemySyncJobRepository",
    "StartupError",
    "UnsupportedDialectError",
    "configured_engine",
    "is_started",
    "mapper_registry",
    "shutdown",
    "startup",
]
