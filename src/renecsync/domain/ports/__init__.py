"""Domain ports for persistence."""

from __future__ import annotations

from .persistence import (
    CenterRepository,
    CertifierRepository,
    CommitteeRepository,
    LinkRepository,
    NaturalKeyRepository,
    OccupationRepository,
    Pair,
    PairRepository,
    RegistryInspector,
    SectorRepository,
    StandardRepository,
    SyncJobRepository,
)
from .unit_of_work import (
    InspectionRepositories,
    InspectionUnitOfWork,
    RegistryRepositories,
    RegistryUnitOfWork,
    RepositoryCollection,
    UnitOfWork,
)

__all__ = [
    "CenterRepository",
    "CertifierRepository",
    "CommitteeRepository",
    "InspectionRepositories",
    "InspectionUnitOfWork",
    "LinkRepository",
    "NaturalKeyRepository",
    "OccupationRepository",
    "Pair",
    "PairRepository",
    "RegistryInspector",
    "RegistryRepositories",
    "RegistryUnitOfWork",
    "RepositoryCollection",
    "SectorRepository",
    "StandardRepository",
    "SyncJobRepository",
    "UnitOfWork",
]
