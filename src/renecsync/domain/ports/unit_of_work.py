"""Unit-of-work abstractions for coordinating repositories."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from renecsync.domain.ports.persistence import (
        CenterRepository,
        CertifierRepository,
        CommitteeRepository,
        LinkRepository,
        OccupationRepository,
        RegistryInspector,
        SectorRepository,
        StandardRepository,
        SyncJobRepository,
    )


@runtime_checkable
class RepositoryCollection(Protocol):
    """Marker protocol for groups of repositories managed together."""


@runtime_checkable
class UnitOfWork[TRepositories: RepositoryCollection](Protocol):
    """Generic unit-of-work boundary around a repository collection."""

    @property
    def repositories(self) -> TRepositories: ...

    def __enter__(self) -> UnitOfWork[TRepositories]: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


@dataclass(slots=True)
class RegistryRepositories(RepositoryCollection):
    """Repositories written by a registry sync run."""

    sectors: SectorRepository
    committees: CommitteeRepository
    standards: StandardRepository
    certifiers: CertifierRepository
    centers: CenterRepository
    occupations: OccupationRepository
    accreditations: LinkRepository
    offerings: LinkRepository
    sync_jobs: SyncJobRepository


@dataclass(slots=True)
class InspectionRepositories(RepositoryCollection):
    """Read-only view used by the validator."""

    inspector: RegistryInspector


type RegistryUnitOfWork = UnitOfWork[RegistryRepositories]
type InspectionUnitOfWork = UnitOfWork[InspectionRepositories]
