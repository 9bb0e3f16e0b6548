"""Ports for persisting registry entities."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence
    from uuid import UUID

    from renecsync.domain.model import (
        Center,
        Certifier,
        Committee,
        RegistryEntity,
        Sector,
        Standard,
        SyncJob,
    )

type Pair = tuple[UUID, UUID]


@runtime_checkable
class NaturalKeyRepository[TEntity, TKey](Protocol):
    """Upsert entities by natural key and expose the resulting identities."""

    def upsert_many(self, entities: Sequence[TEntity]) -> dict[TKey, UUID]:
        """Insert or refresh ``entities``; return natural key to canonical identity."""
        ...

    def identity_map(self) -> dict[TKey, UUID]:
        """Return natural key to canonical identity for every stored row."""
        ...


@runtime_checkable
class SectorRepository(NaturalKeyRepository["Sector", int], Protocol):
    """Repository contract for sectors."""


@runtime_checkable
class CommitteeRepository(NaturalKeyRepository["Committee", str], Protocol):
    """Repository contract for committees."""


@runtime_checkable
class StandardRepository(NaturalKeyRepository["Standard", str], Protocol):
    """Repository contract for standards."""


@runtime_checkable
class CertifierRepository(NaturalKeyRepository["Certifier", str], Protocol):
    """Repository contract for certifiers."""


@runtime_checkable
class CenterRepository(NaturalKeyRepository["Center", str], Protocol):
    """Repository contract for centers."""


@runtime_checkable
class PairRepository[TLeft, TRight](Protocol):
    """Skip-duplicate writes for join relations keyed by a pair."""

    def insert_missing(self, pairs: Sequence[tuple[TLeft, TRight]]) -> int:
        """Insert pairs not yet stored; return how many rows were created."""
        ...


@runtime_checkable
class LinkRepository(PairRepository["UUID", "UUID"], Protocol):
    """Join relation between two registry entities."""


@runtime_checkable
class OccupationRepository(PairRepository["UUID", str], Protocol):
    """Standard to free-text occupation label."""


@runtime_checkable
class SyncJobRepository(Protocol):
    def add(self, job: SyncJob) -> None: ...


@runtime_checkable
class RegistryInspector(Protocol):
    """Read-only queries used by the coverage validator."""

    def count(self, entity: RegistryEntity) -> int: ...

    def count_populated(self, entity: RegistryEntity, field: str) -> int: ...

    def standard_codes(self) -> list[str]: ...

    def count_orphans(
        self,
        entity: RegistryEntity,
        references: Mapping[str, RegistryEntity],
    ) -> int:
        """Count rows of ``entity`` where any non-null reference column has no target."""
        ...

    def count_distinct(self, entity: RegistryEntity, field: str) -> int: ...

    def table_counts(self, entities: Iterable[RegistryEntity]) -> dict[RegistryEntity, int]: ...
