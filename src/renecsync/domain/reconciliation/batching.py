"""Batch writers: chunk work into fixed-size, separately committed units of work."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from itertools import islice
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator, Sequence
    from uuid import UUID

    from renecsync.domain.ports import (
        NaturalKeyRepository,
        PairRepository,
        RegistryUnitOfWork,
    )
    from renecsync.domain.ports.unit_of_work import RegistryRepositories

log = logging.getLogger(__name__)


def chunked[T](items: Iterable[T], size: int) -> Iterator[list[T]]:
    """Yield consecutive lists of at most ``size`` items."""

    if size < 1:
        raise ValueError("Batch size must be positive")
    iterator = iter(items)
    while batch := list(islice(iterator, size)):
        yield batch


@dataclass(slots=True)
class RecordStepReport[TKey]:
    """Outcome of one record-upsert step."""

    processed: int = 0
    skipped: int = 0
    identities: dict[TKey, UUID] = field(default_factory=dict)


@dataclass(slots=True)
class LinkReport:
    """Outcome of one join-relation pass.

    ``attempted`` counts every candidate pair read from the source; the difference to
    ``inserted`` is the skipped share, which splits into unresolved pairs and pairs that
    already existed.
    """

    attempted: int = 0
    inserted: int = 0
    unresolved: int = 0

    @property
    def skipped(self) -> int:
        return self.attempted - self.inserted

    @property
    def duplicates(self) -> int:
        return self.skipped - self.unresolved


def upsert_in_batches[TEntity, TKey](
    unit_of_work_factory: Callable[[], RegistryUnitOfWork],
    repository: Callable[[RegistryRepositories], NaturalKeyRepository[TEntity, TKey]],
    entities: Sequence[TEntity],
    *,
    batch_size: int,
    label: str,
) -> dict[TKey, UUID]:
    """Upsert ``entities`` one committed batch at a time; return the merged identity map."""

    identities: dict[TKey, UUID] = {}
    written = 0
    for batch in chunked(entities, batch_size):
        with unit_of_work_factory() as uow:
            identities.update(repository(uow.repositories).upsert_many(batch))
            uow.commit()
        log.debug("%s batch %d-%d written", label, written, written + len(batch))
        written += len(batch)
    return identities


def insert_pairs_in_batches[TLeft, TRight](
    unit_of_work_factory: Callable[[], RegistryUnitOfWork],
    repository: Callable[[RegistryRepositories], PairRepository[TLeft, TRight]],
    pairs: Iterable[tuple[TLeft, TRight]],
    *,
    batch_size: int,
    label: str,
) -> int:
    """Insert distinct ``pairs`` skipping stored ones; return how many rows were created."""

    inserted = 0
    for batch in chunked(dict.fromkeys(pairs), batch_size):
        with unit_of_work_factory() as uow:
            created = repository(uow.repositories).insert_missing(batch)
            uow.commit()
        log.debug("%s: %d of %d pair(s) inserted", label, created, len(batch))
        inserted += created
    return inserted

