"""Run the full registry reconciliation in dependency order."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from renecsync.config.sync import (
    DEFAULT_COMMITTEE_BATCH_SIZE,
    DEFAULT_LINK_BATCH_SIZE,
    DEFAULT_ORGANIZATION_BATCH_SIZE,
    DEFAULT_SECTOR_BATCH_SIZE,
    DEFAULT_STANDARD_BATCH_SIZE,
    RENEC_SOURCE_URL,
)
from renecsync.domain.extracts import MandatoryExtractMissingError

from .committees import resolve_committees
from .graph import build_accreditations, build_offerings
from .key_index import CanonicalKeyIndex, ResolvedIdentities
from .ledger import SyncStats, record_sync_job
from .organizations import resolve_centers, resolve_certifiers
from .sectors import resolve_sectors
from .standards import attach_occupations, resolve_standards

if TYPE_CHECKING:
    from collections.abc import Callable

    from renecsync.domain.extracts import RegistryExtracts, StandardRecord
    from renecsync.domain.model import SyncJob
    from renecsync.domain.ports import RegistryUnitOfWork

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class SyncOptions:
    source_url: str = RENEC_SOURCE_URL
    sector_batch_size: int = DEFAULT_SECTOR_BATCH_SIZE
    committee_batch_size: int = DEFAULT_COMMITTEE_BATCH_SIZE
    standard_batch_size: int = DEFAULT_STANDARD_BATCH_SIZE
    organization_batch_size: int = DEFAULT_ORGANIZATION_BATCH_SIZE
    link_batch_size: int = DEFAULT_LINK_BATCH_SIZE


@dataclass(slots=True)
class RegistrySyncResult:
    """Outcome of a sync run."""

    job: SyncJob
    stats: SyncStats
    errors: list[str] = field(default_factory=list[str])

    @property
    def succeeded(self) -> bool:
        return not self.errors


class _StepRunner:
    """Step boundary: a failing step is logged and recorded, and the run moves on."""

    def __init__(self) -> None:
        self.errors: list[str] = []

    def run[T](self, name: str, step: Callable[[], T]) -> T | None:
        log.info("Step %s: starting", name)
        try:
            return step()
        except Exception as exc:  # noqa: BLE001
            log.exception("Step %s failed", name)
            self.errors.append(f"{name}: {exc}")
            return None


def sync_registry(
    extracts: RegistryExtracts,
    *,
    unit_of_work_factory: Callable[[], RegistryUnitOfWork],
    options: SyncOptions | None = None,
    clock: Callable[[], datetime] | None = None,
) -> RegistrySyncResult:
    """Reconcile ``extracts`` into the store and record a ledger entry.

    Raises ``MandatoryExtractMissingError`` before any write when the standard extract is
    absent or empty.
    """

    if not extracts.has_standards:
        raise MandatoryExtractMissingError(
            "The standard extract is missing or empty; nothing to synchronise"
        )
    standards: list[StandardRecord] = list(extracts.standards or ())

    opts = options or SyncOptions()
    now = clock or (lambda: datetime.now(tz=UTC))
    started_at = now()
    runner = _StepRunner()
    stats = SyncStats()
    identities = ResolvedIdentities()
    index = CanonicalKeyIndex(committees=extracts.committees, details=extracts.details)

    if sectors := runner.run(
        "sectors",
        lambda: resolve_sectors(
            unit_of_work_factory,
            standards,
            batch_size=opts.sector_batch_size,
            source_url=opts.source_url,
        ),
    ):
        stats.sectors = sectors
        identities.sectors = sectors.identities

    committee_records = extracts.committees
    if committee_records is None:
        log.info("Step committees: skipped, no committee extract")
    elif committees := runner.run(
        "committees",
        lambda: resolve_committees(
            unit_of_work_factory,
            committee_records,
            sector_ids=identities.sectors,
            batch_size=opts.committee_batch_size,
            source_url=opts.source_url,
        ),
    ):
        stats.committees = committees
        identities.committees = committees.identities

    if resolved_standards := runner.run(
        "standards",
        lambda: resolve_standards(
            unit_of_work_factory,
            standards,
            index=index,
            identities=identities,
            batch_size=opts.standard_batch_size,
            source_url=opts.source_url,
        ),
    ):
        stats.standards = resolved_standards
        identities.standards = resolved_standards.identities

    if extracts.details is None:
        log.info("Step occupations: skipped, no standard detail extract")
    elif occupations := runner.run(
        "occupations",
        lambda: attach_occupations(
            unit_of_work_factory,
            identities.standards,
            index=index,
            batch_size=opts.link_batch_size,
        ),
    ):
        stats.occupations = occupations

    certifier_registry = extracts.certifiers
    if certifier_registry is None:
        log.info("Step certifiers: skipped, no certifier registry")
    elif certifiers := runner.run(
        "certifiers",
        lambda: resolve_certifiers(
            unit_of_work_factory,
            certifier_registry.registry,
            batch_size=opts.organization_batch_size,
            source_url=opts.source_url,
        ),
    ):
        stats.certifiers = certifiers
        identities.certifiers = certifiers.identities

    center_registry = extracts.centers
    if center_registry is None:
        log.info("Step centers: skipped, no center registry")
    elif centers := runner.run(
        "centers",
        lambda: resolve_centers(
            unit_of_work_factory,
            center_registry.registry,
            batch_size=opts.organization_batch_size,
            source_url=opts.source_url,
        ),
    ):
        stats.centers = centers
        identities.centers = centers.identities

    matrix = extracts.matrix
    if matrix is None:
        log.info("Step accreditations: skipped, no accreditation matrix")
    elif accreditations := runner.run(
        "accreditations",
        lambda: build_accreditations(
            unit_of_work_factory, matrix, batch_size=opts.link_batch_size
        ),
    ):
        stats.accreditations = accreditations

    if center_registry is None:
        log.info("Step offerings: skipped, no center registry")
    elif offerings := runner.run(
        "offerings",
        lambda: build_offerings(
            unit_of_work_factory, center_registry.registry, batch_size=opts.link_batch_size
        ),
    ):
        stats.offerings = offerings

    job = record_sync_job(
        unit_of_work_factory,
        stats,
        started_at=started_at,
        completed_at=now(),
        errors=runner.errors,
    )
    return RegistrySyncResult(job=job, stats=stats, errors=list(runner.errors))
