"""Sync ledger: one audit row per run."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from renecsync.domain.model import SyncJob, SyncJobStatus, SyncJobType

from .batching import LinkReport, RecordStepReport

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from datetime import datetime

    from renecsync.domain.ports import RegistryUnitOfWork

log = logging.getLogger(__name__)


@dataclass(slots=True)
class SyncStats:
    """Per-step outcome of one sync run."""

    sectors: RecordStepReport[int] = field(default_factory=RecordStepReport)
    committees: RecordStepReport[str] = field(default_factory=RecordStepReport)
    standards: RecordStepReport[str] = field(default_factory=RecordStepReport)
    certifiers: RecordStepReport[str] = field(default_factory=RecordStepReport)
    centers: RecordStepReport[str] = field(default_factory=RecordStepReport)
    occupations: LinkReport = field(default_factory=LinkReport)
    accreditations: LinkReport = field(default_factory=LinkReport)
    offerings: LinkReport = field(default_factory=LinkReport)

    @property
    def items_processed(self) -> int:
        # sectors are derived from standards and reported in the breakdown only
        return (
            self.standards.processed
            + self.committees.processed
            + self.certifiers.processed
            + self.centers.processed
            + self.accreditations.inserted
            + self.offerings.inserted
            + self.occupations.inserted
        )

    @property
    def items_skipped(self) -> int:
        return (
            self.standards.skipped
            + self.committees.skipped
            + self.certifiers.skipped
            + self.centers.skipped
            + self.accreditations.skipped
            + self.offerings.skipped
        )

    def breakdown(self) -> dict[str, int]:
        return {
            "sectors": self.sectors.processed,
            "committees": self.committees.processed,
            "committees_skipped": self.committees.skipped,
            "standards": self.standards.processed,
            "standards_skipped": self.standards.skipped,
            "certifiers": self.certifiers.processed,
            "certifiers_skipped": self.certifiers.skipped,
            "centers": self.centers.processed,
            "centers_skipped": self.centers.skipped,
            "occupations": self.occupations.inserted,
            "accreditations": self.accreditations.inserted,
            "accreditations_attempted": self.accreditations.attempted,
            "accreditations_skipped": self.accreditations.skipped,
            "accreditations_unresolved": self.accreditations.unresolved,
            "offerings": self.offerings.inserted,
            "offerings_attempted": self.offerings.attempted,
            "offerings_skipped": self.offerings.skipped,
            "offerings_unresolved": self.offerings.unresolved,
        }


def build_sync_job(
    stats: SyncStats,
    *,
    started_at: datetime,
    completed_at: datetime,
    errors: Sequence[str] = (),
) -> SyncJob:
    processed = stats.items_processed
    return SyncJob(
        started_at=started_at,
        completed_at=completed_at,
        job_type=SyncJobType.FULL_SYNC,
        status=SyncJobStatus.COMPLETED_WITH_ERRORS if errors else SyncJobStatus.COMPLETED,
        items_processed=processed,
        # upserts cannot tell creates from updates
        items_created=processed,
        items_updated=0,
        items_skipped=stats.items_skipped,
        errors=list(errors),
        stats=stats.breakdown(),
    )


def record_sync_job(
    unit_of_work_factory: Callable[[], RegistryUnitOfWork],
    stats: SyncStats,
    *,
    started_at: datetime,
    completed_at: datetime,
    errors: Sequence[str] = (),
) -> SyncJob:
    """Persist the ledger row for a finished run."""

    job = build_sync_job(stats, started_at=started_at, completed_at=completed_at, errors=errors)
    with unit_of_work_factory() as uow:
        uow.repositories.sync_jobs.add(job)
        uow.commit()
    log.info(
        "Sync job %s recorded: status=%s, processed=%d, skipped=%d, errors=%d",
        job.id,
        job.status,
        job.items_processed,
        job.items_skipped,
        len(job.errors),
    )
    return job
