"""Standard resolver: reconcile standards with committees, sectors and detail data."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from renecsync.domain.model import Standard

from .batching import LinkReport, RecordStepReport, insert_pairs_in_batches, upsert_in_batches
from .fingerprint import content_fingerprint
from .normalize import clean_labels, clean_text

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping, Sequence
    from uuid import UUID

    from renecsync.domain.extracts import CommitteeRecord, StandardDetail, StandardRecord
    from renecsync.domain.ports import RegistryUnitOfWork

    from .key_index import CanonicalKeyIndex, ResolvedIdentities

log = logging.getLogger(__name__)


def build_source_metadata(
    record: StandardRecord,
    committee: CommitteeRecord | None,
    detail: StandardDetail | None,
) -> dict[str, Any]:
    """Compose the metadata blob stored with a standard.

    Raw source identifiers are always present; committee and detail sections only when the
    corresponding source had data for this standard.
    """

    metadata: dict[str, Any] = {
        "comite": record.committee,
        "idSectorProductivo": record.sector_id,
        "idEstandarCompetencia": record.standard_id,
    }
    if committee is not None:
        metadata |= {
            "committee_key": committee.key,
            "committee_name": committee.name,
            "committee_president": committee.president,
            "committee_email": committee.email,
            "committee_sector": committee.sector_label,
            "committee_state": committee.state,
        }
    if detail is not None:
        metadata |= {
            "occupations": list(detail.occupations),
            "courses": list(detail.courses),
            "committee_members": list(detail.committee_members),
        }
    return metadata


def build_standard(
    record: StandardRecord,
    code: str,
    *,
    index: CanonicalKeyIndex,
    identities: ResolvedIdentities,
    source_url: str,
) -> Standard:
    committee = index.committee_for_standard(code)
    committee_id = None
    if committee is not None and committee.key is not None:
        committee_id = identities.committees.get(committee.key)
    sector_key = record.sector_key
    # declared sector and committee sector are kept independently
    sector_id = identities.sectors.get(sector_key) if sector_key is not None else None
    return Standard(
        code=code,
        title=clean_text(record.title) or "",
        level=record.level_number,
        is_valid=True,
        sector_name=clean_text(record.sector_name),
        committee_id=committee_id,
        sector_id=sector_id,
        source_metadata=build_source_metadata(
            record, committee, index.detail_for_standard(code)
        ),
        source_url=source_url,
        content_hash=content_fingerprint(record.raw()),
    )


def resolve_standards(
    unit_of_work_factory: Callable[[], RegistryUnitOfWork],
    standards: Iterable[StandardRecord],
    *,
    index: CanonicalKeyIndex,
    identities: ResolvedIdentities,
    batch_size: int,
    source_url: str,
) -> RecordStepReport[str]:
    """Upsert standards by code with their committee and sector links resolved."""

    report: RecordStepReport[str] = RecordStepReport()
    entities: list[Standard] = []
    for record in standards:
        code = clean_text(record.code)
        if code is None:
            log.debug("Skipping standard without code (id %s)", record.standard_id)
            report.skipped += 1
            continue
        entities.append(
            build_standard(
                record, code, index=index, identities=identities, source_url=source_url
            )
        )

    report.identities = upsert_in_batches(
        unit_of_work_factory,
        lambda repositories: repositories.standards,
        entities,
        batch_size=batch_size,
        label="Standards",
    )
    report.processed = len(entities)
    log.info("Standards: %d upserted, %d skipped", report.processed, report.skipped)
    return report


def occupation_pairs(
    standard_ids: Mapping[str, UUID],
    index: CanonicalKeyIndex,
) -> list[tuple[UUID, str]]:
    """Flatten each resolved standard's occupation list into distinct pairs."""

    pairs: list[tuple[UUID, str]] = []
    for code, standard_id in standard_ids.items():
        detail = index.detail_for_standard(code)
        if detail is None:
            continue
        pairs.extend((standard_id, label) for label in clean_labels(detail.occupations))
    return pairs


def attach_occupations(
    unit_of_work_factory: Callable[[], RegistryUnitOfWork],
    standard_ids: Mapping[str, UUID],
    *,
    index: CanonicalKeyIndex,
    batch_size: int,
) -> LinkReport:
    """Insert occupation tags for resolved standards; existing tags are never removed."""

    pairs: Sequence[tuple[UUID, str]] = occupation_pairs(standard_ids, index)
    inserted = insert_pairs_in_batches(
        unit_of_work_factory,
        lambda repositories: repositories.occupations,
        pairs,
        batch_size=batch_size,
        label="Occupations",
    )
    report = LinkReport(attempted=len(pairs), inserted=inserted)
    log.info("Occupations: %d inserted, %d already present", inserted, report.duplicates)
    return report
