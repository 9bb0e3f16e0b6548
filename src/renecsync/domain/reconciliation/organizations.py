"""Certifier and center resolvers."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final

from renecsync.domain.model import Center, Certifier, CertifierType

from .batching import RecordStepReport, upsert_in_batches
from .fingerprint import content_fingerprint
from .normalize import clean_text, fold_text

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from renecsync.domain.extracts import CenterRecord, CertifierRecord
    from renecsync.domain.ports import RegistryUnitOfWork

log = logging.getLogger(__name__)

GOVERNMENT_BODY_KEYWORDS: Final[tuple[str, ...]] = (
    "organismo",
    "gobierno",
    "gubernamental",
    "secretaria",
    "dependencia",
    "institucion publica",
)


def classify_certifier_type(raw: str | None) -> CertifierType:
    """Classify a certifier from its free-text type.

    Governmental or organizational bodies are certifying organisms (``OC``); anything
    else, including a missing type, is an evaluation entity (``ECE``).
    """

    folded = fold_text(raw)
    if folded is None:
        return CertifierType.ECE
    if any(keyword in folded for keyword in GOVERNMENT_BODY_KEYWORDS):
        return CertifierType.OC
    return CertifierType.ECE


def _alternate_names(names: list[str] | None) -> list[str] | None:
    # absent stays NULL until a dedup pass fills it
    return None if names is None else list(names)


def build_certifier(record: CertifierRecord, certifier_key: str, *, source_url: str) -> Certifier:
    return Certifier(
        certifier_key=certifier_key,
        name=clean_text(record.name) or "",
        entity_type=classify_certifier_type(record.entity_type),
        is_active=True,
        alternate_names=_alternate_names(record.alternate_names),
        normalized_key=clean_text(record.normalized_key),
        source_url=source_url,
        content_hash=content_fingerprint(record.raw()),
    )


def build_center(record: CenterRecord, center_key: str, *, source_url: str) -> Center:
    return Center(
        center_key=center_key,
        name=clean_text(record.name) or "",
        is_active=True,
        alternate_names=_alternate_names(record.alternate_names),
        normalized_key=clean_text(record.normalized_key),
        source_url=source_url,
        content_hash=content_fingerprint(record.raw()),
    )


def resolve_certifiers(
    unit_of_work_factory: Callable[[], RegistryUnitOfWork],
    certifiers: Iterable[CertifierRecord],
    *,
    batch_size: int,
    source_url: str,
) -> RecordStepReport[str]:
    report: RecordStepReport[str] = RecordStepReport()
    entities: list[Certifier] = []
    for record in certifiers:
        certifier_key = clean_text(record.key)
        if certifier_key is None:
            log.debug("Skipping certifier without id (%s)", record.name)
            report.skipped += 1
            continue
        entities.append(build_certifier(record, certifier_key, source_url=source_url))

    report.identities = upsert_in_batches(
        unit_of_work_factory,
        lambda repositories: repositories.certifiers,
        entities,
        batch_size=batch_size,
        label="Certifiers",
    )
    report.processed = len(entities)
    log.info("Certifiers: %d upserted, %d skipped", report.processed, report.skipped)
    return report


def resolve_centers(
    unit_of_work_factory: Callable[[], RegistryUnitOfWork],
    centers: Iterable[CenterRecord],
    *,
    batch_size: int,
    source_url: str,
) -> RecordStepReport[str]:
    report: RecordStepReport[str] = RecordStepReport()
    entities: list[Center] = []
    for record in centers:
        center_key = clean_text(record.key)
        if center_key is None:
            log.debug("Skipping center without id (%s)", record.name)
            report.skipped += 1
            continue
        entities.append(build_center(record, center_key, source_url=source_url))

    report.identities = upsert_in_batches(
        unit_of_work_factory,
        lambda repositories: repositories.centers,
        entities,
        batch_size=batch_size,
        label="Centers",
    )
    report.processed = len(entities)
    log.info("Centers: %d upserted, %d skipped", report.processed, report.skipped)
    return report
