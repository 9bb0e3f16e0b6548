"""Relationship graph builder: accreditation and offering join relations."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .batching import LinkReport, insert_pairs_in_batches
from .normalize import clean_text

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping
    from uuid import UUID

    from renecsync.domain.extracts import AccreditationMatrixFile, CenterRecord
    from renecsync.domain.ports import Pair, RegistryUnitOfWork

log = logging.getLogger(__name__)


def accreditation_pairs(
    matrix: AccreditationMatrixFile,
    *,
    standard_ids: Mapping[str, UUID],
    certifier_ids: Mapping[str, UUID],
) -> tuple[list[Pair], LinkReport]:
    """Resolve matrix entries to (standard, certifier) identity pairs.

    The returned report has ``attempted`` and ``unresolved`` filled in; ``inserted`` is
    left for the writer.
    """

    report = LinkReport()
    pairs: list[Pair] = []
    for code, entry in matrix.matrix.items():
        standard_id = standard_ids.get(code.strip())
        for raw_certifier_key in entry.certifier_ids:
            report.attempted += 1
            certifier_key = clean_text(raw_certifier_key)
            certifier_id = certifier_ids.get(certifier_key) if certifier_key else None
            if standard_id is None or certifier_id is None:
                report.unresolved += 1
                log.debug(
                    "Skipping accreditation %s -> %s: %s not found",
                    code,
                    raw_certifier_key,
                    "standard" if standard_id is None else "certifier",
                )
                continue
            pairs.append((standard_id, certifier_id))
    return pairs, report


def offering_pairs(
    centers: Iterable[CenterRecord],
    *,
    center_ids: Mapping[str, UUID],
    standard_ids: Mapping[str, UUID],
) -> tuple[list[Pair], LinkReport]:
    """Resolve each center's standard codes to (center, standard) identity pairs."""

    report = LinkReport()
    pairs: list[Pair] = []
    for record in centers:
        center_key = clean_text(record.key)
        center_id = center_ids.get(center_key) if center_key else None
        for raw_code in record.standard_codes:
            report.attempted += 1
            code = clean_text(raw_code)
            standard_id = standard_ids.get(code) if code else None
            if center_id is None or standard_id is None:
                report.unresolved += 1
                log.debug(
                    "Skipping offering %s -> %s: %s not found",
                    record.key,
                    raw_code,
                    "center" if center_id is None else "standard",
                )
                continue
            pairs.append((center_id, standard_id))
    return pairs, report


def build_accreditations(
    unit_of_work_factory: Callable[[], RegistryUnitOfWork],
    matrix: AccreditationMatrixFile,
    *,
    batch_size: int,
) -> LinkReport:
    """Link standards to the certifiers accredited for them."""

    with unit_of_work_factory() as uow:
        standard_ids = uow.repositories.standards.identity_map()
        certifier_ids = uow.repositories.certifiers.identity_map()

    pairs, report = accreditation_pairs(
        matrix, standard_ids=standard_ids, certifier_ids=certifier_ids
    )
    report.inserted = insert_pairs_in_batches(
        unit_of_work_factory,
        lambda repositories: repositories.accreditations,
        pairs,
        batch_size=batch_size,
        label="Accreditations",
    )
    log.info(
        "Accreditations: %d inserted, %d skipped (%d unresolved)",
        report.inserted,
        report.skipped,
        report.unresolved,
    )
    return report


def build_offerings(
    unit_of_work_factory: Callable[[], RegistryUnitOfWork],
    centers: Iterable[CenterRecord],
    *,
    batch_size: int,
) -> LinkReport:
    """Link evaluation centers to the standards they offer."""

    with unit_of_work_factory() as uow:
        center_ids = uow.repositories.centers.identity_map()
        standard_ids = uow.repositories.standards.identity_map()

    pairs, report = offering_pairs(centers, center_ids=center_ids, standard_ids=standard_ids)
    report.inserted = insert_pairs_in_batches(
        unit_of_work_factory,
        lambda repositories: repositories.offerings,
        pairs,
        batch_size=batch_size,
        label="Offerings",
    )
    log.info(
        "Offerings: %d inserted, %d skipped (%d unresolved)",
        report.inserted,
        report.skipped,
        report.unresolved,
    )
    return report
