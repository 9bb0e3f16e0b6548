"""Read-only coverage and integrity validation of the reconciled store."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Final

from renecsync.domain.model import RegistryEntity

from .checks import (
    CheckResult,
    CheckStatus,
    CountCheck,
    FieldCoverage,
    LinkCoverage,
    OrphanCheck,
    code_format_result,
    count_status,
    invalid_standard_codes,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from renecsync.config import ValidationConfig
    from renecsync.domain.ports import RegistryInspector

log = logging.getLogger(__name__)

OPTIONAL_FIELDS: Final[Mapping[RegistryEntity, tuple[str, ...]]] = MappingProxyType(
    {
        RegistryEntity.STANDARD: ("level", "sector_name", "committee_id", "sector_id"),
        RegistryEntity.COMMITTEE: (
            "sector_id",
            "president",
            "email",
            "phones",
            "url",
            "postal_code",
            "state_code",
            "enrolled_at",
        ),
        RegistryEntity.CERTIFIER: ("alternate_names", "normalized_key"),
        RegistryEntity.CENTER: ("alternate_names", "normalized_key"),
    }
)


@dataclass(frozen=True, slots=True)
class ReferenceGroup:
    """Reference columns of one table whose targets must exist."""

    label: str
    entity: RegistryEntity
    references: Mapping[str, RegistryEntity]


REFERENCE_GROUPS: Final[tuple[ReferenceGroup, ...]] = (
    ReferenceGroup(
        "accreditation referential integrity",
        RegistryEntity.ACCREDITATION,
        {"standard_id": RegistryEntity.STANDARD, "certifier_id": RegistryEntity.CERTIFIER},
    ),
    ReferenceGroup(
        "offering referential integrity",
        RegistryEntity.OFFERING,
        {"center_id": RegistryEntity.CENTER, "standard_id": RegistryEntity.STANDARD},
    ),
    ReferenceGroup(
        "occupation referential integrity",
        RegistryEntity.OCCUPATION,
        {"standard_id": RegistryEntity.STANDARD},
    ),
    ReferenceGroup(
        "standard committee reference",
        RegistryEntity.STANDARD,
        {"committee_id": RegistryEntity.COMMITTEE},
    ),
    ReferenceGroup(
        "standard sector reference",
        RegistryEntity.STANDARD,
        {"sector_id": RegistryEntity.SECTOR},
    ),
    ReferenceGroup(
        "committee sector reference",
        RegistryEntity.COMMITTEE,
        {"sector_id": RegistryEntity.SECTOR},
    ),
)


@dataclass(slots=True)
class ValidationReport:
    """Everything one validator pass measured, plus the PASS/WARN/FAIL results."""

    counts: list[CountCheck] = field(default_factory=list[CountCheck])
    untracked_counts: dict[RegistryEntity, int] = field(default_factory=dict)
    invalid_codes: list[str] = field(default_factory=list[str])
    invalid_code_display_limit: int = 10
    field_coverage: list[FieldCoverage] = field(default_factory=list[FieldCoverage])
    link_coverage: list[LinkCoverage] = field(default_factory=list[LinkCoverage])
    orphans: list[OrphanCheck] = field(default_factory=list[OrphanCheck])
    results: list[CheckResult] = field(default_factory=list[CheckResult])

    def tally(self) -> dict[CheckStatus, int]:
        totals = dict.fromkeys(CheckStatus, 0)
        for result in self.results:
            totals[result.status] += 1
        return totals

    @property
    def failed(self) -> bool:
        return any(result.status is CheckStatus.FAIL for result in self.results)

    @property
    def total_records(self) -> int:
        return sum(check.actual for check in self.counts) + sum(self.untracked_counts.values())


def validate_registry(inspector: RegistryInspector, config: ValidationConfig) -> ValidationReport:
    """Measure the store and grade it; never writes."""

    report = ValidationReport(invalid_code_display_limit=config.invalid_code_display_limit)

    tracked: set[RegistryEntity] = set()
    for key, expected in config.expected_counts.items():
        entity = RegistryEntity(key)
        tracked.add(entity)
        actual = inspector.count(entity)
        check = CountCheck(
            entity=entity,
            actual=actual,
            expected=expected,
            status=count_status(actual, expected, pass_ratio=config.pass_ratio),
        )
        report.counts.append(check)
        report.results.append(check.to_result())
    report.untracked_counts = inspector.table_counts(
        entity for entity in RegistryEntity if entity not in tracked
    )

    report.invalid_codes = invalid_standard_codes(inspector.standard_codes())
    report.results.append(code_format_result(report.invalid_codes))

    for entity, fields in OPTIONAL_FIELDS.items():
        total = inspector.count(entity)
        report.field_coverage.extend(
            FieldCoverage(entity, name, inspector.count_populated(entity, name), total)
            for name in fields
        )

    report.link_coverage = _link_coverage(inspector)

    for group in REFERENCE_GROUPS:
        orphan_check = OrphanCheck(
            label=group.label,
            entity=group.entity,
            orphans=inspector.count_orphans(group.entity, group.references),
        )
        report.orphans.append(orphan_check)
        report.results.append(orphan_check.to_result())

    tally = report.tally()
    log.info(
        "Validation finished: %d passed, %d warnings, %d failed",
        tally[CheckStatus.PASS],
        tally[CheckStatus.WARN],
        tally[CheckStatus.FAIL],
    )
    return report


def _link_coverage(inspector: RegistryInspector) -> list[LinkCoverage]:
    standards = inspector.count(RegistryEntity.STANDARD)
    return [
        LinkCoverage(
            "standards with at least one certifier",
            inspector.count_distinct(RegistryEntity.ACCREDITATION, "standard_id"),
            standards,
        ),
        LinkCoverage(
            "certifiers with at least one standard",
            inspector.count_distinct(RegistryEntity.ACCREDITATION, "certifier_id"),
            inspector.count(RegistryEntity.CERTIFIER),
        ),
        LinkCoverage(
            "centers with at least one standard",
            inspector.count_distinct(RegistryEntity.OFFERING, "center_id"),
            inspector.count(RegistryEntity.CENTER),
        ),
        LinkCoverage(
            "standards with at least one occupation",
            inspector.count_distinct(RegistryEntity.OCCUPATION, "standard_id"),
            standards,
        ),
    ]
