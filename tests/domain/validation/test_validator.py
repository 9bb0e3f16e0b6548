from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from renecsync.config import ValidationConfig
from renecsync.domain.model import RegistryEntity
from renecsync.domain.validation import (
    REFERENCE_GROUPS,
    CheckStatus,
    render_report,
    validate_registry,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping


@dataclass
class FakeInspector:
    counts: dict[RegistryEntity, int] = field(default_factory=dict)
    populated: dict[tuple[RegistryEntity, str], int] = field(default_factory=dict)
    codes: list[str] = field(default_factory=list)
    orphans: dict[RegistryEntity, int] = field(default_factory=dict)
    distinct: dict[tuple[RegistryEntity, str], int] = field(default_factory=dict)
    orphan_queries: list[tuple[RegistryEntity, dict[str, RegistryEntity]]] = field(
        default_factory=list
    )

    def count(self, entity: RegistryEntity) -> int:
        return self.counts.get(entity, 0)

    def count_populated(self, entity: RegistryEntity, field: str) -> int:
        return self.populated.get((entity, field), 0)

    def standard_codes(self) -> list[str]:
        return list(self.codes)

    def count_orphans(
        self, entity: RegistryEntity, references: Mapping[str, RegistryEntity]
    ) -> int:
        self.orphan_queries.append((entity, dict(references)))
        return self.orphans.get(entity, 0)

    def count_distinct(self, entity: RegistryEntity, field: str) -> int:
        return self.distinct.get((entity, field), 0)

    def table_counts(self, entities: Iterable[RegistryEntity]) -> dict[RegistryEntity, int]:
        return {entity: self.count(entity) for entity in entities}


CONFIG = ValidationConfig(
    expected_counts={"standard": 10, "certifier": 4, "sync_job": 1},
    pass_ratio=0.9,
    invalid_code_display_limit=2,
)


def _healthy_inspector() -> FakeInspector:
    return FakeInspector(
        counts={
            RegistryEntity.STANDARD: 10,
            RegistryEntity.CERTIFIER: 3,
            RegistryEntity.SYNC_JOB: 1,
            RegistryEntity.SECTOR: 2,
        },
        populated={(RegistryEntity.STANDARD, "level"): 7},
        codes=["EC0001", "EC0002"],
        distinct={(RegistryEntity.ACCREDITATION, "standard_id"): 5},
    )


def test_validate_registry_grades_counts_against_baselines() -> None:
    report = validate_registry(_healthy_inspector(), CONFIG)

    statuses = {check.entity: check.status for check in report.counts}
    assert statuses == {
        RegistryEntity.STANDARD: CheckStatus.PASS,
        RegistryEntity.CERTIFIER: CheckStatus.WARN,
        RegistryEntity.SYNC_JOB: CheckStatus.PASS,
    }
    assert report.untracked_counts[RegistryEntity.SECTOR] == 2
    assert RegistryEntity.STANDARD not in report.untracked_counts
    assert report.total_records == 16
    assert not report.failed


def test_validate_registry_measures_coverage() -> None:
    report = validate_registry(_healthy_inspector(), CONFIG)

    level = next(
        coverage
        for coverage in report.field_coverage
        if coverage.entity is RegistryEntity.STANDARD and coverage.field == "level"
    )
    assert (level.populated, level.total) == (7, 10)
    links = {link.label: link for link in report.link_coverage}
    assert links["standards with at least one certifier"].covered == 5
    assert links["standards with at least one occupation"].total == 10
    assert links["centers with at least one standard"].percentage is None


def test_validate_registry_checks_every_reference_group() -> None:
    inspector = _healthy_inspector()

    report = validate_registry(inspector, CONFIG)

    assert [orphan.label for orphan in report.orphans] == [
        group.label for group in REFERENCE_GROUPS
    ]
    assert len(inspector.orphan_queries) == len(REFERENCE_GROUPS)


def test_orphans_fail_only_their_group() -> None:
    inspector = _healthy_inspector()
    inspector.orphans = {RegistryEntity.ACCREDITATION: 1}

    report = validate_registry(inspector, CONFIG)

    failed = [result.check for result in report.results if result.status is CheckStatus.FAIL]
    assert failed == ["accreditation referential integrity"]
    assert report.failed


def test_empty_store_fails_count_checks() -> None:
    report = validate_registry(FakeInspector(), CONFIG)

    assert report.tally()[CheckStatus.FAIL] == 3
    assert report.failed


def test_invalid_codes_are_warned_and_listed_up_to_limit() -> None:
    inspector = _healthy_inspector()
    inspector.codes = ["EC0001", "bad1", "bad2", "bad3"]

    report = validate_registry(inspector, CONFIG)
    rendered = render_report(report)

    format_result = next(r for r in report.results if r.check == "standard code format")
    assert format_result.status is CheckStatus.WARN
    assert report.invalid_codes == ["bad1", "bad2", "bad3"]
    assert "    - bad1" in rendered
    assert "    - bad3" not in rendered
    assert "... and 1 more" in rendered


def test_render_report_sections_and_summary() -> None:
    rendered = render_report(validate_registry(_healthy_inspector(), CONFIG))

    assert "Record counts:" in rendered
    assert "[WARN] certifier: 3 / ~4 expected (75.0%)" in rendered
    assert "  sector: 2" in rendered
    assert "All standard codes match XX####[.##]" in rendered
    assert "standard.level: 7/10 (70.0%)" in rendered
    assert "accreditation referential integrity: 0 orphaned" in rendered
    assert rendered.endswith("Results: 9 passed, 1 warnings, 0 failed")
