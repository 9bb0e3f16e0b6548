"""Check primitives for the coverage and integrity validator."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Iterable

    from renecsync.domain.model import RegistryEntity

STANDARD_CODE_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[A-Z]{2}\d{4}(\.\d{2})?$")


class CheckStatus(StrEnum):
    PASS = "PASS"
    WARN = "WARN"
    FAIL = "FAIL"


@dataclass(frozen=True, slots=True)
class CheckResult:
    check: str
    status: CheckStatus
    detail: str


def _percentage(part: int, whole: int) -> float | None:
    if whole <= 0:
        return None
    return part / whole * 100


def format_percentage(value: float | None) -> str:
    return "N/A" if value is None else f"{value:.1f}%"


@dataclass(frozen=True, slots=True)
class CountCheck:
    """Actual row count of one entity type compared with its baseline."""

    entity: RegistryEntity
    actual: int
    expected: int
    status: CheckStatus

    @property
    def percentage(self) -> float | None:
        return _percentage(self.actual, self.expected)

    def to_result(self) -> CheckResult:
        return CheckResult(
            check=f"{self.entity} count",
            status=self.status,
            detail=f"{self.actual}/{self.expected} ({format_percentage(self.percentage)})",
        )


@dataclass(frozen=True, slots=True)
class FieldCoverage:
    entity: RegistryEntity
    field: str
    populated: int
    total: int

    @property
    def percentage(self) -> float | None:
        return _percentage(self.populated, self.total)


@dataclass(frozen=True, slots=True)
class LinkCoverage:
    label: str
    covered: int
    total: int

    @property
    def percentage(self) -> float | None:
        return _percentage(self.covered, self.total)


@dataclass(frozen=True, slots=True)
class OrphanCheck:
    label: str
    entity: RegistryEntity
    orphans: int

    @property
    def status(self) -> CheckStatus:
        return CheckStatus.PASS if self.orphans == 0 else CheckStatus.FAIL

    def to_result(self) -> CheckResult:
        return CheckResult(
            check=self.label,
            status=self.status,
            detail=f"{self.orphans} orphaned record(s)",
        )


def count_status(actual: int, expected: int, *, pass_ratio: float) -> CheckStatus:
    """PASS at or above ``pass_ratio`` of the baseline, WARN below it, FAIL when empty."""

    if actual <= 0:
        return CheckStatus.FAIL
    if actual >= expected * pass_ratio:
        return CheckStatus.PASS
    return CheckStatus.WARN


def invalid_standard_codes(codes: Iterable[str]) -> list[str]:
    return [code for code in codes if not STANDARD_CODE_PATTERN.fullmatch(code)]


def code_format_result(invalid_codes: list[str]) -> CheckResult:
    if not invalid_codes:
        return CheckResult(
            check="standard code format",
            status=CheckStatus.PASS,
            detail="All codes valid",
        )
    return CheckResult(
        check="standard code format",
        status=CheckStatus.WARN,
        detail=f"{len(invalid_codes)} code(s) with non-standard format",
    )
