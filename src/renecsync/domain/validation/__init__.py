"""Coverage and integrity validation of the reconciled registry."""

from __future__ import annotations

from .checks import (
    STANDARD_CODE_PATTERN,
    CheckResult,
    CheckStatus,
    CountCheck,
    FieldCoverage,
    LinkCoverage,
    OrphanCheck,
    count_status,
    invalid_standard_codes,
)
from .report import render_report
from .validator import REFERENCE_GROUPS, ValidationReport, validate_registry

__all__ = [
    "REFERENCE_GROUPS",
    "STANDARD_CODE_PATTERN",
    "CheckResult",
    "CheckStatus",
    "CountCheck",
    "FieldCoverage",
    "LinkCoverage",
    "OrphanCheck",
    "ValidationReport",
    "count_status",
    "invalid_standard_codes",
    "render_report",
    "validate_registry",
]
