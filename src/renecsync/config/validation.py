"""Baselines and thresholds for the coverage validator."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Mapping

# Row counts observed for a complete registry extraction.
DEFAULT_EXPECTED_COUNTS: Final[Mapping[str, int]] = MappingProxyType(
    {
        "standard": 1477,
        "certifier": 482,
        "center": 340,
        "accreditation": 7573,
        "offering": 680,
        "sync_job": 1,
    }
)
DEFAULT_PASS_RATIO = 0.9
DEFAULT_INVALID_CODE_DISPLAY_LIMIT = 10


@dataclass(frozen=True, slots=True)
class ValidationConfig:
    expected_counts: Mapping[str, int] = field(default_factory=lambda: DEFAULT_EXPECTED_COUNTS)
    pass_ratio: float = DEFAULT_PASS_RATIO
    invalid_code_display_limit: int = DEFAULT_INVALID_CODE_DISPLAY_LIMIT


def get_validation_config() -> ValidationConfig:
    return ValidationConfig()
