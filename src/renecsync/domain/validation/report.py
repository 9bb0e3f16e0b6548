"""Plain-text rendering of a validation report."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .checks import CheckStatus, format_percentage

if TYPE_CHECKING:
    from .validator import ValidationReport

_RULE = "=" * 60


def render_report(report: ValidationReport) -> str:
    lines: list[str] = ["Registry coverage validation", _RULE, "", "Record counts:"]
    for check in report.counts:
        lines.append(
            f"  [{check.status}] {check.entity}: {check.actual} / ~{check.expected} expected "
            f"({format_percentage(check.percentage)})"
        )
    for entity, actual in report.untracked_counts.items():
        lines.append(f"  {entity}: {actual}")
    lines += [f"  Total records: {report.total_records}", "", "Standard code format:"]

    if report.invalid_codes:
        lines.append(f"  {len(report.invalid_codes)} code(s) do not match XX####[.##]:")
        lines.extend(
            f"    - {code}" for code in report.invalid_codes[: report.invalid_code_display_limit]
        )
        hidden = len(report.invalid_codes) - report.invalid_code_display_limit
        if hidden > 0:
            lines.append(f"    ... and {hidden} more")
    else:
        lines.append("  All standard codes match XX####[.##]")

    lines += ["", "Field coverage:"]
    for coverage in report.field_coverage:
        lines.append(
            f"  {coverage.entity}.{coverage.field}: {coverage.populated}/{coverage.total} "
            f"({format_percentage(coverage.percentage)})"
        )

    lines += ["", "Link coverage:"]
    for link in report.link_coverage:
        lines.append(
            f"  {link.label}: {link.covered}/{link.total} "
            f"({format_percentage(link.percentage)})"
        )

    lines += ["", "Referential integrity:"]
    lines.extend(f"  {orphan.label}: {orphan.orphans} orphaned" for orphan in report.orphans)

    tally = report.tally()
    lines += ["", _RULE, "Summary:"]
    lines.extend(
        f"  [{result.status}] {result.check}: {result.detail}" for result in report.results
    )
    lines.append(
        f"  Results: {tally[CheckStatus.PASS]} passed, {tally[CheckStatus.WARN]} warnings, "
        f"{tally[CheckStatus.FAIL]} failed"
    )
    return "\n".join(lines)
