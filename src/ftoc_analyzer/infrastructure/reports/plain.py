"""Plain text reports."""

from typing import Optional

from ftoc_analyzer.core.models.analysis import (
    AnalysisReport,
    Warning,
    count_by_severity,
    count_by_type,
    sort_warnings,
)
from ftoc_analyzer.core.models.concordance import TagConcordance
from ftoc_analyzer.core.models.configuration import Thresholds
from ftoc_analyzer.infrastructure.reports.base import NO_ISSUES, ConcordanceView
from ftoc_analyzer.shared.formatters import format_ratio


def _heading(title: str, underline: str = "=") -> list[str]:
    return [title, underline * len(title)]


class PlainTextFormatter:
    """Human-readable text for terminals and log files."""

    def __init__(self, thresholds: Optional[Thresholds] = None):
        self.thresholds = thresholds

    def render_warnings(self, warnings: list[Warning]) -> str:
        return "\n".join(self._build_warnings(warnings)) + "\n"

    def render_concordance(self, concordance: TagConcordance) -> str:
        return "\n".join(self._build_concordance(concordance)) + "\n"

    def render_report(self, report: AnalysisReport) -> str:
        lines = _heading("FTOC ANALYSIS REPORT")
        lines.append(f"Features: {report.feature_count}  Scenarios: {report.scenario_count}")
        lines.append("")
        lines.extend(self._build_concordance(report.concordance))
        lines.append("")
        lines.extend(self._build_warnings(report.warnings))
        return "\n".join(lines) + "\n"

    def _build_warnings(self, warnings: list[Warning]) -> list[str]:
        lines = _heading("WARNINGS")
        if not warnings:
            lines.append(NO_ISSUES)
            return lines

        severities = count_by_severity(warnings)
        lines.append(
            f"Found {len(warnings)} issue(s): "
            + ", ".join(f"{n} {s.value}" for s, n in severities.items())
        )
        lines.append("")
        for kind, n in count_by_type(warnings).items():
            lines.append(f"  {kind.description}: {n}")
        lines.append("")

        for warning in sort_warnings(warnings):
            lines.append(f"[{warning.severity.value.upper()}] {warning.type.value}: {warning.message}")
            if warning.location:
                lines.append(f"  Location: {warning.location}")
            for recommendation in warning.recommendations:
                lines.append(f"  - {recommendation}")
        return lines

    def _build_concordance(self, concordance: TagConcordance) -> list[str]:
        view = ConcordanceView.of(concordance, self.thresholds)
        lines = _heading("TAG CONCORDANCE")
        lines.append(f"Unique tags: {view.unique_tags}  Total occurrences: {view.total_occurrences}")
        if not view.rows:
            lines.append("No tags found.")
            return lines

        lines.append("")
        lines.extend(_heading("Tag frequency", "-"))
        width = max(len(row.tag.name) for row in view.rows)
        for row in view.rows:
            lines.append(
                f"{row.tag.name.ljust(width)}  {row.count:>5}  {row.percentage:5.1f}%  "
                f"significance {format_ratio(row.significance)}"
            )

        lines.append("")
        lines.extend(_heading("Categories", "-"))
        for category, rows in view.categories.items():
            lines.append(f"{category.value.title()}: " + ", ".join(f"{r.tag.name} ({r.count})" for r in rows))

        if view.co_occurrences:
            lines.append("")
            lines.extend(_heading("Co-occurrences", "-"))
            lines.extend(str(co) for co in view.co_occurrences)

        if view.significant:
            lines.append("")
            lines.extend(_heading("Significant tags", "-"))
            lines.append(", ".join(tag.name for tag in view.significant))

        if view.similar_pairs:
            lines.append("")
            lines.extend(_heading("Similar tags", "-"))
            lines.extend(f"{a.name} ~ {b.name}" for a, b in view.similar_pairs)
        return lines
