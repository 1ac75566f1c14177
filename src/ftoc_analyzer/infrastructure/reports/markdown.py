"""Markdown reports."""

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


def _cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", " ")


class MarkdownFormatter:
    """GitHub-flavored Markdown, suitable for PR comments and wikis."""

    def __init__(self, thresholds: Optional[Thresholds] = None):
        self.thresholds = thresholds

    def render_warnings(self, warnings: list[Warning]) -> str:
        return "\n".join(self._build_warnings(warnings, level=1)) + "\n"

    def render_concordance(self, concordance: TagConcordance) -> str:
        return "\n".join(self._build_concordance(concordance, level=1)) + "\n"

    def render_report(self, report: AnalysisReport) -> str:
        lines = [
            "# FTOC Analysis Report",
            "",
            f"**Features:** {report.feature_count} | **Scenarios:** {report.scenario_count}",
            "",
        ]
        lines.extend(self._build_concordance(report.concordance, level=2))
        lines.append("")
        lines.extend(self._build_warnings(report.warnings, level=2))
        return "\n".join(lines) + "\n"

    def _build_warnings(self, warnings: list[Warning], level: int) -> list[str]:
        lines = [f"{'#' * level} Warnings", ""]
        if not warnings:
            lines.append(NO_ISSUES)
            return lines

        summary = ", ".join(f"{n} {s.value}" for s, n in count_by_severity(warnings).items())
        lines.extend([f"Found **{len(warnings)}** issue(s): {summary}", ""])
        lines.extend(["| Kind | Count |", "|---|---:|"])
        lines.extend(f"| {kind.description} | {n} |" for kind, n in count_by_type(warnings).items())
        lines.append("")

        for warning in sort_warnings(warnings):
            lines.append(
                f"- **{warning.severity.value.upper()}** `{warning.type.value}`: {warning.message}"
            )
            if warning.location:
                lines.append(f"  - Location: `{warning.location}`")
            for recommendation in warning.recommendations:
                lines.append(f"  - {recommendation}")
        return lines

    def _build_concordance(self, concordance: TagConcordance, level: int) -> list[str]:
        view = ConcordanceView.of(concordance, self.thresholds)
        sub = "#" * (level + 1)
        lines = [
            f"{'#' * level} Tag Concordance",
            "",
            f"**Unique tags:** {view.unique_tags} | **Total occurrences:** {view.total_occurrences}",
        ]
        if not view.rows:
            lines.extend(["", "No tags found."])
            return lines

        lines.extend(["", f"{sub} Tag frequency", "", "| Tag | Category | Count | % | Significance |", "|---|---|---:|---:|---:|"])
        for row in view.rows:
            lines.append(
                f"| `{_cell(row.tag.name)}` | {row.tag.category.value} | {row.count} | "
                f"{row.percentage:.1f}% | {format_ratio(row.significance)} |"
            )

        if view.co_occurrences:
            lines.extend(["", f"{sub} Co-occurrences", "", "| Tag A | Tag B | Count | Coefficient |", "|---|---|---:|---:|"])
            for co in view.co_occurrences:
                lines.append(
                    f"| `{_cell(co.tag_a.name)}` | `{_cell(co.tag_b.name)}` | {co.count} | "
                    f"{format_ratio(co.coefficient)} |"
                )

        if view.significant:
            lines.extend(["", f"{sub} Significant tags", ""])
            lines.extend(f"- `{tag.name}`" for tag in view.significant)

        if view.similar_pairs:
            lines.extend(["", f"{sub} Similar tags", ""])
            lines.extend(f"- `{a.name}` ~ `{b.name}`" for a, b in view.similar_pairs)
        return lines
