"""Standalone HTML reports."""

from html import escape
from typing import Optional

from ftoc_analyzer.core.models.analysis import (
    AnalysisReport,
    Warning,
    count_by_severity,
    sort_warnings,
)
from ftoc_analyzer.core.models.concordance import TagConcordance
from ftoc_analyzer.core.models.configuration import Thresholds
from ftoc_analyzer.infrastructure.reports.base import NO_ISSUES, ConcordanceView
from ftoc_analyzer.shared.formatters import format_ratio

_STYLE = """
body { font-family: sans-serif; margin: 2em; color: #1a202c; }
h1 { color: #1a365d; }
table { border-collapse: collapse; margin: 1em 0; }
th, td { border: 1px solid #cbd5e0; padding: 4px 8px; text-align: left; }
th { background: #edf2f7; }
.error { color: #c53030; }
.warning { color: #b7791f; }
.info { color: #2b6cb0; }
li.recommendation { color: #4a5568; }
"""


def _page(title: str, body: list[str]) -> str:
    return "\n".join([
        "<!DOCTYPE html>",
        '<html lang="en">',
        "<head>",
        '<meta charset="utf-8">',
        f"<title>{escape(title)}</title>",
        f"<style>{_STYLE}</style>",
        "</head>",
        "<body>",
        f"<h1>{escape(title)}</h1>",
        *body,
        "</body>",
        "</html>",
    ]) + "\n"


class HtmlFormatter:
    """A single self-contained HTML page (inline CSS, no scripts)."""

    def __init__(self, thresholds: Optional[Thresholds] = None):
        self.thresholds = thresholds

    def render_warnings(self, warnings: list[Warning]) -> str:
        return _page("FTOC Warnings", self._build_warnings(warnings))

    def render_concordance(self, concordance: TagConcordance) -> str:
        return _page("FTOC Tag Concordance", self._build_concordance(concordance))

    def render_report(self, report: AnalysisReport) -> str:
        body = [
            f"<p>Features: {report.feature_count} | Scenarios: {report.scenario_count}</p>",
            "<h2>Tag Concordance</h2>",
            *self._build_concordance(report.concordance),
            "<h2>Warnings</h2>",
            *self._build_warnings(report.warnings),
        ]
        return _page("FTOC Analysis Report", body)

    def _build_warnings(self, warnings: list[Warning]) -> list[str]:
        if not warnings:
            return [f"<p>{NO_ISSUES}</p>"]

        summary = ", ".join(
            f'<span class="{s.value}">{n} {s.value}</span>'
            for s, n in count_by_severity(warnings).items()
        )
        body = [f"<p>Found {len(warnings)} issue(s): {summary}</p>", '<ul class="warnings">']
        for warning in sort_warnings(warnings):
            severity = warning.severity.value
            body.append(
                f'<li class="{severity}"><strong>{severity.upper()}</strong> '
                f"<code>{warning.type.value}</code>: {escape(warning.message)}"
            )
            if warning.location:
                body.append(f"<br>Location: <code>{escape(warning.location)}</code>")
            if warning.recommendations:
                body.append("<ul>")
                body.extend(
                    f'<li class="recommendation">{escape(r)}</li>' for r in warning.recommendations
                )
                body.append("</ul>")
            body.append("</li>")
        body.append("</ul>")
        return body

    def _build_concordance(self, concordance: TagConcordance) -> list[str]:
        view = ConcordanceView.of(concordance, self.thresholds)
        body = [
            f"<p>Unique tags: {view.unique_tags} | Total occurrences: {view.total_occurrences}</p>"
        ]
        if not view.rows:
            body.append("<p>No tags found.</p>")
            return body

        body.append("<table>")
        body.append("<tr><th>Tag</th><th>Category</th><th>Count</th><th>%</th><th>Significance</th></tr>")
        for row in view.rows:
            body.append(
                f"<tr><td>{escape(row.tag.name)}</td><td>{row.tag.category.value}</td>"
                f"<td>{row.count}</td><td>{row.percentage:.1f}%</td>"
                f"<td>{format_ratio(row.significance)}</td></tr>"
            )
        body.append("</table>")

        if view.co_occurrences:
            body.append("<h3>Co-occurrences</h3>")
            body.append("<table>")
            body.append("<tr><th>Tag A</th><th>Tag B</th><th>Count</th><th>Coefficient</th></tr>")
            for co in view.co_occurrences:
                body.append(
                    f"<tr><td>{escape(co.tag_a.name)}</td><td>{escape(co.tag_b.name)}</td>"
                    f"<td>{co.count}</td><td>{format_ratio(co.coefficient)}</td></tr>"
                )
            body.append("</table>")

        if view.significant:
            body.append("<h3>Significant tags</h3>")
            body.append("<p>" + ", ".join(escape(t.name) for t in view.significant) + "</p>")

        if view.similar_pairs:
            body.append("<h3>Similar tags</h3>")
            body.append("<ul>")
            body.extend(f"<li>{escape(a.name)} ~ {escape(b.name)}</li>" for a, b in view.similar_pairs)
            body.append("</ul>")
        return body
