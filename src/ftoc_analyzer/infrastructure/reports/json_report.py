"""JSON reports."""

import json
from typing import Any, Optional

from ftoc_analyzer.core.models.analysis import (
    AnalysisReport,
    Warning,
    count_by_severity,
    count_by_type,
    sort_warnings,
)
from ftoc_analyzer.core.models.concordance import TagConcordance
from ftoc_analyzer.core.models.configuration import Thresholds
from ftoc_analyzer.core.models.tag import TagVocabulary
from ftoc_analyzer.infrastructure.reports.base import ConcordanceView
from ftoc_analyzer.shared.exceptions import ReportGenerationError


def warning_to_dict(warning: Warning) -> dict[str, Any]:
    return {
        "type": warning.type.value,
        "severity": warning.severity.value,
        "message": warning.message,
        "location": warning.location,
        "recommendations": list(warning.recommendations),
        "standardAlternatives": list(warning.standard_alternatives),
    }


def warnings_to_dict(warnings: list[Warning]) -> dict[str, Any]:
    return {
        "total": len(warnings),
        "bySeverity": {s.value: n for s, n in count_by_severity(warnings).items()},
        "byType": {k.value: n for k, n in count_by_type(warnings).items()},
        "warnings": [warning_to_dict(w) for w in sort_warnings(warnings)],
    }


def concordance_to_dict(
    concordance: TagConcordance, thresholds: Optional[Thresholds] = None
) -> dict[str, Any]:
    view = ConcordanceView.of(concordance, thresholds)
    return {
        "uniqueTags": view.unique_tags,
        "totalOccurrences": view.total_occurrences,
        "tags": [
            {
                "tag": row.tag.name,
                "category": row.tag.category.value,
                "count": row.count,
                "percentage": round(row.percentage, 2),
                "significance": round(row.significance, 4),
            }
            for row in view.rows
        ],
        "categories": {
            category.value: [row.tag.name for row in rows]
            for category, rows in view.categories.items()
        },
        "coOccurrences": [
            {
                "tagA": co.tag_a.name,
                "tagB": co.tag_b.name,
                "count": co.count,
                "coefficient": round(co.coefficient, 4),
            }
            for co in view.co_occurrences
        ],
        "significantTags": [tag.name for tag in view.significant],
        "similarTags": [[a.name, b.name] for a, b in view.similar_pairs],
    }


def concordance_from_dict(
    data: dict[str, Any], vocabulary: Optional[TagVocabulary] = None
) -> TagConcordance:
    """Rebuild tag counts from a ``concordance_to_dict`` document.

    Only counts survive, which is what trend comparison needs.

    Raises:
        ReportGenerationError: If the document has no usable ``tags`` list
    """
    # A full analysis report nests the concordance
    if isinstance(data, dict) and isinstance(data.get("concordance"), dict):
        data = data["concordance"]
    rows = data.get("tags") if isinstance(data, dict) else None
    if not isinstance(rows, list):
        raise ReportGenerationError("Concordance document has no 'tags' list")
    try:
        counts = {row["tag"]: int(row["count"]) for row in rows}
    except (KeyError, TypeError, ValueError) as e:
        raise ReportGenerationError(f"Invalid tag entry in concordance document: {e}") from e
    return TagConcordance.from_counts(counts, vocabulary)


class JsonFormatter:
    """Machine-readable JSON; always a single well-formed document."""

    def __init__(self, indent: int = 2, thresholds: Optional[Thresholds] = None):
        self.indent = indent
        self.thresholds = thresholds

    def render_warnings(self, warnings: list[Warning]) -> str:
        return self._dump(warnings_to_dict(warnings))

    def render_concordance(self, concordance: TagConcordance) -> str:
        return self._dump(concordance_to_dict(concordance, self.thresholds))

    def render_report(self, report: AnalysisReport) -> str:
        payload = {
            "featureCount": report.feature_count,
            "scenarioCount": report.scenario_count,
            "concordance": concordance_to_dict(report.concordance, self.thresholds),
            "trends": [
                {
                    "tag": trend.tag.name,
                    "count": trend.count,
                    "previousCount": trend.previous_count,
                    "growthRate": trend.growth_rate,
                    "trend": trend.trend.value,
                }
                for trend in report.trends
            ],
            **warnings_to_dict(report.warnings),
        }
        return self._dump(payload)

    def _dump(self, payload: dict[str, Any]) -> str:
        # allow_nan=False: NaN/Infinity are not valid JSON
        return json.dumps(payload, indent=self.indent, ensure_ascii=False, allow_nan=False) + "\n"
