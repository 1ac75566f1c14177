"""Formatter contract and data shared by every report format."""

from typing import NamedTuple, Optional, Protocol

from ftoc_analyzer.core.models.analysis import AnalysisReport, Warning
from ftoc_analyzer.core.models.concordance import CoOccurrence, TagConcordance
from ftoc_analyzer.core.models.configuration import Thresholds
from ftoc_analyzer.core.models.enums import TagCategory
from ftoc_analyzer.core.models.tag import Tag

NO_ISSUES = "No issues detected."

# Co-occurrence pairs listed in concordance reports
TOP_CO_OCCURRENCES = 20


class ReportFormatter(Protocol):
    """Renders warnings and concordances to a string."""

    def render_warnings(self, warnings: list[Warning]) -> str: ...

    def render_concordance(self, concordance: TagConcordance) -> str: ...

    def render_report(self, report: AnalysisReport) -> str: ...


class TagRow(NamedTuple):
    tag: Tag
    count: int
    percentage: float
    significance: float


class ConcordanceView(NamedTuple):
    """Everything a concordance report shows, computed once."""

    unique_tags: int
    total_occurrences: int
    rows: list[TagRow]
    categories: dict[TagCategory, list[TagRow]]
    co_occurrences: list[CoOccurrence]
    significant: list[Tag]
    similar_pairs: list[tuple[Tag, Tag]]

    @classmethod
    def of(
        cls, concordance: TagConcordance, thresholds: Optional[Thresholds] = None
    ) -> "ConcordanceView":
        """Significance cutoff and similarity limits come from the thresholds."""
        thresholds = thresholds or Thresholds()
        total = concordance.total_occurrences
        significance = concordance.calculate_significance()
        rows = [
            TagRow(
                tag=tag,
                count=concordance.get_count(tag),
                percentage=concordance.get_count(tag) * 100 / total if total else 0.0,
                significance=significance[tag],
            )
            for tag in concordance.get_tags_sorted_by_frequency()
        ]
        categories = {
            category: [row for row in rows if row.tag.category is category]
            for category in TagCategory
        }

        similar_pairs = []
        for tag, matches in concordance.find_similar_tags(
            thresholds.typo_max_distance, thresholds.typo_min_length
        ).items():
            similar_pairs.extend((tag, other) for other in matches if tag < other)

        return cls(
            unique_tags=concordance.unique_tag_count,
            total_occurrences=total,
            rows=rows,
            categories={c: r for c, r in categories.items() if r},
            co_occurrences=concordance.calculate_co_occurrences()[:TOP_CO_OCCURRENCES],
            significant=concordance.get_significant_tags(thresholds.significance_quantile),
            similar_pairs=similar_pairs,
        )

