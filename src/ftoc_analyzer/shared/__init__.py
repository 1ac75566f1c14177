"""Shared utilities for FTOC Analyzer."""

from ftoc_analyzer.shared.statistics import (
    GROWTH_SENTINEL,
    TREND_TOLERANCE,
    edit_distance,
    growth_rate,
    jaccard_coefficient,
    percentile,
    significance_score,
)
from ftoc_analyzer.shared.formatters import (
    format_percentage,
    format_ratio,
    truncate,
)

__all__ = [
    # Statistics
    "GROWTH_SENTINEL",
    "TREND_TOLERANCE",
    "edit_distance",
    "growth_rate",
    "jaccard_coefficient",
    "percentile",
    "significance_score",
    # Formatters
    "format_percentage",
    "format_ratio",
    "truncate",
]
