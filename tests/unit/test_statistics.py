"""Tests for statistical functions and display formatters."""

import math

import pytest

from ftoc_analyzer.shared.formatters import format_percentage, format_ratio, truncate
from ftoc_analyzer.shared.statistics import (
    GROWTH_SENTINEL,
    edit_distance,
    growth_rate,
    jaccard_coefficient,
    percentile,
    significance_score,
)


class TestEditDistance:
    """Tests for edit_distance function."""

    def test_identical(self):
        assert edit_distance("smoke", "smoke") == 0

    def test_single_edits(self):
        """Insertion, deletion and substitution each cost one."""
        assert edit_distance("smoke", "smoker") == 1
        assert edit_distance("smoke", "moke") == 1
        assert edit_distance("smoke", "smoky") == 1

    def test_empty_string(self):
        assert edit_distance("", "api") == 3


class TestJaccardCoefficient:
    """Tests for jaccard_coefficient function."""

    def test_always_together(self):
        """Tags that only ever appear together score 1.0."""
        assert jaccard_coefficient(2, 2, 2) == 1.0

    def test_partial_overlap(self):
        """1 together out of 2 + 3 occurrences -> 1 / 4."""
        assert jaccard_coefficient(1, 2, 3) == pytest.approx(0.25)

    def test_never_together(self):
        assert jaccard_coefficient(0, 5, 5) == 0.0

    def test_bounded(self):
        """Inconsistent inputs are clamped into [0, 1]."""
        assert 0.0 <= jaccard_coefficient(5, 1, 1) <= 1.0


class TestSignificanceScore:
    """Tests for significance_score function."""

    def test_formula(self):
        """ln(count) - ln(1 + features)."""
        assert significance_score(4, 1) == pytest.approx(math.log(4) - math.log(2))

    def test_spread_lowers_score(self):
        """The same count spread over more features scores lower."""
        assert significance_score(6, 1) > significance_score(6, 5)

    def test_zero_count_is_finite(self):
        assert math.isfinite(significance_score(0, 0))


class TestGrowthRate:
    """Tests for growth_rate function."""

    def test_growth(self):
        assert growth_rate(10, 15) == pytest.approx(0.5)

    def test_decline(self):
        assert growth_rate(10, 5) == pytest.approx(-0.5)

    def test_from_zero_uses_sentinel(self):
        """A new tag grows by the finite sentinel instead of infinity."""
        assert growth_rate(0, 3) == GROWTH_SENTINEL

    def test_zero_to_zero(self):
        assert growth_rate(0, 0) == 0.0


class TestPercentile:
    """Tests for percentile function."""

    def test_empty(self):
        assert percentile([], 0.75) == 0.0

    def test_interpolation(self):
        assert percentile([1.0, 2.0, 3.0, 4.0, 5.0], 0.75) == pytest.approx(4.0)
        assert percentile([1.0, 2.0], 0.5) == pytest.approx(1.5)

    def test_unsorted_input(self):
        assert percentile([5.0, 1.0, 3.0], 0.0) == 1.0
        assert percentile([5.0, 1.0, 3.0], 1.0) == 5.0


class TestFormatters:
    """Tests for display formatters."""

    def test_format_ratio(self):
        assert format_ratio(0.6666) == "0.67"
        assert format_ratio(1.0, decimals=1) == "1.0"

    def test_format_percentage(self):
        assert format_percentage(1, 4) == "25.0%"
        assert format_percentage(3, 0) == "0.0%"

    def test_truncate(self):
        assert truncate("short") == "short"
        assert truncate("x" * 60, limit=10) == "xxxxxxx..."
