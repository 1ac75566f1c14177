"""Statistical functions for tag analytics.

This module provides the numeric building blocks used by the concordance:
- Edit distance between normalized tag names
- Jaccard coefficient for tag co-occurrence
- TF-IDF style significance score
- Growth rate between two runs
- Percentile cutoffs for "significant" tags
"""

import math

from rapidfuzz.distance import Levenshtein


# Growth reported when a tag goes from zero to some occurrences.
# Division by zero would give +inf, which does not serialize to JSON.
GROWTH_SENTINEL = 1e9

# Trend classification band (+/- 5%)
TREND_TOLERANCE = 0.05


def edit_distance(a: str, b: str) -> int:
    """Calculate the Levenshtein distance between two strings.

    Insertions, deletions and substitutions all cost 1.

    Args:
        a: First string
        b: Second string

    Returns:
        Minimum number of single-character edits turning a into b
    """
    return Levenshtein.distance(a, b)


def jaccard_coefficient(together: int, count_a: int, count_b: int) -> float:
    """Calculate the Jaccard coefficient of two tags.

    J = |A ∩ B| / |A ∪ B| = together / (count_a + count_b - together)

    Args:
        together: Number of events where both tags appear
        count_a: Total occurrences of the first tag
        count_b: Total occurrences of the second tag

    Returns:
        Coefficient clamped to [0, 1] (0 if the union is empty)
    """
    union = count_a + count_b - together
    if together <= 0 or union <= 0:
        return 0.0

    return max(0.0, min(1.0, together / union))


def significance_score(occurrences: int, documents_with_tag: int) -> float:
    """Calculate a TF-IDF style significance score for a tag.

    score = ln(occurrences) - ln(1 + documents_with_tag)

    Common tags spread evenly over many features score low (negative);
    tags concentrated in few features relative to their frequency score
    closer to zero or above.

    Args:
        occurrences: Times the tag occurs in the corpus
        documents_with_tag: Number of features containing the tag

    Returns:
        Significance score (-inf is never returned; 0 occurrences scores as 1)
    """
    occurrences = max(1, occurrences)
    documents_with_tag = max(0, documents_with_tag)
    return math.log(occurrences) - math.log(1 + documents_with_tag)


def growth_rate(previous: int, current: int) -> float:
    """Calculate the relative growth between two counts.

    Args:
        previous: Count in the prior run
        current: Count in the current run

    Returns:
        (current - previous) / previous, GROWTH_SENTINEL when a tag appears
        from nothing, 0.0 when both are zero
    """
    if previous == 0:
        if current == 0:
            return 0.0
        return GROWTH_SENTINEL

    return (current - previous) / previous


def percentile(values: list[float], fraction: float) -> float:
    """Calculate a percentile with linear interpolation.

    Args:
        values: Values to analyze
        fraction: Percentile as a fraction (0.75 = 75th percentile)

    Returns:
        Interpolated value (0.0 for an empty list)
    """
    if not values:
        return 0.0

    fraction = max(0.0, min(1.0, fraction))
    ordered = sorted(values)
    n = len(ordered)

    index = fraction * (n - 1)
    lower = int(index)
    upper = min(lower + 1, n - 1)

    return ordered[lower] + (index - lower) * (ordered[upper] - ordered[lower])
