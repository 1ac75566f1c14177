"""Tag concordance: tag frequencies across a corpus plus derived statistics."""

import logging
from collections import Counter
from enum import Enum
from functools import cached_property
from itertools import combinations
from types import MappingProxyType
from typing import Iterable, Mapping, NamedTuple, Optional, Union

from pydantic import BaseModel, Field

from ftoc_analyzer.core.models.enums import TagCategory, Trend
from ftoc_analyzer.core.models.feature import Feature
from ftoc_analyzer.core.models.tag import DEFAULT_VOCABULARY, Tag, TagVocabulary
from ftoc_analyzer.core.rules.tag_constants import (
    SIGNIFICANCE_QUANTILE,
    TYPO_MAX_DISTANCE,
    TYPO_MIN_LENGTH,
)
from ftoc_analyzer.shared.exceptions import AnalysisError, InvalidTagError
from ftoc_analyzer.shared.statistics import (
    TREND_TOLERANCE,
    growth_rate,
    jaccard_coefficient,
    percentile,
    significance_score,
)

logger = logging.getLogger(__name__)


class EventScope(str, Enum):
    """Where a group of tags was attached."""

    FEATURE = "feature"
    SCENARIO = "scenario"


class TagEvent(NamedTuple):
    """Tags attached together to one feature or one scenario."""

    feature_index: int
    scope: EventScope
    tags: tuple[Tag, ...]


class CoOccurrence(BaseModel):
    """Two tags used together, with their Jaccard coefficient."""

    tag_a: Tag = Field(..., description="Lower tag in tag ordering")
    tag_b: Tag = Field(..., description="Higher tag in tag ordering")
    count: int = Field(..., ge=1, description="Features/scenarios carrying both tags")
    coefficient: float = Field(..., ge=0.0, le=1.0, description="Jaccard coefficient")

    model_config = {"frozen": True}

    def __str__(self) -> str:
        return f"{self.tag_a} & {self.tag_b} (Count: {self.count}, Coefficient: {self.coefficient:.2f})"


class TagTrend(BaseModel):
    """Usage trend of a tag compared with a prior run."""

    tag: Tag
    count: int = Field(default=0)
    previous_count: Optional[int] = Field(default=None, description="None without a prior run")
    growth_rate: float = Field(default=0.0)
    trend: Trend = Field(default=Trend.STABLE)
    feature_count: int = Field(default=0, description="Features tagged at feature level")
    scenario_count: int = Field(default=0, description="Scenarios tagged directly")
    associated_tags: dict[str, int] = Field(default_factory=dict)

    model_config = {"frozen": True}


def classify_growth(rate: float) -> Trend:
    """Classify a growth rate into RISING, DECLINING or STABLE (±5% band)."""
    if rate > TREND_TOLERANCE:
        return Trend.RISING
    if rate < -TREND_TOLERANCE:
        return Trend.DECLINING
    return Trend.STABLE


def _unique(tags: Iterable[Tag]) -> tuple[Tag, ...]:
    return tuple(sorted(set(tags)))


class TagConcordance:
    """Immutable tag frequency table for a set of features.

    Counts are keyed by ``Tag`` (so ``@P0`` and ``@p0`` are one entry).
    Every view that filters the table returns a new concordance.
    """

    def __init__(
        self,
        counts: Mapping[Tag, int],
        events: Iterable[TagEvent] = (),
        vocabulary: Optional[TagVocabulary] = None,
    ):
        for tag, count in counts.items():
            if count < 1:
                raise AnalysisError(f"Tag count must be at least 1: {tag} has {count}")
        self._counts: Mapping[Tag, int] = MappingProxyType(dict(counts))
        self._events: tuple[TagEvent, ...] = tuple(events)
        self._vocabulary = vocabulary or DEFAULT_VOCABULARY

    # ========================
    # CONSTRUCTION
    # ========================

    @classmethod
    def build(
        cls,
        features: Iterable[Feature],
        vocabulary: Optional[TagVocabulary] = None,
    ) -> "TagConcordance":
        """Count feature-level tags and tags of every non-background scenario.

        A tag repeated on the same scenario counts twice; malformed tags are
        skipped here and reported by the tag quality analyzer.

        Raises:
            AnalysisError: If a feature or scenario reference is None
        """
        vocabulary = vocabulary or DEFAULT_VOCABULARY
        counts: Counter[Tag] = Counter()
        events: list[TagEvent] = []

        for index, feature in enumerate(features):
            if feature is None:
                raise AnalysisError(f"Feature #{index} is None")

            feature_tags = _parse_tags(feature.tags, vocabulary, feature.filename)
            counts.update(feature_tags)
            if feature_tags:
                events.append(TagEvent(index, EventScope.FEATURE, _unique(feature_tags)))

            for scenario in feature.scenarios:
                if scenario is None:
                    raise AnalysisError(f"{feature.filename} contains a None scenario")
                if scenario.is_background:
                    continue

                scenario_tags = _parse_tags(
                    scenario.tags, vocabulary, feature.location_of(scenario)
                )
                counts.update(scenario_tags)
                if scenario_tags:
                    events.append(TagEvent(index, EventScope.SCENARIO, _unique(scenario_tags)))

        concordance = cls(counts, events, vocabulary)
        logger.debug("Built %s", concordance.summary)
        return concordance

    @classmethod
    def from_counts(
        cls,
        counts: Mapping[str, int],
        vocabulary: Optional[TagVocabulary] = None,
    ) -> "TagConcordance":
        """Build a concordance from ``{"@Tag": count}`` (no co-occurrence data).

        Entries naming the same normalized tag are summed.
        """
        vocabulary = vocabulary or DEFAULT_VOCABULARY
        merged: Counter[Tag] = Counter()
        for name, count in counts.items():
            merged[Tag.of(name, vocabulary)] += count
        return cls(merged, (), vocabulary)

    @classmethod
    def empty(cls) -> "TagConcordance":
        return cls({})

    # ========================
    # BASIC ACCESSORS
    # ========================

    @property
    def vocabulary(self) -> TagVocabulary:
        return self._vocabulary

    @property
    def events(self) -> tuple[TagEvent, ...]:
        return self._events

    def get_count(self, tag: Union[Tag, str]) -> int:
        """Occurrences of a tag; 0 when absent or not a valid tag."""
        if isinstance(tag, str):
            try:
                tag = Tag.of(tag, self._vocabulary)
            except InvalidTagError:
                return 0
        return self._counts.get(tag, 0)

    def get_all_tags(self) -> frozenset[Tag]:
        return frozenset(self._counts)

    @property
    def unique_tag_count(self) -> int:
        return len(self._counts)

    @cached_property
    def total_occurrences(self) -> int:
        return sum(self._counts.values())

    def is_empty(self) -> bool:
        return not self._counts

    @property
    def summary(self) -> str:
        return (
            f"TagConcordance[uniqueTags={self.unique_tag_count}, "
            f"totalOccurrences={self.total_occurrences}]"
        )

    def to_string_map(self) -> dict[str, int]:
        """Counts keyed by tag name, in tag ordering."""
        return {tag.name: self._counts[tag] for tag in self.get_tags_sorted_alphabetically()}

    # ========================
    # SORTED AND FILTERED VIEWS
    # ========================

    def get_tags_sorted_by_frequency(self) -> list[Tag]:
        """Most frequent first; ties broken by tag ordering."""
        return [
            tag
            for tag, _ in sorted(
                self._counts.items(), key=lambda item: (-item[1], item[0].sort_key)
            )
        ]

    def get_tags_sorted_alphabetically(self) -> list[Tag]:
        """Category first, then alphabetical."""
        return sorted(self._counts)

    def filter_by_category(self, category: TagCategory) -> "TagConcordance":
        counts = {tag: n for tag, n in self._counts.items() if tag.category is category}
        events = []
        for event in self._events:
            kept = tuple(tag for tag in event.tags if tag.category is category)
            if kept:
                events.append(event._replace(tags=kept))
        return TagConcordance(counts, events, self._vocabulary)

    def get_orphaned_tags(self) -> list[Tag]:
        """Tags used exactly once across the corpus."""
        return sorted(tag for tag, n in self._counts.items() if n == 1)

    def get_tags_above_threshold(self, threshold: int) -> list[Tag]:
        """Tags with count >= threshold (inclusive)."""
        return sorted(tag for tag, n in self._counts.items() if n >= threshold)

    def get_tags_below_threshold(self, threshold: int) -> list[Tag]:
        """Tags with count < threshold (exclusive).

        Complements ``get_tags_above_threshold``: every tag lands in exactly
        one of the two lists for any threshold.
        """
        return sorted(tag for tag, n in self._counts.items() if n < threshold)

    # ========================
    # DERIVED STATISTICS
    # ========================

    @cached_property
    def _pair_counts(self) -> Mapping[tuple[Tag, Tag], int]:
        pairs: Counter[tuple[Tag, Tag]] = Counter()
        for event in self._events:
            pairs.update(combinations(event.tags, 2))
        return MappingProxyType(dict(pairs))

    def calculate_co_occurrences(self) -> list[CoOccurrence]:
        """All tag pairs used together, strongest association first.

        Sorted by Jaccard coefficient descending, then count descending,
        then tag ordering of the pair.
        """
        result = [
            CoOccurrence(
                tag_a=a,
                tag_b=b,
                count=together,
                coefficient=jaccard_coefficient(together, self._counts[a], self._counts[b]),
            )
            for (a, b), together in self._pair_counts.items()
        ]
        result.sort(key=lambda co: (-co.coefficient, -co.count, co.tag_a.sort_key, co.tag_b.sort_key))
        return result

    def co_occurrence_count(self, a: Union[Tag, str], b: Union[Tag, str]) -> int:
        tag_a, tag_b = self._as_tag(a), self._as_tag(b)
        if tag_a is None or tag_b is None or tag_a == tag_b:
            return 0
        key = (tag_a, tag_b) if tag_a < tag_b else (tag_b, tag_a)
        return self._pair_counts.get(key, 0)

    def coefficient_for(self, a: Union[Tag, str], b: Union[Tag, str]) -> float:
        """Jaccard coefficient of two tags (symmetric, 0.0 if never together)."""
        together = self.co_occurrence_count(a, b)
        if not together:
            return 0.0
        return jaccard_coefficient(together, self.get_count(a), self.get_count(b))

    def calculate_trends(
        self, previous: Optional["TagConcordance"] = None
    ) -> dict[Tag, TagTrend]:
        """Classify each tag as rising, stable or declining.

        Without a prior concordance every tag is STABLE with growth 0.0.
        Tags that only exist in the prior run are reported as DECLINING.
        """
        feature_counts: Counter[Tag] = Counter()
        scenario_counts: Counter[Tag] = Counter()
        for event in self._events:
            target = feature_counts if event.scope is EventScope.FEATURE else scenario_counts
            target.update(event.tags)

        associations: dict[Tag, dict[str, int]] = {}
        ordered_pairs = sorted(
            self._pair_counts.items(), key=lambda item: (item[0][0].sort_key, item[0][1].sort_key)
        )
        for (a, b), together in ordered_pairs:
            associations.setdefault(a, {})[b.name] = together
            associations.setdefault(b, {})[a.name] = together

        trends: dict[Tag, TagTrend] = {}
        for tag in self.get_tags_sorted_alphabetically():
            count = self._counts[tag]
            if previous is None:
                prior, rate = None, 0.0
            else:
                prior = previous.get_count(tag)
                rate = growth_rate(prior, count)
            trends[tag] = TagTrend(
                tag=tag,
                count=count,
                previous_count=prior,
                growth_rate=rate,
                trend=Trend.STABLE if previous is None else classify_growth(rate),
                feature_count=feature_counts[tag],
                scenario_count=scenario_counts[tag],
                associated_tags=associations.get(tag, {}),
            )

        if previous is not None:
            for tag in previous.get_tags_sorted_alphabetically():
                if tag not in self._counts:
                    trends[tag] = TagTrend(
                        tag=tag,
                        count=0,
                        previous_count=previous.get_count(tag),
                        growth_rate=-1.0,
                        trend=Trend.DECLINING,
                    )

        return trends

    def features_containing(self, tag: Union[Tag, str]) -> int:
        """Number of distinct features where the tag appears at any level."""
        resolved = self._as_tag(tag)
        if resolved is None:
            return 0
        return len({e.feature_index for e in self._events if resolved in e.tags})

    @cached_property
    def _significance(self) -> Mapping[Tag, float]:
        spread: dict[Tag, set[int]] = {}
        for event in self._events:
            for tag in event.tags:
                spread.setdefault(tag, set()).add(event.feature_index)
        return MappingProxyType({
            tag: significance_score(count, len(spread.get(tag, ())))
            for tag, count in self._counts.items()
        })

    def calculate_significance(self) -> dict[Tag, float]:
        """TF-IDF style score per tag, in tag ordering.

        score = ln(count) - ln(1 + features containing the tag)
        """
        return {tag: self._significance[tag] for tag in self.get_tags_sorted_alphabetically()}

    def get_significant_tags(self, quantile: float = SIGNIFICANCE_QUANTILE) -> list[Tag]:
        """Tags scoring at or above the given quantile, best first."""
        if not self._counts:
            return []
        cutoff = percentile(list(self._significance.values()), quantile)
        return sorted(
            (tag for tag, score in self._significance.items() if score >= cutoff),
            key=lambda tag: (-self._significance[tag], tag.sort_key),
        )

    def find_similar_tags(
        self,
        max_distance: int = TYPO_MAX_DISTANCE,
        min_length: int = TYPO_MIN_LENGTH,
    ) -> dict[Tag, list[Tag]]:
        """Map each tag to the other tags that look like typos of it.

        O(n²) over unique tags. Tags without any similar tag are omitted.
        """
        tags = self.get_tags_sorted_alphabetically()
        similar: dict[Tag, list[Tag]] = {}
        for tag in tags:
            matches = [
                other
                for other in tags
                if other != tag and tag.is_similar_to(other, max_distance, min_length)
            ]
            if matches:
                similar[tag] = matches
        return similar

    # ========================
    # HELPERS
    # ========================

    def _as_tag(self, tag: Union[Tag, str]) -> Optional[Tag]:
        if isinstance(tag, Tag):
            return tag
        try:
            return Tag.of(tag, self._vocabulary)
        except InvalidTagError:
            return None

    def __contains__(self, tag: object) -> bool:
        if not isinstance(tag, (Tag, str)):
            return False
        return self.get_count(tag) > 0

    def __len__(self) -> int:
        return len(self._counts)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TagConcordance):
            return NotImplemented
        return dict(self._counts) == dict(other._counts)

    def __hash__(self) -> int:
        return hash(frozenset(self._counts.items()))

    def __repr__(self) -> str:
        return self.summary


def _parse_tags(raw_tags: Iterable[str], vocabulary: TagVocabulary, location: str) -> list[Tag]:
    tags = []
    for raw in raw_tags:
        try:
            tags.append(Tag.of(raw, vocabulary))
        except InvalidTagError as e:
            logger.debug("Skipping malformed tag in %s: %s", location, e)
    return tags
