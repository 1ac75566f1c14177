"""Narrows features to the scenarios selected by include/exclude tags."""

import logging
from typing import Iterable, Optional

from ftoc_analyzer.core.models.feature import Feature, Scenario
from ftoc_analyzer.core.models.tag import Tag
from ftoc_analyzer.shared.exceptions import AnalysisError, InvalidTagError

logger = logging.getLogger(__name__)


def parse_tag_list(value: Optional[str]) -> list[Tag]:
    """Parse a comma-separated option value such as ``"@Smoke, @API"``.

    Raises:
        InvalidTagError: If an entry is not a valid tag
    """
    if not value:
        return []
    return [Tag.of(part) for part in value.split(",") if part.strip()]


def _tags_of(raw_tags: Iterable[str]) -> set[Tag]:
    tags = set()
    for raw in raw_tags:
        try:
            tags.add(Tag.of(raw))
        except InvalidTagError:
            # Reported as MALFORMED_TAG by the analyzers; never matches a filter
            continue
    return tags


def scenario_matches(
    scenario_tags: set[Tag], include: Iterable[Tag] = (), exclude: Iterable[Tag] = ()
) -> bool:
    """True if the tags carry any include tag (or there are none) and no exclude tag."""
    include = set(include)
    if include and not scenario_tags & include:
        return False
    return not scenario_tags & set(exclude)


def filter_features(
    features: Iterable[Feature],
    include: Iterable[Tag] = (),
    exclude: Iterable[Tag] = (),
) -> list[Feature]:
    """Keep the scenarios selected by the tag filters.

    A scenario is kept when its tags (its own plus its feature's) contain
    at least one include tag, or no include tags are given, and none of
    the exclude tags. Backgrounds stay with their feature. Features left
    without any non-background scenario are dropped. Tags compare by
    their normalized form, so ``@smoke`` selects ``@Smoke``.

    Raises:
        AnalysisError: If a feature or scenario is None
    """
    if features is None:
        raise AnalysisError("Features must not be None")
    features = list(features)
    include = list(include)
    exclude = list(exclude)
    if not include and not exclude:
        return features

    selected = []
    for feature in features:
        if feature is None:
            raise AnalysisError("Cannot filter a None feature")
        feature_tags = _tags_of(feature.tags)
        scenarios: list[Scenario] = []
        for scenario in feature.scenarios:
            if scenario is None:
                raise AnalysisError(f"{feature.filename} contains a None scenario")
            if scenario.is_background or scenario_matches(
                feature_tags | _tags_of(scenario.tags), include, exclude
            ):
                scenarios.append(scenario)
        if any(not s.is_background for s in scenarios):
            selected.append(feature.model_copy(update={"scenarios": scenarios}))

    logger.info(
        "Tag filters (include=%s, exclude=%s) kept %d of %d scenarios",
        [t.name for t in include],
        [t.name for t in exclude],
        sum(len(f.testable_scenarios) for f in selected),
        sum(len(f.testable_scenarios) for f in features),
    )
    return selected
