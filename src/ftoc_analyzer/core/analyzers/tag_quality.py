"""Tag quality analyzer for feature files.

Checks are grouped by scope:
- Feature level: duplicate, low-value and malformed feature tags
- Scenario level: missing priority/type tags, duplicates, excessive tags,
  low-value and malformed scenario tags
- Corpus level: typos, orphaned, ambiguous, inconsistent and too generic tags
"""

import logging
from typing import Iterable, NamedTuple, Optional

from ftoc_analyzer.core.analyzers.base import Finding, Rule, RuleEvaluator, WarningHook
from ftoc_analyzer.core.models.analysis import Warning, WarningType
from ftoc_analyzer.core.models.concordance import TagConcordance
from ftoc_analyzer.core.models.configuration import AnalysisConfig
from ftoc_analyzer.core.models.feature import Feature, Scenario
from ftoc_analyzer.core.models.tag import Tag, TagVocabulary, is_priority_shorthand
from ftoc_analyzer.core.rules.tag_constants import (
    AMBIGUOUS_TAG_LENGTH,
    GENERIC_TAG_MIN_SCENARIOS,
    GENERIC_TAG_RATIO,
)
from ftoc_analyzer.shared.exceptions import AnalysisError, InvalidTagError
from ftoc_analyzer.shared.formatters import format_percentage

logger = logging.getLogger(__name__)


class TaggedScenario(NamedTuple):
    """A scenario with its tags parsed."""

    location: str
    scenario: Scenario
    feature_tags: tuple[Tag, ...]
    tags: tuple[Tag, ...]
    malformed: tuple[str, ...]

    @property
    def effective_tags(self) -> set[Tag]:
        """Distinct tags applying to the scenario (its own plus the feature's)."""
        return set(self.feature_tags) | set(self.tags)


class TaggedFeature(NamedTuple):
    """A feature with feature-level and scenario-level tags parsed."""

    location: str
    feature: Feature
    tags: tuple[Tag, ...]
    malformed: tuple[str, ...]
    scenarios: tuple[TaggedScenario, ...]


class TagCorpus(NamedTuple):
    """Everything the corpus-level checks look at."""

    concordance: TagConcordance
    features: tuple[TaggedFeature, ...]

    @property
    def scenarios(self) -> list[TaggedScenario]:
        return [s for f in self.features for s in f.scenarios]

    def locations_of(self, tag: Tag) -> list[str]:
        """Feature/scenario locations where a tag is attached, in document order."""
        locations = []
        for feature in self.features:
            if tag in feature.tags:
                locations.append(feature.location)
            locations.extend(s.location for s in feature.scenarios if tag in s.tags)
        return locations


def prepare_feature(feature: Feature, vocabulary: TagVocabulary) -> TaggedFeature:
    """Parse every tag of a feature, collecting malformed ones per location.

    Raises:
        AnalysisError: If the feature or one of its scenarios is None
    """
    if feature is None:
        raise AnalysisError("Cannot analyze a None feature")

    feature_tags, feature_malformed = _parse(feature.tags, vocabulary)
    scenarios = []
    for scenario in feature.scenarios:
        if scenario is None:
            raise AnalysisError(f"{feature.filename} contains a None scenario")
        if scenario.is_background:
            continue
        tags, malformed = _parse(scenario.tags, vocabulary)
        scenarios.append(
            TaggedScenario(
                location=feature.location_of(scenario),
                scenario=scenario,
                feature_tags=feature_tags,
                tags=tags,
                malformed=malformed,
            )
        )

    return TaggedFeature(
        location=feature.location_of(),
        feature=feature,
        tags=feature_tags,
        malformed=feature_malformed,
        scenarios=tuple(scenarios),
    )


def _parse(raw_tags: Iterable[str], vocabulary: TagVocabulary) -> tuple[tuple[Tag, ...], tuple[str, ...]]:
    tags, malformed = [], []
    for raw in raw_tags:
        try:
            tags.append(Tag.of(raw, vocabulary))
        except InvalidTagError:
            malformed.append(repr(raw) if not isinstance(raw, str) or not raw.strip() else raw)
    return tuple(tags), tuple(malformed)


def _distinct(tags: Iterable[Tag]) -> list[Tag]:
    """Distinct tags keeping first-seen order."""
    seen: set[Tag] = set()
    result = []
    for tag in tags:
        if tag not in seen:
            seen.add(tag)
            result.append(tag)
    return result


def _repeated(tags: Iterable[Tag], already_seen: Iterable[Tag] = ()) -> list[Tag]:
    seen = set(already_seen)
    repeated = []
    for tag in tags:
        if tag in seen:
            repeated.append(tag)
        seen.add(tag)
    return repeated


# ========================
# FEATURE-LEVEL CHECKS
# ========================


def check_feature_duplicates(feature: TaggedFeature, config: AnalysisConfig) -> list[Finding]:
    duplicates = _repeated(feature.tags)
    if not duplicates:
        return []
    return [
        Finding(
            message="Feature has duplicate tags: " + ", ".join(t.name for t in duplicates),
            location=feature.location,
            recommendations=("Remove duplicate tags", "Duplicate tags add noise without value"),
        )
    ]


def check_feature_low_value(feature: TaggedFeature, config: AnalysisConfig) -> list[Finding]:
    return [
        _low_value_finding(tag, feature.location, "Feature")
        for tag in _distinct(feature.tags)
        if config.vocabulary.is_low_value(tag.normalized)
    ]


def check_feature_malformed(feature: TaggedFeature, config: AnalysisConfig) -> list[Finding]:
    if not feature.malformed:
        return []
    return [_malformed_finding(feature.malformed, feature.location, "Feature")]


# ========================
# SCENARIO-LEVEL CHECKS
# ========================


def check_missing_priority(scenario: TaggedScenario, config: AnalysisConfig) -> list[Finding]:
    if any(tag.is_priority() for tag in scenario.effective_tags):
        return []
    return [
        Finding(
            message="Scenario is missing a priority tag",
            location=scenario.location,
            recommendations=(
                "Add a priority tag like @P0 (highest), @P1, @P2, or @P3 (lowest)",
                "Alternatively, add a semantic priority tag like @Critical, @High, @Medium, or @Low",
                "Apply priority tags consistently across all scenarios",
            ),
        )
    ]


def check_missing_type(scenario: TaggedScenario, config: AnalysisConfig) -> list[Finding]:
    if any(tag.is_type() for tag in scenario.effective_tags):
        return []
    return [
        Finding(
            message="Scenario is missing a type tag",
            location=scenario.location,
            recommendations=(
                "Add a type tag like @UI, @API, @Integration, @Regression or @Smoke",
                "Type tags make it possible to run focused subsets of the suite",
            ),
        )
    ]


def check_scenario_low_value(scenario: TaggedScenario, config: AnalysisConfig) -> list[Finding]:
    return [
        _low_value_finding(tag, scenario.location, "Scenario")
        for tag in _distinct(scenario.tags)
        if config.vocabulary.is_low_value(tag.normalized)
    ]


def check_scenario_duplicates(scenario: TaggedScenario, config: AnalysisConfig) -> list[Finding]:
    feature_tags = set(scenario.feature_tags)
    duplicates = _repeated(scenario.tags, feature_tags)
    if not duplicates:
        return []
    described = [
        f"{tag.name} (already on feature)" if tag in feature_tags else tag.name
        for tag in duplicates
    ]
    return [
        Finding(
            message="Scenario has duplicate tags: " + ", ".join(described),
            location=scenario.location,
            recommendations=(
                "Remove duplicate tags",
                "Avoid repeating feature-level tags on scenarios",
                "Tags at the feature level apply to all scenarios",
            ),
        )
    ]


def check_excessive_tags(scenario: TaggedScenario, config: AnalysisConfig) -> list[Finding]:
    count = len(scenario.effective_tags)
    limit = config.thresholds.max_tags
    if count <= limit:
        return []
    return [
        Finding(
            message=f"Scenario has {count} tags (recommended maximum: {limit})",
            location=scenario.location,
            recommendations=(
                "Remove tags that do not help select or report on the scenario",
                "Move tags shared by every scenario up to the feature",
                "Keep a small, documented tag vocabulary",
            ),
        )
    ]


def check_scenario_malformed(scenario: TaggedScenario, config: AnalysisConfig) -> list[Finding]:
    if not scenario.malformed:
        return []
    return [_malformed_finding(scenario.malformed, scenario.location, "Scenario")]


def _low_value_finding(tag: Tag, location: str, owner: str) -> Finding:
    return Finding(
        message=f"{owner} uses low-value tag '{tag.name}'",
        location=location,
        recommendations=(
            "Replace with a more specific, meaningful tag",
            "Tags should describe priority, type or business area",
            "Remove temporary tags once the work is done",
        ),
    )


def _malformed_finding(raw_tags: tuple[str, ...], location: str, owner: str) -> Finding:
    return Finding(
        message=f"{owner} has malformed tags: " + ", ".join(raw_tags),
        location=location,
        recommendations=(
            "Tags must be a single word prefixed with '@'",
            "Remove empty markers and whitespace inside tags",
        ),
    )


# ========================
# CORPUS-LEVEL CHECKS
# ========================


def check_tag_typos(corpus: TagCorpus, config: AnalysisConfig) -> list[Finding]:
    """Flag tags similar to a strictly more frequent tag.

    The most frequent similar tag is suggested as the canonical spelling.
    """
    concordance = corpus.concordance
    thresholds = config.thresholds
    tags = concordance.get_tags_sorted_alphabetically()
    findings = []

    for tag in tags:
        count = concordance.get_count(tag)
        candidates = [
            other
            for other in tags
            if concordance.get_count(other) > count
            and tag.is_similar_to(other, thresholds.typo_max_distance, thresholds.typo_min_length)
        ]
        if not candidates:
            continue
        canonical = min(candidates, key=lambda t: (-concordance.get_count(t), t.sort_key))
        locations = corpus.locations_of(tag)
        findings.append(
            Finding(
                message=(
                    f"'{tag.name}' ({count} uses) might be a typo of "
                    f"'{canonical.name}' ({concordance.get_count(canonical)} uses)"
                ),
                location=None,
                recommendations=(
                    f"Replace '{tag.name}' with '{canonical.name}' if it is a typo",
                    "If intentional, use clearly distinct names for related tags",
                    "Found in: " + ", ".join(locations),
                ),
            )
        )
    return findings


def check_orphaned_tags(corpus: TagCorpus, config: AnalysisConfig) -> list[Finding]:
    return [
        Finding(
            message=f"'{tag.name}' is only used once across all features",
            location=None,
            recommendations=(
                "Tags used only once don't help group related scenarios",
                "Consider if this tag is valuable or if it should be removed",
                "Found in: " + ", ".join(corpus.locations_of(tag)),
            ),
        )
        for tag in corpus.concordance.get_orphaned_tags()
    ]


def check_ambiguous_tags(corpus: TagCorpus, config: AnalysisConfig) -> list[Finding]:
    return [
        Finding(
            message=f"'{tag.name}' is too short to convey its meaning",
            location=None,
            recommendations=(
                "Use a descriptive tag name of at least three characters",
                "Found in: " + ", ".join(corpus.locations_of(tag)),
            ),
        )
        for tag in corpus.concordance.get_tags_sorted_alphabetically()
        if len(tag.normalized) < AMBIGUOUS_TAG_LENGTH and not is_priority_shorthand(tag.normalized)
    ]


def priority_style(tag: Tag) -> Optional[str]:
    """Naming style of a priority tag: @P0, @Priority0 or @High style."""
    if not tag.is_priority():
        return None
    if is_priority_shorthand(tag.normalized):
        return "@P0 style"
    if tag.normalized.startswith("priority"):
        return "@Priority0 style"
    return "@High style"


def check_inconsistent_tagging(corpus: TagCorpus, config: AnalysisConfig) -> list[Finding]:
    styles = sorted({
        style
        for style in map(priority_style, corpus.concordance.get_all_tags())
        if style is not None
    })
    if len(styles) <= 1:
        return []
    return [
        Finding(
            message="Multiple priority tag styles used across features (" + ", ".join(styles) + ")",
            location=None,
            recommendations=(
                "Standardize on a single priority tag style (e.g., @P0-@P3 or @Critical/@High/@Medium/@Low)",
                "Consistent tag formatting improves readability and maintainability",
                "Document the preferred tag style in a team guideline",
            ),
        )
    ]


def check_too_generic_tags(corpus: TagCorpus, config: AnalysisConfig) -> list[Finding]:
    """Flag tags applied to nearly every scenario once the corpus is large enough."""
    scenarios = corpus.scenarios
    total = len(scenarios)
    if total <= GENERIC_TAG_MIN_SCENARIOS:
        return []

    reach: dict[Tag, int] = {}
    for scenario in scenarios:
        for tag in scenario.effective_tags:
            reach[tag] = reach.get(tag, 0) + 1

    return [
        Finding(
            message=(
                f"'{tag.name}' is applied to {reach[tag]} of {total} scenarios "
                f"({format_percentage(reach[tag], total)})"
            ),
            location=None,
            recommendations=(
                "A tag on almost every scenario cannot be used to select a subset",
                "Use more specific tags, or move it to the feature level if it describes the whole feature",
            ),
        )
        for tag in sorted(reach)
        if reach[tag] / total >= GENERIC_TAG_RATIO
    ]


FEATURE_RULES: tuple[Rule, ...] = (
    (WarningType.DUPLICATE_TAG, check_feature_duplicates),
    (WarningType.LOW_VALUE_TAG, check_feature_low_value),
    (WarningType.MALFORMED_TAG, check_feature_malformed),
)

SCENARIO_RULES: tuple[Rule, ...] = (
    (WarningType.MISSING_PRIORITY_TAG, check_missing_priority),
    (WarningType.MISSING_TYPE_TAG, check_missing_type),
    (WarningType.LOW_VALUE_TAG, check_scenario_low_value),
    (WarningType.DUPLICATE_TAG, check_scenario_duplicates),
    (WarningType.EXCESSIVE_TAGS, check_excessive_tags),
    (WarningType.MALFORMED_TAG, check_scenario_malformed),
)

CORPUS_RULES: tuple[Rule, ...] = (
    (WarningType.TAG_TYPO, check_tag_typos),
    (WarningType.ORPHANED_TAG, check_orphaned_tags),
    (WarningType.AMBIGUOUS_TAG, check_ambiguous_tags),
    (WarningType.INCONSISTENT_TAGGING, check_inconsistent_tagging),
    (WarningType.TOO_GENERIC_TAG, check_too_generic_tags),
)


class TagQualityAnalyzer:
    """Analyzes tag usage of a set of features.

    Feature and scenario rules are independent per feature, so
    ``analyze_feature`` can be mapped over features concurrently;
    ``analyze_corpus`` runs the corpus-wide rules once.
    """

    def __init__(
        self,
        features: Iterable[Feature],
        concordance: TagConcordance,
        config: Optional[AnalysisConfig] = None,
        on_warning: Optional[WarningHook] = None,
    ):
        self.evaluator = RuleEvaluator(config, on_warning)
        self.config = self.evaluator.config
        self.features = list(features)
        self.concordance = concordance
        self.warnings: list[Warning] = []

    def analyze(self) -> list[Warning]:
        """Run all tag quality checks.

        Returns:
            Warnings in evaluation order (callers sort them for output)
        """
        for feature in self.features:
            self.warnings.extend(self.analyze_feature(feature))
        self.warnings.extend(self.analyze_corpus())
        return self.warnings

    def analyze_feature(self, feature: Feature) -> list[Warning]:
        """Feature and scenario level checks for one feature."""
        tagged = prepare_feature(feature, self.config.vocabulary)
        warnings = self.evaluator.evaluate(FEATURE_RULES, tagged)
        for scenario in tagged.scenarios:
            warnings.extend(self.evaluator.evaluate(SCENARIO_RULES, scenario))
        return warnings

    def analyze_corpus(self) -> list[Warning]:
        """Corpus-wide checks (typos, orphans, ambiguity, consistency)."""
        corpus = TagCorpus(
            concordance=self.concordance,
            features=tuple(prepare_feature(f, self.config.vocabulary) for f in self.features),
        )
        warnings = self.evaluator.evaluate(CORPUS_RULES, corpus)
        logger.debug("Corpus tag checks produced %d warnings", len(warnings))
        return warnings


def analyze_tag_quality(
    features: Iterable[Feature],
    concordance: TagConcordance,
    config: Optional[AnalysisConfig] = None,
    on_warning: Optional[WarningHook] = None,
) -> list[Warning]:
    """Convenience function to run tag quality analysis.

    Args:
        features: Parsed features
        concordance: Concordance built from the same features
        config: Analysis configuration (defaults when None)
        on_warning: Called with every warning constructed

    Returns:
        List of tag quality warnings
    """
    analyzer = TagQualityAnalyzer(features, concordance, config, on_warning)
    return analyzer.analyze()
