"""Analysis engine: the entry points used by the CLI and by library callers."""

import logging
from typing import Iterable, Optional

from ftoc_analyzer.core.analyzers.anti_patterns import AntiPatternAnalyzer
from ftoc_analyzer.core.analyzers.base import WarningHook
from ftoc_analyzer.core.analyzers.tag_quality import TagQualityAnalyzer
from ftoc_analyzer.core.models.analysis import AnalysisReport, Warning, sort_warnings
from ftoc_analyzer.core.models.concordance import TagConcordance
from ftoc_analyzer.core.models.configuration import DEFAULT_CONFIG, AnalysisConfig
from ftoc_analyzer.core.models.feature import Feature
from ftoc_analyzer.core.services.parallel import ParallelRunner
from ftoc_analyzer.shared.exceptions import AnalysisError

logger = logging.getLogger(__name__)


def _checked(features: Iterable[Feature]) -> list[Feature]:
    if features is None:
        raise AnalysisError("Features must not be None")
    checked = list(features)
    for index, feature in enumerate(checked):
        if feature is None:
            raise AnalysisError(f"Feature #{index} is None")
    return checked


def build_concordance(
    features: Iterable[Feature], config: Optional[AnalysisConfig] = None
) -> TagConcordance:
    """Count tags of the features using the configured vocabulary."""
    config = config or DEFAULT_CONFIG
    return TagConcordance.build(_checked(features), config.vocabulary)


def analyze_tag_quality(
    features: Iterable[Feature],
    concordance: TagConcordance,
    config: Optional[AnalysisConfig] = None,
    on_warning: Optional[WarningHook] = None,
) -> list[Warning]:
    """Tag quality warnings in report order."""
    analyzer = TagQualityAnalyzer(_checked(features), concordance, config, on_warning)
    return sort_warnings(analyzer.analyze())


def analyze_anti_patterns(
    features: Iterable[Feature],
    config: Optional[AnalysisConfig] = None,
    on_warning: Optional[WarningHook] = None,
) -> list[Warning]:
    """Anti-pattern warnings in report order."""
    analyzer = AntiPatternAnalyzer(_checked(features), config, on_warning)
    return sort_warnings(analyzer.analyze())


def run_analysis(
    features: Iterable[Feature],
    config: Optional[AnalysisConfig] = None,
    previous: Optional[TagConcordance] = None,
    runner: Optional[ParallelRunner] = None,
    on_warning: Optional[WarningHook] = None,
) -> AnalysisReport:
    """Build the concordance and run both analyzers.

    Per-feature checks of both analyzers are mapped over the features by
    the runner (concurrently above the parallel threshold); corpus-wide
    tag checks run once afterwards. The runner's timeout covers both
    phases. Warnings are sorted before returning.

    Args:
        features: Parsed features
        config: Analysis configuration (defaults when None)
        previous: Concordance of an earlier run, for tag trends
        runner: Runner to use instead of the default thread pool runner
        on_warning: Called with every warning constructed

    Raises:
        AnalysisError: On None features/scenarios or a failing check
        AnalysisTimeoutError: If the runner's timeout expires
    """
    features = _checked(features)
    config = config or DEFAULT_CONFIG
    runner = runner or ParallelRunner(parallel_threshold=config.thresholds.parallel_threshold)
    deadline = runner.start_clock()

    concordance = TagConcordance.build(features, config.vocabulary)
    tag_analyzer = TagQualityAnalyzer(features, concordance, config, on_warning)
    pattern_analyzer = AntiPatternAnalyzer(features, config, on_warning)

    def analyze_one(feature: Feature) -> list[Warning]:
        return tag_analyzer.analyze_feature(feature) + pattern_analyzer.analyze_feature(feature)

    warnings: list[Warning] = []
    for feature_warnings in runner.map(analyze_one, features, deadline):
        warnings.extend(feature_warnings)
    warnings.extend(runner.call(tag_analyzer.analyze_corpus, deadline))

    scenario_count = sum(len(f.testable_scenarios) for f in features)
    logger.info(
        "Analyzed %d features (%d scenarios): %d warnings",
        len(features),
        scenario_count,
        len(warnings),
    )

    trends = concordance.calculate_trends(previous)
    return AnalysisReport(
        concordance=concordance,
        warnings=sort_warnings(warnings),
        trends=list(trends.values()),
        feature_count=len(features),
        scenario_count=scenario_count,
    )
