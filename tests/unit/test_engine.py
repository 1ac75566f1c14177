"""Tests for the engine entry points."""

import json
import time

import pytest

import ftoc_analyzer
from ftoc_analyzer.core.analyzers.tag_quality import TagQualityAnalyzer
from ftoc_analyzer.core.models import AnalysisConfig, AnalysisReport, TagConcordance, WarningType
from ftoc_analyzer.core.models.analysis import WarningFamily
from ftoc_analyzer.core.models.enums import Severity, Trend
from ftoc_analyzer.core.services import (
    ParallelRunner,
    analyze_anti_patterns,
    analyze_tag_quality,
    build_concordance,
    filter_features,
    run_analysis,
)
from ftoc_analyzer.infrastructure.reports import format_report
from ftoc_analyzer.infrastructure.parsers import parse_feature_file
from ftoc_analyzer.shared.exceptions import AnalysisError, AnalysisTimeoutError, ReportGenerationError


@pytest.fixture
def many_features(make_feature, make_scenario):
    """Eight features: enough to go through the worker pool."""
    return [
        make_feature(
            filename=f"f{i}.feature",
            scenarios=[
                make_scenario(name="Happy path", tags=("@P1", "@API")),
                make_scenario(name="Thin", tags=("@Regression",), step_lines=("Then it works",)),
            ],
        )
        for i in range(8)
    ]


class TestPackageApi:
    """The engine is importable from the package root."""

    def test_root_exports(self):
        assert ftoc_analyzer.run_analysis is run_analysis
        assert ftoc_analyzer.build_concordance is build_concordance
        assert ftoc_analyzer.format_report is format_report
        assert ftoc_analyzer.filter_features is filter_features
        assert ftoc_analyzer.__version__


class TestBuildConcordance:
    """Tests for build_concordance."""

    def test_fixture(self, tagged_feature_path):
        concordance = build_concordance([parse_feature_file(tagged_feature_path)])
        assert concordance.get_count("@P1") == 2
        assert concordance.coefficient_for("@P1", "@Payment") == 1.0

    def test_config_vocabulary_used(self, make_feature, make_scenario):
        config = AnalysisConfig.from_mapping({"tags": {"type": ["@Payment"]}})
        concordance = build_concordance([make_feature(scenarios=[make_scenario(tags=("@Payment",))])], config)
        (tag,) = concordance.get_all_tags()
        assert tag.is_type()

    def test_none_rejected(self):
        with pytest.raises(AnalysisError):
            build_concordance(None)
        with pytest.raises(AnalysisError):
            build_concordance([None])


class TestAnalyzeFunctions:
    """Tests for analyze_tag_quality and analyze_anti_patterns."""

    def test_results_sorted(self, many_features):
        concordance = build_concordance(many_features)
        for warnings in (
            analyze_tag_quality(many_features, concordance),
            analyze_anti_patterns(many_features),
        ):
            keys = [w.sort_key for w in warnings]
            assert keys == sorted(keys)

    def test_disabled_kind_never_reaches_hook(self, make_feature, make_scenario):
        """A disabled kind is not constructed at all."""
        calls = []
        config = AnalysisConfig(disabled=frozenset({WarningType.MISSING_PRIORITY_TAG}))
        feature = make_feature(scenarios=[make_scenario(tags=("@API",))])
        concordance = build_concordance([feature], config)

        analyze_tag_quality([feature], concordance, config, on_warning=calls.append)

        assert [w for w in calls if w.type is WarningType.MISSING_PRIORITY_TAG] == []

    def test_without_disabling_hook_is_called(self, make_feature, make_scenario):
        calls = []
        feature = make_feature(scenarios=[make_scenario(tags=("@API",))])
        analyze_tag_quality([feature], build_concordance([feature]), on_warning=calls.append)
        assert [w.type for w in calls].count(WarningType.MISSING_PRIORITY_TAG) == 1


class TestRunAnalysis:
    """Tests for run_analysis."""

    def test_report_contents(self, many_features):
        report = run_analysis(many_features)
        assert isinstance(report, AnalysisReport)
        assert report.feature_count == 8
        assert report.scenario_count == 16
        assert report.concordance.get_count("@P1") == 8
        assert report.total_warnings == len(report.warnings)
        assert report.of_family(WarningFamily.ANTI_PATTERN)
        assert report.of_family(WarningFamily.TAG_QUALITY)

    def test_parallel_matches_sequential(self, many_features):
        """The worker pool does not change the result."""
        sequential = run_analysis(many_features, runner=ParallelRunner(max_workers=1))
        parallel = run_analysis(many_features, runner=ParallelRunner(max_workers=4, parallel_threshold=0))
        assert parallel.warnings == sequential.warnings

    def test_same_as_separate_calls(self, many_features):
        report = run_analysis(many_features)
        concordance = build_concordance(many_features)
        separate = analyze_tag_quality(many_features, concordance) + analyze_anti_patterns(many_features)
        assert report.warnings == sorted(separate, key=lambda w: w.sort_key)

    def test_fallback_when_pool_cannot_start(self, many_features):
        def failing_factory(**kwargs):
            raise RuntimeError("no threads")

        runner = ParallelRunner(parallel_threshold=0, executor_factory=failing_factory)
        assert run_analysis(many_features, runner=runner).warnings == run_analysis(many_features).warnings

    def test_counts(self, many_features):
        report = run_analysis(many_features)
        by_severity = report.count_by_severity()
        assert set(by_severity) == set(Severity)
        assert sum(by_severity.values()) == report.total_warnings
        assert sum(report.count_by_type().values()) == report.total_warnings

    def test_fail_threshold(self, make_feature):
        report = run_analysis([make_feature(scenarios=[])])
        assert not report.has_issues_at_or_above(Severity.ERROR)

    def test_trends_against_previous(self, many_features):
        previous = TagConcordance.from_counts({"@P1": 4, "@Legacy": 2})
        trends = {t.tag.name: t for t in run_analysis(many_features, previous=previous).trends}
        assert trends["@P1"].trend is Trend.RISING
        assert trends["@Legacy"].trend is Trend.DECLINING

    def test_empty_corpus(self):
        report = run_analysis([])
        assert report.warnings == []
        assert report.concordance.is_empty()

    def test_timeout_covers_corpus_checks(self, many_features, monkeypatch):
        """Corpus-wide checks run after the per-feature batch and share its timeout."""
        analyze_corpus = TagQualityAnalyzer.analyze_corpus

        def slow_corpus(self):
            time.sleep(0.5)
            return analyze_corpus(self)

        monkeypatch.setattr(TagQualityAnalyzer, "analyze_corpus", slow_corpus)
        with pytest.raises(AnalysisTimeoutError):
            run_analysis(many_features, runner=ParallelRunner(timeout=0.1))


class TestFormatReport:
    """Tests for format_report dispatch."""

    def test_accepts_name_or_enum(self, many_features):
        report = run_analysis(many_features)
        document = json.loads(format_report(report, "JSON"))
        assert document["featureCount"] == 8

    def test_unknown_format(self):
        with pytest.raises(ReportGenerationError):
            format_report([], "pdf")

    def test_unsupported_data(self):
        with pytest.raises(AnalysisError):
            format_report({"not": "a report"}, "plain")
