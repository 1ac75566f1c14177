"""Domain models for feature-file analysis."""

from ftoc_analyzer.core.models.enums import (
    ReportFormat,
    ScenarioKind,
    Severity,
    StepRole,
    TagCategory,
    Trend,
)
from ftoc_analyzer.core.models.tag import DEFAULT_VOCABULARY, Tag, TagVocabulary
from ftoc_analyzer.core.models.feature import Example, Feature, Scenario, Step
from ftoc_analyzer.core.models.concordance import (
    CoOccurrence,
    TagConcordance,
    TagTrend,
)
from ftoc_analyzer.core.models.analysis import (
    AnalysisReport,
    Warning,
    WarningFamily,
    WarningType,
    sort_warnings,
)
from ftoc_analyzer.core.models.configuration import (
    DEFAULT_CONFIG,
    AnalysisConfig,
    Thresholds,
)

__all__ = [
    "ReportFormat",
    "ScenarioKind",
    "Severity",
    "StepRole",
    "TagCategory",
    "Trend",
    "DEFAULT_VOCABULARY",
    "Tag",
    "TagVocabulary",
    "Example",
    "Feature",
    "Scenario",
    "Step",
    "CoOccurrence",
    "TagConcordance",
    "TagTrend",
    "AnalysisReport",
    "Warning",
    "WarningFamily",
    "WarningType",
    "sort_warnings",
    "DEFAULT_CONFIG",
    "AnalysisConfig",
    "Thresholds",
]
