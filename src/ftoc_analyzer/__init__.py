"""FTOC Analyzer - tag concordance, tag quality and anti-pattern analysis for Gherkin features."""

from ftoc_analyzer.__version__ import __version__
from ftoc_analyzer.core.models import (
    AnalysisConfig,
    AnalysisReport,
    Severity,
    Tag,
    TagConcordance,
    Warning,
    WarningType,
)
from ftoc_analyzer.core.services import (
    analyze_anti_patterns,
    analyze_tag_quality,
    build_concordance,
    filter_features,
    run_analysis,
)
from ftoc_analyzer.infrastructure.reports import format_report

__all__ = [
    "__version__",
    "AnalysisConfig",
    "AnalysisReport",
    "Severity",
    "Tag",
    "TagConcordance",
    "Warning",
    "WarningType",
    "analyze_anti_patterns",
    "analyze_tag_quality",
    "build_concordance",
    "filter_features",
    "format_report",
    "run_analysis",
]
