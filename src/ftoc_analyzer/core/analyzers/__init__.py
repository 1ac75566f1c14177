"""Rule-based analyzers for feature files."""

from ftoc_analyzer.core.analyzers.base import Finding, RuleEvaluator, WarningHook
from ftoc_analyzer.core.analyzers.tag_quality import (
    TagQualityAnalyzer,
    analyze_tag_quality,
)
from ftoc_analyzer.core.analyzers.anti_patterns import (
    AntiPatternAnalyzer,
    analyze_anti_patterns,
)

__all__ = [
    "Finding",
    "RuleEvaluator",
    "WarningHook",
    "TagQualityAnalyzer",
    "AntiPatternAnalyzer",
    "analyze_tag_quality",
    "analyze_anti_patterns",
]
