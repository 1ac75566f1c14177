"""Engine services for FTOC Analyzer."""

from ftoc_analyzer.core.services.engine import (
    analyze_anti_patterns,
    analyze_tag_quality,
    build_concordance,
    run_analysis,
)
from ftoc_analyzer.core.services.parallel import ParallelRunner
from ftoc_analyzer.core.services.tag_filter import filter_features, parse_tag_list

__all__ = [
    "analyze_anti_patterns",
    "analyze_tag_quality",
    "build_concordance",
    "run_analysis",
    "ParallelRunner",
    "filter_features",
    "parse_tag_list",
]
