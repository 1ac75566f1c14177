"""Parsers for Gherkin feature files."""

from ftoc_analyzer.infrastructure.parsers.feature_parser import (
    FeatureParser,
    find_feature_files,
    parse_feature_file,
    parse_feature_text,
    parse_features,
)

__all__ = [
    "FeatureParser",
    "find_feature_files",
    "parse_feature_file",
    "parse_feature_text",
    "parse_features",
]
