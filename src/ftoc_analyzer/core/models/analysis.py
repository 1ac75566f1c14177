"""Analysis result models."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from ftoc_analyzer.core.models.concordance import TagConcordance, TagTrend
from ftoc_analyzer.core.models.enums import Severity


class WarningFamily(str, Enum):
    """Which analyzer produces a warning kind."""

    TAG_QUALITY = "tag_quality"
    ANTI_PATTERN = "anti_pattern"


class WarningType(str, Enum):
    """Kinds of issues detected in feature files."""

    # Tag quality
    MISSING_PRIORITY_TAG = "MISSING_PRIORITY_TAG"
    MISSING_TYPE_TAG = "MISSING_TYPE_TAG"
    LOW_VALUE_TAG = "LOW_VALUE_TAG"
    DUPLICATE_TAG = "DUPLICATE_TAG"
    EXCESSIVE_TAGS = "EXCESSIVE_TAGS"
    TAG_TYPO = "TAG_TYPO"
    ORPHANED_TAG = "ORPHANED_TAG"
    AMBIGUOUS_TAG = "AMBIGUOUS_TAG"
    MALFORMED_TAG = "MALFORMED_TAG"
    INCONSISTENT_TAGGING = "INCONSISTENT_TAGGING"
    TOO_GENERIC_TAG = "TOO_GENERIC_TAG"

    # Anti-patterns
    LONG_SCENARIO = "LONG_SCENARIO"
    TOO_FEW_STEPS = "TOO_FEW_STEPS"
    MISSING_GIVEN = "MISSING_GIVEN"
    MISSING_WHEN = "MISSING_WHEN"
    MISSING_THEN = "MISSING_THEN"
    UI_FOCUSED_STEP = "UI_FOCUSED_STEP"
    IMPLEMENTATION_DETAIL = "IMPLEMENTATION_DETAIL"
    MISSING_EXAMPLES = "MISSING_EXAMPLES"
    TOO_FEW_EXAMPLES = "TOO_FEW_EXAMPLES"
    LONG_SCENARIO_NAME = "LONG_SCENARIO_NAME"
    LONG_STEP_TEXT = "LONG_STEP_TEXT"
    INCORRECT_STEP_ORDER = "INCORRECT_STEP_ORDER"
    AMBIGUOUS_PRONOUN = "AMBIGUOUS_PRONOUN"
    INCONSISTENT_TENSE = "INCONSISTENT_TENSE"
    CONJUNCTION_IN_STEP = "CONJUNCTION_IN_STEP"

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]

    @property
    def family(self) -> WarningFamily:
        if self in _TAG_QUALITY_TYPES:
            return WarningFamily.TAG_QUALITY
        return WarningFamily.ANTI_PATTERN

    @property
    def default_severity(self) -> Severity:
        return _DEFAULT_SEVERITIES.get(self, Severity.WARNING)


_TAG_QUALITY_TYPES = frozenset({
    WarningType.MISSING_PRIORITY_TAG,
    WarningType.MISSING_TYPE_TAG,
    WarningType.LOW_VALUE_TAG,
    WarningType.DUPLICATE_TAG,
    WarningType.EXCESSIVE_TAGS,
    WarningType.TAG_TYPO,
    WarningType.ORPHANED_TAG,
    WarningType.AMBIGUOUS_TAG,
    WarningType.MALFORMED_TAG,
    WarningType.INCONSISTENT_TAGGING,
    WarningType.TOO_GENERIC_TAG,
})

_DESCRIPTIONS = {
    WarningType.MISSING_PRIORITY_TAG: "Missing priority tag",
    WarningType.MISSING_TYPE_TAG: "Missing type tag",
    WarningType.LOW_VALUE_TAG: "Low-value tag",
    WarningType.DUPLICATE_TAG: "Duplicate tag",
    WarningType.EXCESSIVE_TAGS: "Excessive tags",
    WarningType.TAG_TYPO: "Possible tag typo",
    WarningType.ORPHANED_TAG: "Orphaned tag (used only once)",
    WarningType.AMBIGUOUS_TAG: "Ambiguous tag",
    WarningType.MALFORMED_TAG: "Malformed tag",
    WarningType.INCONSISTENT_TAGGING: "Inconsistent tagging",
    WarningType.TOO_GENERIC_TAG: "Too generic tag",
    WarningType.LONG_SCENARIO: "Long scenario",
    WarningType.TOO_FEW_STEPS: "Too few steps",
    WarningType.MISSING_GIVEN: "Missing Given step",
    WarningType.MISSING_WHEN: "Missing When step",
    WarningType.MISSING_THEN: "Missing Then step",
    WarningType.UI_FOCUSED_STEP: "UI-focused step",
    WarningType.IMPLEMENTATION_DETAIL: "Implementation detail in step",
    WarningType.MISSING_EXAMPLES: "Missing examples in Scenario Outline",
    WarningType.TOO_FEW_EXAMPLES: "Too few examples in Scenario Outline",
    WarningType.LONG_SCENARIO_NAME: "Long scenario name",
    WarningType.LONG_STEP_TEXT: "Long step text",
    WarningType.INCORRECT_STEP_ORDER: "Incorrect step order",
    WarningType.AMBIGUOUS_PRONOUN: "Ambiguous pronoun in step",
    WarningType.INCONSISTENT_TENSE: "Inconsistent tense in steps",
    WarningType.CONJUNCTION_IN_STEP: "Conjunction in step",
}

# Anything not listed defaults to WARNING
_DEFAULT_SEVERITIES = {
    WarningType.MISSING_PRIORITY_TAG: Severity.ERROR,
    WarningType.MISSING_TYPE_TAG: Severity.ERROR,
    WarningType.MALFORMED_TAG: Severity.ERROR,
    WarningType.ORPHANED_TAG: Severity.INFO,
    WarningType.TOO_GENERIC_TAG: Severity.INFO,
    WarningType.MISSING_GIVEN: Severity.ERROR,
    WarningType.MISSING_WHEN: Severity.ERROR,
    WarningType.MISSING_THEN: Severity.ERROR,
    WarningType.MISSING_EXAMPLES: Severity.ERROR,
    WarningType.INCORRECT_STEP_ORDER: Severity.ERROR,
    WarningType.LONG_SCENARIO_NAME: Severity.INFO,
    WarningType.LONG_STEP_TEXT: Severity.INFO,
}


class Warning(BaseModel):
    """A tag quality or anti-pattern issue."""

    type: WarningType = Field(..., description="Kind of issue")
    message: str = Field(..., description="Human-readable description")
    location: Optional[str] = Field(
        default=None, description="'file' or 'file - scenario'; None for corpus-level issues"
    )
    recommendations: list[str] = Field(default_factory=list)
    severity: Severity = Field(default=Severity.WARNING)
    standard_alternatives: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}

    @property
    def sort_key(self) -> tuple[str, str, str]:
        """Deterministic report order: location, then kind, then message."""
        return (self.location or "", self.type.value, self.message)

    def __str__(self) -> str:
        text = f"{self.severity.value.upper()}: {self.type.description}: {self.message}"
        if self.location:
            text += f" (in {self.location})"
        return text


def sort_warnings(warnings: list[Warning]) -> list[Warning]:
    """Return warnings in deterministic report order."""
    return sorted(warnings, key=lambda w: w.sort_key)


def count_by_severity(warnings: list[Warning]) -> dict[Severity, int]:
    """Occurrences per severity, every severity present."""
    counts = {severity: 0 for severity in Severity}
    for warning in warnings:
        counts[warning.severity] += 1
    return counts


def count_by_type(warnings: list[Warning]) -> dict[WarningType, int]:
    """Occurrences per kind, kinds in name order."""
    counts: dict[WarningType, int] = {}
    for warning in warnings:
        counts[warning.type] = counts.get(warning.type, 0) + 1
    return dict(sorted(counts.items(), key=lambda item: item[0].value))


class AnalysisReport(BaseModel):
    """Complete analysis result for one run."""

    concordance: TagConcordance
    warnings: list[Warning] = Field(default_factory=list)
    trends: list[TagTrend] = Field(default_factory=list, description="Tag ordering")
    feature_count: int = Field(default=0)
    scenario_count: int = Field(default=0)

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @property
    def total_warnings(self) -> int:
        return len(self.warnings)

    def count_by_severity(self) -> dict[Severity, int]:
        return count_by_severity(self.warnings)

    def count_by_type(self) -> dict[WarningType, int]:
        return count_by_type(self.warnings)

    def of_family(self, family: WarningFamily) -> list[Warning]:
        return [w for w in self.warnings if w.type.family is family]

    def has_issues_at_or_above(self, severity: Severity) -> bool:
        return any(w.severity.rank <= severity.rank for w in self.warnings)
