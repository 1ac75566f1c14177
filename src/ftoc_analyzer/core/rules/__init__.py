"""Built-in vocabularies, wording patterns and thresholds."""

from ftoc_analyzer.core.rules.tag_constants import (
    LOW_VALUE_TAGS,
    MAX_SCENARIO_NAME_LENGTH,
    MAX_STEP_LENGTH,
    MAX_STEPS,
    MAX_TAGS,
    MIN_EXAMPLES,
    MIN_STEPS,
    PRIORITY_TAGS,
    STATUS_TAGS,
    TYPE_TAGS,
)
from ftoc_analyzer.core.rules.step_vocabulary import (
    IMPLEMENTATION_PATTERNS,
    UI_PATTERNS,
)

__all__ = [
    "LOW_VALUE_TAGS",
    "MAX_SCENARIO_NAME_LENGTH",
    "MAX_STEP_LENGTH",
    "MAX_STEPS",
    "MAX_TAGS",
    "MIN_EXAMPLES",
    "MIN_STEPS",
    "PRIORITY_TAGS",
    "STATUS_TAGS",
    "TYPE_TAGS",
    "IMPLEMENTATION_PATTERNS",
    "UI_PATTERNS",
]
