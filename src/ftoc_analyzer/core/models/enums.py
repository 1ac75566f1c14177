"""Enumerations for FTOC domain models."""

from enum import Enum

from ftoc_analyzer.shared.exceptions import ConfigurationError


class TagCategory(str, Enum):
    """Tag categories, declared in report order."""

    PRIORITY = "priority"
    TYPE = "type"
    STATUS = "status"
    OTHER = "other"

    @property
    def rank(self) -> int:
        """Position used when ordering tags (PRIORITY first)."""
        return list(TagCategory).index(self)


class ScenarioKind(str, Enum):
    """Gherkin scenario block types."""

    SCENARIO = "Scenario"
    OUTLINE = "Scenario Outline"
    BACKGROUND = "Background"


class StepRole(str, Enum):
    """Primary Gherkin step keywords."""

    GIVEN = "Given"
    WHEN = "When"
    THEN = "Then"


class Severity(str, Enum):
    """Severity levels for findings, most severe first."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @property
    def rank(self) -> int:
        """0 for ERROR, 2 for INFO."""
        return list(Severity).index(self)

    @classmethod
    def parse(cls, value: str) -> "Severity":
        """Parse a severity name case-insensitively."""
        try:
            return cls(value.strip().lower())
        except (AttributeError, ValueError):
            raise ConfigurationError(
                f"Unknown severity: {value!r}. Use one of: "
                + ", ".join(s.value for s in cls)
            ) from None


class Trend(str, Enum):
    """Tag usage trend between two runs."""

    RISING = "rising"
    STABLE = "stable"
    DECLINING = "declining"


class ReportFormat(str, Enum):
    """Supported report output formats."""

    PLAIN_TEXT = "plain"
    MARKDOWN = "markdown"
    HTML = "html"
    JSON = "json"
    JUNIT_XML = "junit"
