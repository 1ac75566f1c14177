"""Analysis configuration: enabled kinds, severities, thresholds and vocabularies."""

import re
from types import MappingProxyType
from typing import Any, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from ftoc_analyzer.core.models.analysis import WarningType
from ftoc_analyzer.core.models.enums import Severity
from ftoc_analyzer.core.models.tag import TagVocabulary
from ftoc_analyzer.core.rules import tag_constants
from ftoc_analyzer.core.rules.step_vocabulary import IMPLEMENTATION_PATTERNS, UI_PATTERNS
from ftoc_analyzer.shared.exceptions import ConfigurationError


class Thresholds(BaseModel):
    """Numeric limits used by the analyzers."""

    max_steps: int = Field(default=tag_constants.MAX_STEPS, ge=0)
    min_steps: int = Field(default=tag_constants.MIN_STEPS, ge=0)
    max_tags: int = Field(default=tag_constants.MAX_TAGS, ge=0)
    max_scenario_name_length: int = Field(default=tag_constants.MAX_SCENARIO_NAME_LENGTH, ge=0)
    max_step_length: int = Field(default=tag_constants.MAX_STEP_LENGTH, ge=0)
    min_examples: int = Field(default=tag_constants.MIN_EXAMPLES, ge=0)
    typo_max_distance: int = Field(default=tag_constants.TYPO_MAX_DISTANCE, ge=0)
    typo_min_length: int = Field(default=tag_constants.TYPO_MIN_LENGTH, ge=0)
    significance_quantile: float = Field(
        default=tag_constants.SIGNIFICANCE_QUANTILE, ge=0.0, le=1.0
    )
    parallel_threshold: int = Field(default=tag_constants.PARALLEL_THRESHOLD, ge=0)

    model_config = {"frozen": True, "extra": "forbid"}

    @field_validator("*", mode="before")
    @classmethod
    def _reject_booleans(cls, value: Any) -> Any:
        # YAML "yes"/"no" would otherwise pass as 1/0
        if isinstance(value, bool):
            raise ValueError("must be a number")
        return value


# camelCase keys of the YAML file -> Thresholds fields
_THRESHOLD_KEYS = {
    "maxSteps": "max_steps",
    "minSteps": "min_steps",
    "maxTags": "max_tags",
    "maxScenarioNameLength": "max_scenario_name_length",
    "maxStepLength": "max_step_length",
    "minExamples": "min_examples",
    "maxExamples": "min_examples",  # legacy name of minExamples
    "typoMaxDistance": "typo_max_distance",
    "typoMinLength": "typo_min_length",
    "significanceQuantile": "significance_quantile",
    "parallelThreshold": "parallel_threshold",
}

_VOCABULARY_KEYS = {
    "priority": "priority",
    "type": "type",
    "status": "status",
    "lowValue": "low_value",
}


class AnalysisConfig(BaseModel):
    """Settings shared by every analyzer in one run.

    Severities hold overrides only; ``severity_for`` falls back to the
    built-in default of each kind.
    """

    disabled: frozenset[WarningType] = Field(default_factory=frozenset)
    severities: Mapping[WarningType, Severity] = Field(default_factory=dict, validate_default=True)
    standard_alternatives: Mapping[WarningType, tuple[str, ...]] = Field(
        default_factory=dict, validate_default=True
    )
    thresholds: Thresholds = Field(default_factory=Thresholds)
    vocabulary: TagVocabulary = Field(default_factory=TagVocabulary)
    ui_patterns: tuple[str, ...] = Field(default=UI_PATTERNS)
    implementation_patterns: tuple[str, ...] = Field(default=IMPLEMENTATION_PATTERNS)

    model_config = {"frozen": True}

    @field_validator("severities", "standard_alternatives")
    @classmethod
    def _read_only(cls, value: Mapping[Any, Any]) -> Mapping[Any, Any]:
        # DEFAULT_CONFIG is shared between runs
        return MappingProxyType(dict(value))

    @field_validator("ui_patterns", "implementation_patterns")
    @classmethod
    def _patterns_compile(cls, patterns: tuple[str, ...]) -> tuple[str, ...]:
        for pattern in patterns:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"invalid pattern {pattern!r}: {e}") from e
        return patterns

    @classmethod
    def create(cls, **kwargs: Any) -> "AnalysisConfig":
        """Construct a config, turning validation failures into ConfigurationError."""
        try:
            return cls(**kwargs)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

    def is_enabled(self, kind: WarningType) -> bool:
        return kind not in self.disabled

    def severity_for(self, kind: WarningType) -> Severity:
        return self.severities.get(kind, kind.default_severity)

    def alternatives_for(self, kind: WarningType) -> list[str]:
        return list(self.standard_alternatives.get(kind, []))

    # ========================
    # YAML LAYOUT
    # ========================

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "AnalysisConfig":
        """Build a config from the ``ftoc-warnings.yml`` layout.

        Example::

            warnings:
              disabled: [DUPLICATE_TAG]
              tagQuality:
                LOW_VALUE_TAG: {enabled: true, severity: info}
              antiPatterns:
                TOO_FEW_STEPS: false
            thresholds:
              maxSteps: 12
            tags:
              lowValue: ["@Temp", "@TBD"]

        Raises:
            ConfigurationError: On unknown warning kinds or severities,
                non-numeric or negative thresholds, or malformed sections
        """
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise ConfigurationError("Configuration root must be a mapping")

        disabled: set[WarningType] = set()
        severities: dict[WarningType, Severity] = {}
        alternatives: dict[WarningType, list[str]] = {}

        warnings_section = _section(data, "warnings")
        for name in _string_list(warnings_section.get("disabled"), "warnings.disabled"):
            disabled.add(_parse_kind(name))

        for family_key in ("tagQuality", "antiPatterns"):
            family = _section(warnings_section, family_key)
            for name, settings in family.items():
                kind = _parse_kind(name)
                if isinstance(settings, bool):
                    if not settings:
                        disabled.add(kind)
                    continue
                if settings is None:
                    continue
                if not isinstance(settings, Mapping):
                    raise ConfigurationError(f"warnings.{family_key}.{name} must be a mapping")
                if settings.get("enabled", True) is False:
                    disabled.add(kind)
                if "severity" in settings:
                    severities[kind] = Severity.parse(settings["severity"])
                if "standardAlternatives" in settings:
                    alternatives[kind] = _string_list(
                        settings["standardAlternatives"],
                        f"warnings.{family_key}.{name}.standardAlternatives",
                    )

        threshold_values = {}
        for key, value in _section(data, "thresholds").items():
            field = _THRESHOLD_KEYS.get(key)
            if field is None:
                raise ConfigurationError(f"Unknown threshold: {key}")
            threshold_values[field] = value

        vocabulary_values = {}
        for key, value in _section(data, "tags").items():
            field = _VOCABULARY_KEYS.get(key)
            if field is None:
                raise ConfigurationError(f"Unknown tag list: tags.{key}")
            vocabulary_values[field] = tuple(_string_list(value, f"tags.{key}"))

        try:
            thresholds = Thresholds(**threshold_values)
            vocabulary = TagVocabulary(**vocabulary_values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

        kwargs: dict[str, Any] = {
            "disabled": frozenset(disabled),
            "severities": severities,
            "standard_alternatives": alternatives,
            "thresholds": thresholds,
            "vocabulary": vocabulary,
        }
        patterns = _section(data, "patterns")
        if "ui" in patterns:
            kwargs["ui_patterns"] = tuple(_string_list(patterns["ui"], "patterns.ui"))
        if "implementation" in patterns:
            kwargs["implementation_patterns"] = tuple(
                _string_list(patterns["implementation"], "patterns.implementation")
            )
        return cls.create(**kwargs)


DEFAULT_CONFIG = AnalysisConfig()


def _parse_kind(name: Any) -> WarningType:
    try:
        return WarningType(str(name).strip().upper())
    except ValueError:
        raise ConfigurationError(f"Unknown warning kind: {name!r}") from None


def _section(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"'{key}' section must be a mapping")
    return value


def _string_list(value: Any, where: str) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise ConfigurationError(f"{where} must be a list")
    return [str(item) for item in value]
