"""Rule plumbing shared by the analyzers.

A rule is a ``(kind, check)`` pair. ``check`` is a pure function of one
scope (a scenario, a feature or the whole corpus) and the configuration,
returning findings. Findings only become ``Warning`` objects for enabled
kinds.
"""

from typing import Callable, Iterable, NamedTuple, Optional, TypeVar

from ftoc_analyzer.core.models.analysis import Warning, WarningType
from ftoc_analyzer.core.models.configuration import DEFAULT_CONFIG, AnalysisConfig

S = TypeVar("S")

WarningHook = Callable[[Warning], None]


class Finding(NamedTuple):
    """Raw result of a check, before severity and alternatives are applied."""

    message: str
    location: Optional[str]
    recommendations: tuple[str, ...] = ()


Check = Callable[[S, AnalysisConfig], Iterable[Finding]]
Rule = tuple[WarningType, Check]


class RuleEvaluator:
    """Turns findings of enabled rules into warnings."""

    def __init__(
        self,
        config: Optional[AnalysisConfig] = None,
        on_warning: Optional[WarningHook] = None,
    ):
        self.config = config or DEFAULT_CONFIG
        self.on_warning = on_warning

    def evaluate(self, rules: Iterable[Rule], scope: S) -> list[Warning]:
        """Run every enabled rule against one scope."""
        warnings: list[Warning] = []
        for kind, check in rules:
            if not self.config.is_enabled(kind):
                continue
            for finding in check(scope, self.config):
                warnings.append(self.build(kind, finding))
        return warnings

    def build(self, kind: WarningType, finding: Finding) -> Warning:
        alternatives = self.config.alternatives_for(kind)
        recommendations = list(finding.recommendations)
        if alternatives:
            recommendations.append(
                "Use one of the standard alternatives: " + ", ".join(alternatives)
            )
        warning = Warning(
            type=kind,
            message=finding.message,
            location=finding.location,
            recommendations=recommendations,
            severity=self.config.severity_for(kind),
            standard_alternatives=alternatives,
        )
        if self.on_warning is not None:
            self.on_warning(warning)
        return warning
