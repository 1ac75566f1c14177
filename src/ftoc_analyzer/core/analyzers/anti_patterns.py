"""Anti-pattern analyzer for Gherkin scenarios.

Every check is a pure function of one scenario and the configuration:
- Structure: scenario length, missing Given/When/Then, step order
- Wording: UI-focused steps, implementation details, long names and steps
- Language: ambiguous pronouns, mixed tenses, conjunctions inside steps
- Scenario Outlines: missing or too few examples
"""

import re
from functools import lru_cache
from typing import Iterable, NamedTuple, Optional

from ftoc_analyzer.core.analyzers.base import Finding, Rule, RuleEvaluator, WarningHook
from ftoc_analyzer.core.models.analysis import Warning, WarningType
from ftoc_analyzer.core.models.configuration import AnalysisConfig
from ftoc_analyzer.core.models.enums import StepRole
from ftoc_analyzer.core.models.feature import Feature, Scenario, Step
from ftoc_analyzer.core.rules.step_vocabulary import (
    CONJUNCTION_PATTERN,
    FUTURE_TENSE_PATTERN,
    MIN_CLAUSE_WORDS,
    NON_NOUN_WORDS,
    PAST_TENSE_PATTERN,
    PRESENT_TENSE_PATTERN,
    PRONOUN_PATTERN,
)
from ftoc_analyzer.shared.exceptions import AnalysisError
from ftoc_analyzer.shared.formatters import truncate

_PRONOUN_RE = re.compile(PRONOUN_PATTERN, re.IGNORECASE)
_CONJUNCTION_RE = re.compile(CONJUNCTION_PATTERN, re.IGNORECASE)
_WORD_RE = re.compile(r"[A-Za-z][A-Za-z'-]*")
_QUOTED_RE = re.compile(r"\"[^\"]*\"|'[^']*'|<[^>]*>")
_TENSE_RES = (
    ("present", re.compile(PRESENT_TENSE_PATTERN, re.IGNORECASE)),
    ("past", re.compile(PAST_TENSE_PATTERN, re.IGNORECASE)),
    ("future", re.compile(FUTURE_TENSE_PATTERN, re.IGNORECASE)),
)


@lru_cache(maxsize=32)
def _compile_all(patterns: tuple[str, ...]) -> tuple[re.Pattern, ...]:
    return tuple(re.compile(p, re.IGNORECASE) for p in patterns)


def resolve_roles(steps: Iterable[Step]) -> list[Optional[StepRole]]:
    """Role of each step; And/But/* inherit the role of the previous step.

    A continuation keyword before any Given/When/Then has no role.
    """
    roles: list[Optional[StepRole]] = []
    current: Optional[StepRole] = None
    for step in steps:
        role = step.role
        if role is not None:
            current = role
        roles.append(current)
    return roles


class ScenarioScope(NamedTuple):
    """A scenario with its location and resolved step roles."""

    location: str
    scenario: Scenario
    roles: tuple[Optional[StepRole], ...]

    @property
    def steps(self) -> list[Step]:
        return self.scenario.steps


def _step_quote(step: Step) -> str:
    return f'"{truncate(step.full_text)}"'


# ========================
# STRUCTURE
# ========================


def check_long_scenario(scope: ScenarioScope, config: AnalysisConfig) -> list[Finding]:
    count, limit = len(scope.steps), config.thresholds.max_steps
    if count <= limit:
        return []
    return [
        Finding(
            message=f"Scenario has {count} steps (recommended maximum: {limit})",
            location=scope.location,
            recommendations=(
                "Break the scenario into multiple smaller, focused scenarios",
                "Consider using a Background for shared setup steps",
                "Use higher-level steps that encapsulate multiple actions",
                "Focus each scenario on testing a single behavior or rule",
            ),
        )
    ]


def check_too_few_steps(scope: ScenarioScope, config: AnalysisConfig) -> list[Finding]:
    count = len(scope.steps)
    if count >= config.thresholds.min_steps:
        return []
    return [
        Finding(
            message=f"Scenario has only {count} step(s)",
            location=scope.location,
            recommendations=(
                "A complete scenario typically needs at least setup (Given) and verification (Then) steps",
                "Consider if this is a valid standalone scenario or should be combined with another",
            ),
        )
    ]


def _missing_role_check(role: StepRole, *recommendations: str):
    def check(scope: ScenarioScope, config: AnalysisConfig) -> list[Finding]:
        if role in scope.roles:
            return []
        return [
            Finding(
                message=f"Scenario is missing a {role.value} step",
                location=scope.location,
                recommendations=recommendations,
            )
        ]

    check.__name__ = f"check_missing_{role.name.lower()}"
    return check


check_missing_given = _missing_role_check(
    StepRole.GIVEN,
    "Add a Given step to establish the initial context/state",
    "Every scenario should describe the starting state with Given steps",
)
check_missing_when = _missing_role_check(
    StepRole.WHEN,
    "Add a When step to describe the action being tested",
    "When steps represent the action or event that triggers the scenario",
)
check_missing_then = _missing_role_check(
    StepRole.THEN,
    "Add a Then step to verify the expected outcome",
    "Then steps assert the expected results after the action",
)

# Role -> roles it must not follow
_ORDER_VIOLATIONS = {
    StepRole.GIVEN: (StepRole.WHEN, StepRole.THEN),
    StepRole.WHEN: (StepRole.THEN,),
}


def check_step_order(scope: ScenarioScope, config: AnalysisConfig) -> list[Finding]:
    """One finding per step breaking the Given-When-Then sequence."""
    findings = []
    previous: Optional[StepRole] = None
    for step, role in zip(scope.steps, scope.roles):
        if role is None:
            continue
        if previous in _ORDER_VIOLATIONS.get(role, ()):
            findings.append(
                Finding(
                    message=f"{role.value} step after {previous.value} step: {_step_quote(step)}",
                    location=scope.location,
                    recommendations=(
                        "Follow the Given-When-Then sequence (setup, action, verification)",
                        "Given steps should come before When steps",
                        "When steps should come before Then steps",
                    ),
                )
            )
        previous = role
    return findings


# ========================
# WORDING
# ========================


def check_ui_focused_steps(scope: ScenarioScope, config: AnalysisConfig) -> list[Finding]:
    patterns = _compile_all(config.ui_patterns)
    return [
        Finding(
            message=f"Step contains UI-focused language: {_step_quote(step)}",
            location=scope.location,
            recommendations=(
                "Focus on the business behavior rather than UI implementation",
                'Example: Instead of "When I click the Submit button", use "When I submit the form"',
                "UI details belong in step definitions, not in the Gherkin",
            ),
        )
        for step in scope.steps
        if any(p.search(step.text) for p in patterns)
    ]


def check_implementation_details(scope: ScenarioScope, config: AnalysisConfig) -> list[Finding]:
    patterns = _compile_all(config.implementation_patterns)
    return [
        Finding(
            message=f"Step contains technical implementation details: {_step_quote(step)}",
            location=scope.location,
            recommendations=(
                "Remove technical implementation details from scenario steps",
                "Focus on business behavior and outcomes, not technical details",
                'Example: Instead of "When the API returns 200 OK", use "When the operation succeeds"',
            ),
        )
        for step in scope.steps
        if any(p.search(step.text) for p in patterns)
    ]


def check_long_scenario_name(scope: ScenarioScope, config: AnalysisConfig) -> list[Finding]:
    length, limit = len(scope.scenario.name), config.thresholds.max_scenario_name_length
    if length <= limit:
        return []
    return [
        Finding(
            message=f"Scenario name is {length} characters long (recommended maximum: {limit})",
            location=scope.location,
            recommendations=(
                "Shorten the scenario name to be more concise",
                "Focus on the key behavior being tested",
                "Move details to the steps rather than the title",
            ),
        )
    ]


def check_long_step_text(scope: ScenarioScope, config: AnalysisConfig) -> list[Finding]:
    limit = config.thresholds.max_step_length
    return [
        Finding(
            message=(
                f"Step text is {len(step.text)} characters long "
                f"(recommended maximum: {limit}): {_step_quote(step)}"
            ),
            location=scope.location,
            recommendations=(
                "Shorten the step text to be more concise",
                "Break into multiple smaller steps if necessary",
                "Move complex data to examples, DocString, or DataTable",
            ),
        )
        for step in scope.steps
        if len(step.text) > limit
    ]


# ========================
# LANGUAGE
# ========================


def find_unanchored_pronoun(text: str) -> Optional[str]:
    """Return the first pronoun with no noun-like word before it, if any.

    Heuristic: quoted values and <placeholders> count as nouns, and any
    word outside a small list of function words and verbs is taken as a
    noun. False positives are expected.
    """
    for match in _PRONOUN_RE.finditer(text):
        before = text[: match.start()]
        if _QUOTED_RE.search(before):
            return None
        words = _WORD_RE.findall(before)
        if any(w.lower() not in NON_NOUN_WORDS and len(w) > 1 for w in words):
            return None
        return match.group()
    return None


def check_ambiguous_pronouns(scope: ScenarioScope, config: AnalysisConfig) -> list[Finding]:
    findings = []
    for step in scope.steps:
        pronoun = find_unanchored_pronoun(step.text)
        if pronoun is None:
            continue
        findings.append(
            Finding(
                message=f"Step contains ambiguous pronoun '{pronoun}': {_step_quote(step)}",
                location=scope.location,
                recommendations=(
                    "Use specific nouns instead of pronouns for clarity",
                    'Example: Instead of "When I click it", use "When I click the button"',
                ),
            )
        )
    return findings


def tenses_used(steps: Iterable[Step]) -> list[str]:
    """Tense markers (present, past, future) found across the steps."""
    found = []
    for name, pattern in _TENSE_RES:
        if any(pattern.search(step.text) for step in steps):
            found.append(name)
    return found


def check_inconsistent_tense(scope: ScenarioScope, config: AnalysisConfig) -> list[Finding]:
    tenses = tenses_used(scope.steps)
    if len(tenses) < 2:
        return []
    return [
        Finding(
            message="Scenario mixes " + " and ".join(tenses) + " tense",
            location=scope.location,
            recommendations=(
                "Standardize on a single tense throughout the scenario",
                'Present tense is generally preferred ("I click" rather than "I clicked")',
            ),
        )
    ]


def find_joining_conjunction(text: str) -> Optional[str]:
    """Return a conjunction joining two clauses inside the step text.

    A conjunction counts only with at least ``MIN_CLAUSE_WORDS`` words on
    each side, so "apples and oranges" is not reported.
    """
    stripped = _QUOTED_RE.sub("value", text)
    for match in _CONJUNCTION_RE.finditer(stripped):
        left = _WORD_RE.findall(stripped[: match.start()])
        right = _WORD_RE.findall(stripped[match.end():])
        if len(left) >= MIN_CLAUSE_WORDS and len(right) >= MIN_CLAUSE_WORDS:
            return match.group()
    return None


def check_conjunctions(scope: ScenarioScope, config: AnalysisConfig) -> list[Finding]:
    findings = []
    for step in scope.steps:
        conjunction = find_joining_conjunction(step.text)
        if conjunction is None:
            continue
        findings.append(
            Finding(
                message=(
                    f"Step contains conjunction '{conjunction}' suggesting it should be split: "
                    f"{_step_quote(step)}"
                ),
                location=scope.location,
                recommendations=(
                    "Split steps with conjunctions into separate steps",
                    "Each step should test a single action or assertion",
                ),
            )
        )
    return findings


# ========================
# SCENARIO OUTLINES
# ========================


def check_missing_examples(scope: ScenarioScope, config: AnalysisConfig) -> list[Finding]:
    if not scope.scenario.is_outline or scope.scenario.examples:
        return []
    return [
        Finding(
            message="Scenario Outline has no Examples tables",
            location=scope.location,
            recommendations=(
                "Add at least one Examples table to the Scenario Outline",
                "Scenario Outlines require examples to generate test cases",
            ),
        )
    ]


def check_too_few_examples(scope: ScenarioScope, config: AnalysisConfig) -> list[Finding]:
    scenario = scope.scenario
    if not scenario.is_outline or not scenario.examples:
        return []
    rows, minimum = scenario.example_row_count, config.thresholds.min_examples
    if rows >= minimum:
        return []
    return [
        Finding(
            message=f"Scenario Outline has only {rows} example row(s) (recommended minimum: {minimum})",
            location=scope.location,
            recommendations=(
                "Add more example rows to better test the scenario variations",
                "Include both positive and negative test cases",
                "Consider boundary values and edge cases",
            ),
        )
    ]


SCENARIO_RULES: tuple[Rule, ...] = (
    (WarningType.LONG_SCENARIO, check_long_scenario),
    (WarningType.TOO_FEW_STEPS, check_too_few_steps),
    (WarningType.MISSING_GIVEN, check_missing_given),
    (WarningType.MISSING_WHEN, check_missing_when),
    (WarningType.MISSING_THEN, check_missing_then),
    (WarningType.UI_FOCUSED_STEP, check_ui_focused_steps),
    (WarningType.IMPLEMENTATION_DETAIL, check_implementation_details),
    (WarningType.MISSING_EXAMPLES, check_missing_examples),
    (WarningType.TOO_FEW_EXAMPLES, check_too_few_examples),
    (WarningType.LONG_SCENARIO_NAME, check_long_scenario_name),
    (WarningType.LONG_STEP_TEXT, check_long_step_text),
    (WarningType.INCORRECT_STEP_ORDER, check_step_order),
    (WarningType.AMBIGUOUS_PRONOUN, check_ambiguous_pronouns),
    (WarningType.INCONSISTENT_TENSE, check_inconsistent_tense),
    (WarningType.CONJUNCTION_IN_STEP, check_conjunctions),
)


class AntiPatternAnalyzer:
    """Detects structural and wording anti-patterns in scenarios.

    Background blocks are never checked.
    """

    def __init__(
        self,
        features: Iterable[Feature],
        config: Optional[AnalysisConfig] = None,
        on_warning: Optional[WarningHook] = None,
    ):
        self.evaluator = RuleEvaluator(config, on_warning)
        self.config = self.evaluator.config
        self.features = list(features)
        self.warnings: list[Warning] = []

    def analyze(self) -> list[Warning]:
        """Run all anti-pattern checks.

        Returns:
            Warnings in evaluation order (callers sort them for output)
        """
        for feature in self.features:
            self.warnings.extend(self.analyze_feature(feature))
        return self.warnings

    def analyze_feature(self, feature: Feature) -> list[Warning]:
        """Check every non-background scenario of one feature.

        Raises:
            AnalysisError: If the feature or one of its scenarios is None
        """
        if feature is None:
            raise AnalysisError("Cannot analyze a None feature")

        warnings: list[Warning] = []
        for scenario in feature.scenarios:
            if scenario is None:
                raise AnalysisError(f"{feature.filename} contains a None scenario")
            if scenario.is_background:
                continue
            scope = ScenarioScope(
                location=feature.location_of(scenario),
                scenario=scenario,
                roles=tuple(resolve_roles(scenario.steps)),
            )
            warnings.extend(self.evaluator.evaluate(SCENARIO_RULES, scope))
        return warnings


def analyze_anti_patterns(
    features: Iterable[Feature],
    config: Optional[AnalysisConfig] = None,
    on_warning: Optional[WarningHook] = None,
) -> list[Warning]:
    """Convenience function to run anti-pattern analysis.

    Args:
        features: Parsed features
        config: Analysis configuration (defaults when None)
        on_warning: Called with every warning constructed

    Returns:
        List of anti-pattern warnings
    """
    analyzer = AntiPatternAnalyzer(features, config, on_warning)
    return analyzer.analyze()
