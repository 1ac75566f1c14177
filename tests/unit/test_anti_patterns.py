"""Tests for the anti-pattern analyzer."""

import pytest

from ftoc_analyzer.core.analyzers import AntiPatternAnalyzer, analyze_anti_patterns
from ftoc_analyzer.core.analyzers.anti_patterns import (
    find_joining_conjunction,
    find_unanchored_pronoun,
    resolve_roles,
    tenses_used,
)
from ftoc_analyzer.core.models import AnalysisConfig, Feature, Step, WarningType
from ftoc_analyzer.core.models.enums import ScenarioKind, Severity, StepRole
from ftoc_analyzer.core.models.feature import Example
from ftoc_analyzer.shared.exceptions import AnalysisError


def check(feature, config=None):
    return analyze_anti_patterns([feature], config)


def of_type(warnings, kind):
    return [w for w in warnings if w.type is kind]


def long_steps(count: int) -> tuple[str, ...]:
    """Given, And..., When, Then with ``count`` steps in total."""
    middle = tuple(f"And setup item {i} exists" for i in range(count - 3))
    return ("Given a customer account",) + middle + ("When the customer checks out", "Then the order is placed")


class TestCleanScenario:
    """A well-formed scenario raises nothing."""

    def test_no_warnings(self, make_feature):
        assert check(make_feature()) == []

    def test_background_skipped(self, make_feature, make_scenario):
        background = make_scenario(name="", kind=ScenarioKind.BACKGROUND, step_lines=("Given the shop is open",))
        assert check(make_feature(scenarios=[background, make_scenario()])) == []


class TestStructure:
    """Tests for step counts and Given/When/Then structure."""

    def test_max_steps_boundary(self, make_feature, make_scenario):
        """Ten steps are fine; eleven are too many."""
        ten = make_feature(scenarios=[make_scenario(step_lines=long_steps(10))])
        assert not of_type(check(ten), WarningType.LONG_SCENARIO)

        eleven = make_feature(scenarios=[make_scenario(step_lines=long_steps(11))])
        (warning,) = of_type(check(eleven), WarningType.LONG_SCENARIO)
        assert warning.message == "Scenario has 11 steps (recommended maximum: 10)"
        assert warning.location == "login.feature - Customer signs in"

    def test_too_few_steps(self, make_feature, make_scenario):
        feature = make_feature(scenarios=[make_scenario(step_lines=("Then the page loads",))])
        warnings = check(feature)
        assert len(of_type(warnings, WarningType.TOO_FEW_STEPS)) == 1
        assert of_type(warnings, WarningType.MISSING_GIVEN)
        assert of_type(warnings, WarningType.MISSING_WHEN)
        assert not of_type(warnings, WarningType.MISSING_THEN)

    def test_continuations_inherit_role(self, make_feature, make_scenario):
        """And/But take the role of the previous step."""
        feature = make_feature(
            scenarios=[make_scenario(step_lines=("Given a cart", "And a coupon", "Then the total drops"))]
        )
        warnings = check(feature)
        assert [w.type for w in warnings] == [WarningType.MISSING_WHEN]
        assert warnings[0].severity is Severity.ERROR

    def test_leading_continuation_has_no_role(self):
        roles = resolve_roles([Step(keyword="And", text="x"), Step(keyword="When", text="y"), Step(keyword="*", text="z")])
        assert roles == [None, StepRole.WHEN, StepRole.WHEN]

    def test_step_after_then(self, make_feature, make_scenario):
        feature = make_feature(
            scenarios=[
                make_scenario(
                    step_lines=(
                        "Given a cart",
                        "When the customer pays",
                        "Then the order is placed",
                        "When the customer cancels",
                        "Then the order is cancelled",
                    )
                )
            ]
        )
        (warning,) = of_type(check(feature), WarningType.INCORRECT_STEP_ORDER)
        assert warning.message == 'When step after Then step: "When the customer cancels"'

    def test_given_after_when(self, make_feature, make_scenario):
        feature = make_feature(
            scenarios=[
                make_scenario(
                    step_lines=("Given a cart", "When the customer pays", "Given a coupon", "Then the total drops")
                )
            ]
        )
        warnings = of_type(check(feature), WarningType.INCORRECT_STEP_ORDER)
        assert len(warnings) == 1
        assert warnings[0].message.startswith("Given step after When step")

    def test_ordered_steps_pass(self, make_feature):
        assert not of_type(check(make_feature()), WarningType.INCORRECT_STEP_ORDER)


class TestWording:
    """Tests for UI wording, implementation details and lengths."""

    def test_ui_focused_step(self, make_feature, make_scenario):
        feature = make_feature(
            scenarios=[
                make_scenario(
                    step_lines=("Given a cart", "When I click on the checkout button", "Then the order is placed")
                )
            ]
        )
        (warning,) = of_type(check(feature), WarningType.UI_FOCUSED_STEP)
        assert "click on the checkout button" in warning.message

    def test_implementation_detail(self, make_feature, make_scenario):
        feature = make_feature(
            scenarios=[
                make_scenario(
                    step_lines=("Given a cart", "When the customer pays", "Then the status code is 200")
                )
            ]
        )
        assert len(of_type(check(feature), WarningType.IMPLEMENTATION_DETAIL)) == 1

    def test_custom_ui_patterns(self, make_feature, make_scenario):
        config = AnalysisConfig.from_mapping({"patterns": {"ui": [r"\btap(s|ped)?\b"]}})
        feature = make_feature(
            scenarios=[make_scenario(step_lines=("Given a cart", "When I tap pay", "Then the order is placed"))]
        )
        assert len(of_type(check(feature, config), WarningType.UI_FOCUSED_STEP)) == 1

    def test_long_scenario_name_boundary(self, make_feature, make_scenario):
        ok = make_feature(scenarios=[make_scenario(name="n" * 100)])
        assert not of_type(check(ok), WarningType.LONG_SCENARIO_NAME)

        too_long = make_feature(scenarios=[make_scenario(name="n" * 101)])
        (warning,) = of_type(check(too_long), WarningType.LONG_SCENARIO_NAME)
        assert warning.severity is Severity.INFO

    def test_long_step_text_excludes_keyword(self, make_feature, make_scenario):
        """Only the text after the keyword is measured."""
        exactly = "Given " + "x" * 120
        over = "Then " + "y" * 121
        feature = make_feature(scenarios=[make_scenario(step_lines=(exactly, "When it runs", over))])
        warnings = of_type(check(feature), WarningType.LONG_STEP_TEXT)
        assert len(warnings) == 1
        assert "121 characters" in warnings[0].message


class TestLanguage:
    """Tests for pronoun, tense and conjunction heuristics."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("I open it", "it"),
            ("I see it in my order", "it"),
            ("the customer opens the cart and checks it", None),
            ('I add "blue shoes" and remove them', None),
            ("<user> deletes this", None),
            ("the order is placed", None),
        ],
    )
    def test_find_unanchored_pronoun(self, text, expected):
        assert find_unanchored_pronoun(text) == expected

    def test_ambiguous_pronoun_warning(self, make_feature, make_scenario):
        feature = make_feature(
            scenarios=[make_scenario(step_lines=("Given a product page", "When I open it", "Then the price shows"))]
        )
        (warning,) = of_type(check(feature), WarningType.AMBIGUOUS_PRONOUN)
        assert "'it'" in warning.message

    def test_tenses_used(self):
        steps = [
            Step(keyword="Given", text="I clicked the basket"),
            Step(keyword="When", text="I submit the order"),
            Step(keyword="Then", text="the order will appear"),
        ]
        assert tenses_used(steps) == ["present", "past", "future"]

    def test_inconsistent_tense(self, make_feature, make_scenario):
        feature = make_feature(
            scenarios=[
                make_scenario(
                    step_lines=("Given I opened the basket", "When I submit the order", "Then the order is placed")
                )
            ]
        )
        (warning,) = of_type(check(feature), WarningType.INCONSISTENT_TENSE)
        assert warning.message == "Scenario mixes present and past tense"

    def test_single_tense_passes(self, make_feature, make_scenario):
        feature = make_feature(
            scenarios=[
                make_scenario(step_lines=("Given I open the basket", "When I submit the order", "Then I see a receipt"))
            ]
        )
        assert not of_type(check(feature), WarningType.INCONSISTENT_TENSE)

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("the customer adds a book and removes a pen", "and"),
            ("the payment fails but the order stays open", "but"),
            ("apples and oranges", None),
            ('the title is "Salt and Pepper"', None),
            ("the cart is empty", None),
        ],
    )
    def test_find_joining_conjunction(self, text, expected):
        assert find_joining_conjunction(text) == expected

    def test_conjunction_warning(self, make_feature, make_scenario):
        feature = make_feature(
            scenarios=[
                make_scenario(
                    step_lines=("Given a cart", "When the customer adds a book and removes a pen", "Then the total changes")
                )
            ]
        )
        (warning,) = of_type(check(feature), WarningType.CONJUNCTION_IN_STEP)
        assert "'and'" in warning.message


class TestOutlines:
    """Tests for Scenario Outline examples."""

    def test_missing_examples(self, make_feature, make_scenario):
        outline = make_scenario(kind=ScenarioKind.OUTLINE)
        (warning,) = of_type(check(make_feature(scenarios=[outline])), WarningType.MISSING_EXAMPLES)
        assert warning.severity is Severity.ERROR

    def test_too_few_example_rows(self, make_feature, make_scenario):
        outline = make_scenario(
            kind=ScenarioKind.OUTLINE,
            examples=[Example(headers=["card"], rows=[["visa"]])],
        )
        warnings = check(make_feature(scenarios=[outline]))
        assert len(of_type(warnings, WarningType.TOO_FEW_EXAMPLES)) == 1
        assert not of_type(warnings, WarningType.MISSING_EXAMPLES)

    def test_rows_counted_across_tables(self, make_feature, make_scenario):
        outline = make_scenario(
            kind=ScenarioKind.OUTLINE,
            examples=[
                Example(headers=["card"], rows=[["visa"]]),
                Example(headers=["card"], rows=[["amex"]]),
            ],
        )
        assert check(make_feature(scenarios=[outline])) == []

    def test_plain_scenarios_need_no_examples(self, make_feature):
        assert not of_type(check(make_feature()), WarningType.MISSING_EXAMPLES)


class TestConfiguration:
    """Tests for configuration applied to anti-pattern checks."""

    def test_disabled_kind(self, make_feature, make_scenario):
        config = AnalysisConfig(disabled=frozenset({WarningType.TOO_FEW_STEPS, WarningType.MISSING_GIVEN}))
        feature = make_feature(
            scenarios=[make_scenario(step_lines=("When the page loads", "Then it works"))]
        )
        kinds = {w.type for w in check(feature, config)}
        assert WarningType.TOO_FEW_STEPS not in kinds
        assert WarningType.MISSING_GIVEN not in kinds

    def test_custom_max_steps(self, make_feature, make_scenario):
        config = AnalysisConfig.from_mapping({"thresholds": {"maxSteps": 3}})
        feature = make_feature(scenarios=[make_scenario(step_lines=long_steps(4))])
        assert of_type(check(feature, config), WarningType.LONG_SCENARIO)

    def test_only_anti_pattern_kinds(self, make_feature, make_scenario):
        feature = make_feature(scenarios=[make_scenario(tags=(), step_lines=("Then it works",))])
        for warning in check(feature):
            assert warning.type.family.value == "anti_pattern"


class TestAnalyzer:
    """Tests for the analyzer object."""

    def test_none_feature_rejected(self):
        with pytest.raises(AnalysisError):
            AntiPatternAnalyzer([None]).analyze()

    def test_none_scenario_rejected(self):
        feature = Feature.model_construct(name="Broken", filename="broken.feature", tags=[], scenarios=[None])
        with pytest.raises(AnalysisError):
            AntiPatternAnalyzer([feature]).analyze()

    def test_hook_sees_every_warning(self, make_feature, make_scenario):
        seen = []
        feature = make_feature(scenarios=[make_scenario(step_lines=("Then the page loads",))])
        warnings = analyze_anti_patterns([feature], on_warning=seen.append)
        assert seen == warnings
