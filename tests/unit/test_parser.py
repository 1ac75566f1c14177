"""Tests for the Gherkin feature file parser."""

from pathlib import Path

import pytest

from ftoc_analyzer.core.models.enums import ScenarioKind, StepRole
from ftoc_analyzer.infrastructure.parsers import (
    find_feature_files,
    parse_feature_file,
    parse_feature_text,
    parse_features,
)
from ftoc_analyzer.shared.exceptions import ParseError, UnsupportedFileError


class TestParseFeatureText:
    """Tests for parse_feature_text function."""

    def test_minimal_feature(self):
        feature = parse_feature_text(
            "Feature: Search\n"
            "  Scenario: Find a product\n"
            "    Given a catalogue\n"
            "    When I search for shoes\n"
            "    Then shoes are listed\n",
            "search.feature",
        )
        assert feature.name == "Search"
        assert feature.filename == "search.feature"
        (scenario,) = feature.scenarios
        assert scenario.name == "Find a product"
        assert scenario.kind is ScenarioKind.SCENARIO
        assert scenario.line_number == 2
        assert [s.keyword for s in scenario.steps] == ["Given", "When", "Then"]
        assert scenario.steps[1].text == "I search for shoes"
        assert scenario.steps[1].role is StepRole.WHEN

    def test_tags_attach_to_next_block(self):
        feature = parse_feature_text(
            "@web @checkout\n"
            "Feature: Checkout\n"
            "  @P1 @UI\n"
            "  @Smoke # owned by web team\n"
            "  Scenario: Pay\n"
            "    Given a cart\n",
        )
        assert feature.tags == ["@web", "@checkout"]
        assert feature.scenarios[0].tags == ["@P1", "@UI", "@Smoke"]

    def test_example_keyword_and_star_steps(self):
        feature = parse_feature_text(
            "Feature: Synonyms\n"
            "  Example: Star steps\n"
            "    * a cart\n"
            "    But no coupon\n"
        )
        (scenario,) = feature.scenarios
        assert scenario.kind is ScenarioKind.SCENARIO
        assert [s.keyword for s in scenario.steps] == ["*", "But"]

    def test_scenario_template_examples(self):
        feature = parse_feature_text(
            "Feature: Outlines\n"
            "  Scenario Template: Sizes\n"
            "    Given size <size>\n"
            "    Scenarios: Small\n"
            "      | size |\n"
            "      | S    |\n"
            "      | XS   |\n"
        )
        (outline,) = feature.scenarios
        assert outline.is_outline
        (examples,) = outline.examples
        assert examples.name == "Small"
        assert examples.headers == ["size"]
        assert examples.rows == [["S"], ["XS"]]
        assert outline.example_row_count == 2

    def test_doc_strings_skipped(self):
        feature = parse_feature_text(
            "Feature: Docs\n"
            "  Scenario: Doc string\n"
            "    Given a note:\n"
            '      """\n'
            "      Given this is not a step\n"
            '      """\n'
            "    Then it is saved\n"
        )
        assert [s.text for s in feature.scenarios[0].steps] == ["a note:", "it is saved"]

    def test_missing_feature_line(self):
        with pytest.raises(ParseError):
            parse_feature_text("Scenario: Orphan\n  Given nothing\n", "bad.feature")

    def test_empty_text(self):
        with pytest.raises(ParseError):
            parse_feature_text("")

    def test_two_features_rejected(self):
        with pytest.raises(ParseError):
            parse_feature_text("Feature: One\nFeature: Two\n")

    def test_examples_outside_scenario(self):
        with pytest.raises(ParseError):
            parse_feature_text("Feature: One\n  Examples:\n    | a |\n")


class TestParseFeatureFile:
    """Tests for parsing the fixture files."""

    def test_login_feature(self, fixtures_dir):
        feature = parse_feature_file(fixtures_dir / "features" / "login.feature")
        assert feature.filename == "login.feature"
        assert feature.tags == ["@Authentication"]
        assert feature.description.splitlines()[0] == "As a registered customer"
        assert [s.kind for s in feature.scenarios] == [
            ScenarioKind.BACKGROUND,
            ScenarioKind.SCENARIO,
            ScenarioKind.SCENARIO,
        ]
        assert len(feature.testable_scenarios) == 2
        locked = feature.scenarios[2]
        assert locked.tags == ["@P2", "@Security", "@WIP"]
        assert len(locked.steps) == 4

    def test_payment_feature(self, fixtures_dir):
        feature = parse_feature_file(fixtures_dir / "features" / "checkout" / "payment.feature")
        outline, receipt = feature.scenarios
        assert outline.kind is ScenarioKind.OUTLINE
        assert outline.tags == ["@P1", "@API"]
        assert [e.rows for e in outline.examples] == [
            [["4111111111111111", "accepted"]],
            [["1234", "rejected"]],
        ]
        assert receipt.tags == ["@P1", "@UI", "@Temp"]
        assert [s.keyword for s in receipt.steps] == ["Given", "When", "Then"]

    def test_tagged_fixture(self, tagged_feature_path):
        feature = parse_feature_file(tagged_feature_path)
        assert [s.tags for s in feature.scenarios] == [
            ["@Smoke", "@UI", "@Fast"],
            ["@Regression", "@API", "@Medium"],
            ["@P1", "@Payment", "@Positive"],
            ["@P1", "@Payment", "@Negative"],
        ]

    def test_byte_order_mark(self, tmp_path):
        path = tmp_path / "bom.feature"
        path.write_bytes("\ufeffFeature: Bom\n".encode("utf-8"))
        assert parse_feature_file(path).name == "Bom"

    def test_wrong_suffix(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("Feature: Not really\n")
        with pytest.raises(UnsupportedFileError):
            parse_feature_file(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ParseError):
            parse_feature_file(tmp_path / "missing.feature")


class TestDiscovery:
    """Tests for find_feature_files and parse_features."""

    def test_recursive_sorted(self, fixtures_dir):
        paths = find_feature_files(fixtures_dir / "features")
        assert [p.relative_to(fixtures_dir / "features").as_posix() for p in paths] == [
            "checkout/payment.feature",
            "login.feature",
        ]

    def test_single_file(self, tagged_feature_path):
        assert find_feature_files(tagged_feature_path) == [tagged_feature_path]

    def test_missing_path(self, tmp_path):
        with pytest.raises(ParseError):
            find_feature_files(tmp_path / "nowhere")

    def test_non_feature_file(self, fixtures_dir):
        with pytest.raises(UnsupportedFileError):
            find_feature_files(fixtures_dir / "configs" / "strict.yml")

    def test_parse_features(self, fixtures_dir):
        features = parse_features(fixtures_dir / "features")
        assert [f.name for f in features] == ["Payment", "Login"]

    def test_empty_directory(self, tmp_path):
        assert parse_features(Path(tmp_path)) == []
