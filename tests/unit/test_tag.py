"""Tests for the Tag model and tag vocabularies."""

import pytest

from ftoc_analyzer.core.models.enums import TagCategory
from ftoc_analyzer.core.models.tag import (
    Tag,
    TagVocabulary,
    is_priority_shorthand,
    normalize_tag_name,
)
from ftoc_analyzer.shared.exceptions import InvalidTagError


class TestNormalizeTagName:
    """Tests for normalize_tag_name function."""

    def test_case_marker_and_separators_ignored(self):
        """Markers, case and separators do not matter."""
        assert normalize_tag_name("@In-Progress") == "inprogress"
        assert normalize_tag_name("inprogress") == "inprogress"
        assert normalize_tag_name("@@IN_PROGRESS") == "inprogress"
        assert normalize_tag_name("@in.progress") == "inprogress"

    def test_priority_shorthand(self):
        """Only P0-P4 count as shorthand."""
        assert is_priority_shorthand("p0")
        assert is_priority_shorthand("p4")
        assert not is_priority_shorthand("p5")
        assert not is_priority_shorthand("p10")


class TestTagOf:
    """Tests for Tag.of construction."""

    def test_marker_added_when_missing(self):
        """A bare word gets the @ marker."""
        tag = Tag.of("Smoke")
        assert tag.name == "@Smoke"
        assert tag.normalized == "smoke"

    def test_original_casing_kept(self):
        """The display name keeps the author's casing."""
        assert Tag.of("@InProgress").name == "@InProgress"

    def test_repeated_markers_collapse(self):
        """Exactly one leading marker is kept."""
        assert Tag.of("@@Smoke").name == "@Smoke"

    def test_surrounding_whitespace_trimmed(self):
        """Whitespace around the token is ignored."""
        assert Tag.of("  @API  ").name == "@API"

    @pytest.mark.parametrize("raw", [None, "", "   ", "@", "@@", "@-_", "@two words"])
    def test_invalid_tags_rejected(self, raw):
        """Empty, blank, marker-only and whitespace tags fail fast."""
        with pytest.raises(InvalidTagError):
            Tag.of(raw)

    def test_non_string_rejected(self):
        """Non-string input is not a tag."""
        with pytest.raises(InvalidTagError) as exc_info:
            Tag.of(42)
        assert exc_info.value.raw == 42


class TestTagEquality:
    """Tests for tag equality, hashing and ordering."""

    def test_equal_ignoring_case_and_marker(self):
        """@P0, @p0 and P0 are the same tag."""
        assert Tag.of("@P0") == Tag.of("@p0") == Tag.of("P0")

    def test_equal_tags_hash_equal(self):
        """Equal tags collapse in sets."""
        assert len({Tag.of("@WIP"), Tag.of("@wip"), Tag.of("wip")}) == 1

    def test_separator_variants_equal(self):
        """@in-progress and @InProgress are one tag."""
        assert Tag.of("@in-progress") == Tag.of("@InProgress")

    def test_sorted_by_category_then_name(self):
        """Priority tags sort first, then type, status and other."""
        tags = [Tag.of("@Payment"), Tag.of("@WIP"), Tag.of("@UI"), Tag.of("@P1"), Tag.of("@API")]
        assert [t.name for t in sorted(tags)] == ["@P1", "@API", "@UI", "@WIP", "@Payment"]

    def test_str_is_name(self):
        """str() gives the display name."""
        assert str(Tag.of("smoke")) == "@smoke"


class TestCategorization:
    """Tests for tag categories."""

    @pytest.mark.parametrize(
        "raw,category",
        [
            ("@P0", TagCategory.PRIORITY),
            ("@p3", TagCategory.PRIORITY),
            ("@Critical", TagCategory.PRIORITY),
            ("@Priority2", TagCategory.PRIORITY),
            ("@UI", TagCategory.TYPE),
            ("@Regression", TagCategory.TYPE),
            ("@WIP", TagCategory.STATUS),
            ("@in-progress", TagCategory.STATUS),
            ("@Payment", TagCategory.OTHER),
        ],
    )
    def test_default_vocabulary(self, raw, category):
        """Built-in lists decide the category."""
        assert Tag.of(raw).category is category

    def test_category_predicates(self):
        """is_priority/is_type/is_status follow the category."""
        assert Tag.of("@High").is_priority()
        assert Tag.of("@API").is_type()
        assert Tag.of("@Flaky").is_status()
        assert not Tag.of("@Payment").is_type()

    def test_custom_vocabulary(self):
        """A custom vocabulary replaces the built-in lists."""
        vocabulary = TagVocabulary(type=("@Payment",))
        assert Tag.of("@Payment", vocabulary).category is TagCategory.TYPE
        assert Tag.of("@UI", vocabulary).category is TagCategory.OTHER

    def test_first_matching_category_wins(self):
        """A tag listed twice takes the earlier category."""
        vocabulary = TagVocabulary(type=("@Urgent",), priority=("@Urgent",))
        assert Tag.of("@Urgent", vocabulary).category is TagCategory.PRIORITY


class TestSimilarity:
    """Tests for typo similarity."""

    def test_one_edit_apart(self):
        """@Regresion is similar to @Regression."""
        assert Tag.of("@Regresion").is_similar_to(Tag.of("@Regression"))

    def test_never_similar_to_itself(self):
        """Distance 0 is not a typo."""
        assert not Tag.of("@Smoke").is_similar_to(Tag.of("@smoke"))

    def test_short_tags_not_similar(self):
        """@P0 and @P1 are legitimately one edit apart."""
        assert not Tag.of("@P0").is_similar_to(Tag.of("@P1"))

    def test_distance_limit(self):
        """More than two edits is not similar."""
        assert Tag.of("@Smoke").distance_to(Tag.of("@Smokers")) == 2
        assert Tag.of("@Smoke").is_similar_to(Tag.of("@Smokers"))
        assert not Tag.of("@Smoke").is_similar_to(Tag.of("@Smokers"), max_distance=1)
        assert not Tag.of("@Login").is_similar_to(Tag.of("@Logout"))
