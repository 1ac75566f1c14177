"""Tag value model and tag vocabularies."""

import re
from functools import cached_property
from typing import Optional

from pydantic import BaseModel, Field

from ftoc_analyzer.core.models.enums import TagCategory
from ftoc_analyzer.core.rules.tag_constants import (
    LOW_VALUE_TAGS,
    PRIORITY_SHORTHAND_PATTERN,
    PRIORITY_TAGS,
    STATUS_TAGS,
    TAG_MARKER,
    TAG_SEPARATORS,
    TYPE_TAGS,
    TYPO_MAX_DISTANCE,
    TYPO_MIN_LENGTH,
)
from ftoc_analyzer.shared.exceptions import InvalidTagError
from ftoc_analyzer.shared.statistics import edit_distance

_SEPARATORS_RE = re.compile(f"[{re.escape(TAG_SEPARATORS)}]")
_PRIORITY_SHORTHAND_RE = re.compile(PRIORITY_SHORTHAND_PATTERN)


def normalize_tag_name(raw: str) -> str:
    """Lowercase a tag and strip its markers and separators.

    "@In-Progress", "inprogress" and "@@IN_PROGRESS" all normalize to
    "inprogress".
    """
    return _SEPARATORS_RE.sub("", raw.strip().lstrip(TAG_MARKER).lower())


def is_priority_shorthand(normalized: str) -> bool:
    """Return True for the P0-P4 shorthand (already normalized)."""
    return bool(_PRIORITY_SHORTHAND_RE.match(normalized))


class TagVocabulary(BaseModel):
    """Word lists used to categorize tags.

    The built-in lists are the defaults; configuration can replace any
    of them. Membership is tested on normalized forms.
    """

    priority: tuple[str, ...] = Field(default=PRIORITY_TAGS)
    type: tuple[str, ...] = Field(default=TYPE_TAGS)
    status: tuple[str, ...] = Field(default=STATUS_TAGS)
    low_value: tuple[str, ...] = Field(default=LOW_VALUE_TAGS)

    model_config = {"frozen": True, "ignored_types": (cached_property,)}

    @cached_property
    def _priority_set(self) -> frozenset[str]:
        return frozenset(normalize_tag_name(t) for t in self.priority)

    @cached_property
    def _type_set(self) -> frozenset[str]:
        return frozenset(normalize_tag_name(t) for t in self.type)

    @cached_property
    def _status_set(self) -> frozenset[str]:
        return frozenset(normalize_tag_name(t) for t in self.status)

    @cached_property
    def _low_value_set(self) -> frozenset[str]:
        return frozenset(normalize_tag_name(t) for t in self.low_value)

    def is_priority(self, normalized: str) -> bool:
        return normalized in self._priority_set or is_priority_shorthand(normalized)

    def is_type(self, normalized: str) -> bool:
        return normalized in self._type_set

    def is_status(self, normalized: str) -> bool:
        return normalized in self._status_set

    def is_low_value(self, normalized: str) -> bool:
        return normalized in self._low_value_set

    def categorize(self, normalized: str) -> TagCategory:
        """Return the first category whose list contains the tag."""
        if self.is_priority(normalized):
            return TagCategory.PRIORITY
        if self.is_type(normalized):
            return TagCategory.TYPE
        if self.is_status(normalized):
            return TagCategory.STATUS
        return TagCategory.OTHER


DEFAULT_VOCABULARY = TagVocabulary()


class Tag(BaseModel):
    """A single normalized, categorized tag token such as ``@P0``.

    Two tags are equal when their normalized forms are equal, so
    ``Tag.of("@P0") == Tag.of("@p0") == Tag.of("P0")``. Tags sort by
    category (priority, type, status, other) and then alphabetically.
    """

    name: str = Field(..., description="Tag with exactly one leading marker, original casing")
    normalized: str = Field(..., description="Lowercase, no marker, no separators")
    category: TagCategory = Field(default=TagCategory.OTHER)

    model_config = {"frozen": True}

    @classmethod
    def of(cls, raw: Optional[str], vocabulary: Optional[TagVocabulary] = None) -> "Tag":
        """Create a tag from a raw token, adding the marker when missing.

        Raises:
            InvalidTagError: If the token is None, blank, contains whitespace
                or has nothing left once markers and separators are removed
        """
        if raw is None or not isinstance(raw, str):
            raise InvalidTagError(raw, "tag must be a string")

        stripped = raw.strip()
        if not stripped:
            raise InvalidTagError(raw, "tag cannot be empty")
        if any(ch.isspace() for ch in stripped):
            raise InvalidTagError(raw, "tag cannot contain whitespace")

        body = stripped.lstrip(TAG_MARKER)
        normalized = normalize_tag_name(body)
        if not normalized:
            raise InvalidTagError(raw, "tag has no name after the marker")

        vocabulary = vocabulary or DEFAULT_VOCABULARY
        return cls(
            name=TAG_MARKER + body,
            normalized=normalized,
            category=vocabulary.categorize(normalized),
        )

    def is_priority(self) -> bool:
        return self.category is TagCategory.PRIORITY

    def is_type(self) -> bool:
        return self.category is TagCategory.TYPE

    def is_status(self) -> bool:
        return self.category is TagCategory.STATUS

    def distance_to(self, other: "Tag") -> int:
        """Levenshtein distance between the normalized forms."""
        return edit_distance(self.normalized, other.normalized)

    def is_similar_to(
        self,
        other: "Tag",
        max_distance: int = TYPO_MAX_DISTANCE,
        min_length: int = TYPO_MIN_LENGTH,
    ) -> bool:
        """Check whether two different tags look like typos of each other.

        A tag is never similar to itself (distance 0). Both tags must be at
        least ``min_length`` characters long so that @P0/@P1 style tags are
        not flagged.
        """
        if len(self.normalized) < min_length or len(other.normalized) < min_length:
            return False
        return 0 < self.distance_to(other) <= max_distance

    @property
    def sort_key(self) -> tuple[int, str, str]:
        return (self.category.rank, self.normalized, self.name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tag):
            return NotImplemented
        return self.normalized == other.normalized

    def __hash__(self) -> int:
        return hash(self.normalized)

    def __lt__(self, other: "Tag") -> bool:
        if not isinstance(other, Tag):
            return NotImplemented
        return self.sort_key < other.sort_key

    def __str__(self) -> str:
        return self.name
