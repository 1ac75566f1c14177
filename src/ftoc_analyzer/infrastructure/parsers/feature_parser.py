"""Parser for Gherkin .feature files.

A line-oriented reader covering what the analyzers need: feature and
scenario names, tags, steps and Examples tables. Doc strings, data tables
of steps, comments and free-text descriptions of scenarios are skipped.
"""

import logging
from pathlib import Path
from typing import Optional

from ftoc_analyzer.core.models.enums import ScenarioKind
from ftoc_analyzer.core.models.feature import Example, Feature, Scenario, Step
from ftoc_analyzer.shared.exceptions import ParseError, UnsupportedFileError

logger = logging.getLogger(__name__)

FEATURE_SUFFIX = ".feature"

_FEATURE_KEYWORDS = ("Feature:",)
_BACKGROUND_KEYWORDS = ("Background:",)
_OUTLINE_KEYWORDS = ("Scenario Outline:", "Scenario Template:")
_SCENARIO_KEYWORDS = ("Scenario:", "Example:")
_EXAMPLES_KEYWORDS = ("Examples:", "Scenarios:")
_RULE_KEYWORDS = ("Rule:",)
_STEP_KEYWORDS = ("Given", "When", "Then", "And", "But", "*")
_DOC_STRING_DELIMITERS = ('"""', "```")


def _after_keyword(line: str, keywords: tuple[str, ...]) -> Optional[str]:
    for keyword in keywords:
        if line.startswith(keyword):
            return line[len(keyword):].strip()
    return None


def _split_step(line: str) -> Optional[tuple[str, str]]:
    for keyword in _STEP_KEYWORDS:
        if line == keyword:
            return keyword, ""
        if line.startswith(keyword + " "):
            return keyword, line[len(keyword):].strip()
    return None


def _table_cells(line: str) -> list[str]:
    return [cell.strip() for cell in line.strip().strip("|").split("|")]


def _tag_tokens(line: str) -> list[str]:
    # Trailing comments are allowed after tags: "@smoke @ui # owner: web"
    comment = line.find(" #")
    if comment >= 0:
        line = line[:comment]
    return line.split()


class _ScenarioBuilder:
    def __init__(self, name: str, kind: ScenarioKind, tags: list[str], line_number: int):
        self.name = name
        self.kind = kind
        self.tags = tags
        self.line_number = line_number
        self.steps: list[Step] = []
        self.examples: list[dict] = []

    def build(self) -> Scenario:
        return Scenario(
            name=self.name,
            kind=self.kind,
            tags=self.tags,
            steps=self.steps,
            examples=[Example(**example) for example in self.examples],
            line_number=self.line_number,
        )


class FeatureParser:
    """Parses the text of one feature file."""

    def __init__(self, text: str, filename: str):
        self.text = text
        self.filename = filename
        self.feature_name: Optional[str] = None
        self.feature_tags: list[str] = []
        self.description: list[str] = []
        self.scenarios: list[_ScenarioBuilder] = []
        self._pending_tags: list[str] = []
        self._current: Optional[_ScenarioBuilder] = None
        self._in_examples = False
        self._in_doc_string: Optional[str] = None

    def parse(self) -> Feature:
        """Parse the text into a Feature.

        Raises:
            ParseError: If the text has no ``Feature:`` line
        """
        for number, raw_line in enumerate(self.text.splitlines(), start=1):
            self._parse_line(raw_line.strip(), number)

        if self.feature_name is None:
            raise ParseError(f"{self.filename}: no 'Feature:' line found")

        feature = Feature(
            name=self.feature_name,
            filename=self.filename,
            description="\n".join(self.description),
            tags=self.feature_tags,
            scenarios=[builder.build() for builder in self.scenarios],
        )
        logger.debug("Parsed %s: %d scenarios", self.filename, len(feature.scenarios))
        return feature

    def _parse_line(self, line: str, number: int) -> None:
        if self._in_doc_string is not None:
            if line.startswith(self._in_doc_string):
                self._in_doc_string = None
            return
        for delimiter in _DOC_STRING_DELIMITERS:
            if line.startswith(delimiter):
                self._in_doc_string = delimiter
                return

        if not line or line.startswith("#"):
            return

        if line.startswith("@"):
            self._pending_tags.extend(_tag_tokens(line))
            return

        name = _after_keyword(line, _FEATURE_KEYWORDS)
        if name is not None:
            if self.feature_name is not None:
                raise ParseError(f"{self.filename}:{number}: second 'Feature:' in one file")
            self.feature_name = name
            self.feature_tags = self._take_tags()
            return

        if _after_keyword(line, _RULE_KEYWORDS) is not None:
            # Rules only group scenarios; their tags are not tracked
            self._take_tags()
            self._current = None
            return

        for keywords, kind in (
            (_BACKGROUND_KEYWORDS, ScenarioKind.BACKGROUND),
            (_OUTLINE_KEYWORDS, ScenarioKind.OUTLINE),
            (_SCENARIO_KEYWORDS, ScenarioKind.SCENARIO),
        ):
            name = _after_keyword(line, keywords)
            if name is not None:
                self._start_scenario(name, kind, number)
                return

        name = _after_keyword(line, _EXAMPLES_KEYWORDS)
        if name is not None:
            self._take_tags()
            if self._current is None:
                raise ParseError(f"{self.filename}:{number}: 'Examples:' outside a scenario")
            self._current.examples.append({"name": name, "headers": [], "rows": []})
            self._in_examples = True
            return

        if line.startswith("|"):
            if self._in_examples and self._current is not None:
                table = self._current.examples[-1]
                if not table["headers"]:
                    table["headers"] = _table_cells(line)
                else:
                    table["rows"].append(_table_cells(line))
            return

        step = _split_step(line)
        if step is not None and self._current is not None:
            self._in_examples = False
            self._current.steps.append(Step(keyword=step[0], text=step[1]))
            return

        if self._current is None and self.feature_name is not None:
            self.description.append(line)

    def _start_scenario(self, name: str, kind: ScenarioKind, number: int) -> None:
        if self.feature_name is None:
            raise ParseError(f"{self.filename}:{number}: scenario before 'Feature:'")
        self._current = _ScenarioBuilder(name, kind, self._take_tags(), number)
        self.scenarios.append(self._current)
        self._in_examples = False

    def _take_tags(self) -> list[str]:
        tags, self._pending_tags = self._pending_tags, []
        return tags


def parse_feature_text(text: str, filename: str = "<text>") -> Feature:
    """Parse feature file content.

    Raises:
        ParseError: If the content is not a feature
    """
    return FeatureParser(text, filename).parse()


def parse_feature_file(file_path: Path) -> Feature:
    """Parse a .feature file; the file name becomes the warning location.

    Raises:
        UnsupportedFileError: If the file is not a .feature file
        ParseError: If the file cannot be read or parsed
    """
    file_path = Path(file_path)
    if file_path.suffix.lower() != FEATURE_SUFFIX:
        raise UnsupportedFileError(
            f"Unsupported file: {file_path.name}. Expected a {FEATURE_SUFFIX} file."
        )
    try:
        text = file_path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise ParseError(f"Could not read {file_path}: {e}") from e
    return parse_feature_text(text, file_path.name)


def find_feature_files(root: Path) -> list[Path]:
    """Feature files under a directory (recursively), in sorted order.

    A path to a single feature file is returned as is.

    Raises:
        ParseError: If the path does not exist
        UnsupportedFileError: If the path is a file that is not a feature
    """
    root = Path(root)
    if not root.exists():
        raise ParseError(f"Path not found: {root}")
    if root.is_file():
        if root.suffix.lower() != FEATURE_SUFFIX:
            raise UnsupportedFileError(
                f"Unsupported file: {root.name}. Expected a {FEATURE_SUFFIX} file."
            )
        return [root]
    return sorted(p for p in root.rglob(f"*{FEATURE_SUFFIX}") if p.is_file())


def parse_features(root: Path) -> list[Feature]:
    """Parse every feature file under a path."""
    return [parse_feature_file(path) for path in find_feature_files(root)]
