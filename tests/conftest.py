"""Pytest configuration and fixtures."""

from pathlib import Path
from typing import Callable, Optional

import pytest

from ftoc_analyzer.core.models.enums import ScenarioKind
from ftoc_analyzer.core.models.feature import Example, Feature, Scenario, Step


def steps(*lines: str) -> list[Step]:
    """Build steps from "Keyword text" lines."""
    result = []
    for line in lines:
        keyword, _, text = line.partition(" ")
        result.append(Step(keyword=keyword, text=text))
    return result


GOOD_STEPS = (
    "Given a registered customer",
    "When the customer signs in",
    "Then the dashboard is shown",
)


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def tagged_feature_path(fixtures_dir: Path) -> Path:
    """Return path to the four-scenario tagged feature file."""
    return fixtures_dir / "tagged.feature"


@pytest.fixture
def make_scenario() -> Callable[..., Scenario]:
    """Factory for scenarios with well-formed Given/When/Then steps by default."""

    def _make(
        name: str = "Customer signs in",
        tags: tuple[str, ...] = ("@P1", "@UI"),
        step_lines: Optional[tuple[str, ...]] = None,
        kind: ScenarioKind = ScenarioKind.SCENARIO,
        examples: Optional[list[Example]] = None,
    ) -> Scenario:
        return Scenario(
            name=name,
            kind=kind,
            tags=list(tags),
            steps=steps(*(GOOD_STEPS if step_lines is None else step_lines)),
            examples=examples or [],
        )

    return _make


@pytest.fixture
def make_feature(make_scenario) -> Callable[..., Feature]:
    """Factory for features; one default scenario unless scenarios are given."""

    def _make(
        filename: str = "login.feature",
        scenarios: Optional[list[Scenario]] = None,
        tags: tuple[str, ...] = (),
        name: str = "Login",
    ) -> Feature:
        return Feature(
            name=name,
            filename=filename,
            tags=list(tags),
            scenarios=[make_scenario()] if scenarios is None else scenarios,
        )

    return _make
