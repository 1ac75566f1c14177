"""Feature file models as delivered by the parser."""

from typing import Optional

from pydantic import BaseModel, Field

from ftoc_analyzer.core.models.enums import ScenarioKind, StepRole


class Step(BaseModel):
    """A single step line such as ``Given I am logged in``."""

    keyword: str = Field(..., description="Given, When, Then, And, But or *")
    text: str = Field(..., description="Step text without the keyword")

    model_config = {"frozen": True}

    @property
    def role(self) -> Optional[StepRole]:
        """Primary role of the keyword; None for And/But/* continuations."""
        keyword = self.keyword.strip().capitalize()
        for role in StepRole:
            if role.value == keyword:
                return role
        return None

    @property
    def full_text(self) -> str:
        return f"{self.keyword.strip()} {self.text}".strip()


class Example(BaseModel):
    """An Examples table of a Scenario Outline."""

    name: str = Field(default="")
    headers: list[str] = Field(default_factory=list)
    rows: list[list[str]] = Field(default_factory=list)

    model_config = {"frozen": True}


class Scenario(BaseModel):
    """A scenario, scenario outline or background block."""

    name: str = Field(default="")
    kind: ScenarioKind = Field(default=ScenarioKind.SCENARIO)
    tags: list[str] = Field(default_factory=list, description="Raw tag tokens")
    steps: list[Step] = Field(default_factory=list)
    examples: list[Example] = Field(default_factory=list)
    line_number: int = Field(default=0)

    model_config = {"frozen": True}

    @property
    def is_background(self) -> bool:
        return self.kind is ScenarioKind.BACKGROUND

    @property
    def is_outline(self) -> bool:
        return self.kind is ScenarioKind.OUTLINE

    @property
    def example_row_count(self) -> int:
        return sum(len(example.rows) for example in self.examples)


class Feature(BaseModel):
    """A parsed feature file."""

    name: str = Field(default="")
    filename: str = Field(..., description="File name used in warning locations")
    description: str = Field(default="")
    tags: list[str] = Field(default_factory=list, description="Raw tag tokens")
    scenarios: list[Scenario] = Field(default_factory=list)

    model_config = {"frozen": True}

    @property
    def testable_scenarios(self) -> list[Scenario]:
        """Scenarios that rules apply to (backgrounds excluded)."""
        return [s for s in self.scenarios if not s.is_background]

    def location_of(self, scenario: Optional[Scenario] = None) -> str:
        """Location string used in warnings: ``file`` or ``file - scenario``."""
        if scenario is None:
            return self.filename
        return f"{self.filename} - {scenario.name}"
