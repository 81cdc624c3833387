"""Pydantic schemas for scenarios, steps and decision options."""
from pydantic import Field

from agile_trainer.schemas.base import CamelSchema

MAX_OPTION_POINTS = 25


class CharacterSchema(CamelSchema):
    name: str
    role: str
    personality: str = ""
    avatar: str = ""


class DecisionOptionSchema(CamelSchema):
    id: int
    text: str
    description: str = ""
    points: int = Field(ge=0, le=MAX_OPTION_POINTS)
    feedback: str = ""


class StepSchema(CamelSchema):
    id: int
    title: str = ""
    situation: str
    characters: list[CharacterSchema] = Field(default_factory=list)
    decisions: list[DecisionOptionSchema] = Field(min_length=1)

    def option(self, decision_id: int) -> DecisionOptionSchema | None:
        for option in self.decisions:
            if option.id == decision_id:
                return option
        return None


class ScenarioContentSchema(CamelSchema):
    steps: list[StepSchema] = Field(min_length=1)


class ScenarioSummarySchema(CamelSchema):
    id: int
    title: str
    description: str
    framework: str
    difficulty: str
    duration: int
    rating: int = 0
    image_url: str | None = None
    learning_objectives: list[str] | None = None


class ScenarioOutSchema(ScenarioSummarySchema):
    content: ScenarioContentSchema


class ScenarioGenerateSchema(CamelSchema):
    framework: str = Field(min_length=1)
    difficulty: str = Field(min_length=1)
    topic: str | None = None


class GeneratedScenarioSchema(CamelSchema):
    """Shape the text generator must return for a new scenario."""

    title: str
    description: str
    duration: int = Field(default=15, ge=1)
    learning_objectives: list[str] = Field(default_factory=list)
    content: ScenarioContentSchema


class NextStepRequestSchema(CamelSchema):
    step_id: int
    decision_id: int
