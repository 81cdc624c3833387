from agile_trainer.schemas.insight import GeneratedInsightSchema, InsightOutSchema
from agile_trainer.schemas.progress import DecisionRecordSchema, DecisionSubmitSchema, ProgressOutSchema
from agile_trainer.schemas.scenario import (
    DecisionOptionSchema,
    GeneratedScenarioSchema,
    NextStepRequestSchema,
    ScenarioContentSchema,
    ScenarioGenerateSchema,
    ScenarioOutSchema,
    ScenarioSummarySchema,
    StepSchema,
)
from agile_trainer.schemas.user import LearningPathOutSchema, UserOutSchema

__all__ = [
    "DecisionOptionSchema",
    "DecisionRecordSchema",
    "DecisionSubmitSchema",
    "GeneratedInsightSchema",
    "GeneratedScenarioSchema",
    "InsightOutSchema",
    "LearningPathOutSchema",
    "NextStepRequestSchema",
    "ProgressOutSchema",
    "ScenarioContentSchema",
    "ScenarioGenerateSchema",
    "ScenarioOutSchema",
    "ScenarioSummarySchema",
    "StepSchema",
    "UserOutSchema",
]
