"""Pydantic schemas for progress records and decision submissions."""
from datetime import datetime

from agile_trainer.schemas.base import CamelSchema


class DecisionSubmitSchema(CamelSchema):
    step_id: int
    decision_id: int
    # Required for client compatibility; the recorded value comes from the authored option
    points: int


class DecisionRecordSchema(CamelSchema):
    step_id: int
    decision_id: int
    points: int
    timestamp: datetime


class ProgressOutSchema(CamelSchema):
    id: int
    user_id: int
    scenario_id: int
    current_step: int
    total_steps: int
    decisions: list[DecisionRecordSchema]
    completed: bool
    score: int
    time_spent: int = 0
    started_at: datetime
    completed_at: datetime | None = None
