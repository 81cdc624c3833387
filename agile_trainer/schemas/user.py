"""Pydantic schemas for the user profile and learning paths."""
from agile_trainer.schemas.base import CamelSchema


class UserOutSchema(CamelSchema):
    id: int
    username: str
    first_name: str
    last_name: str
    email: str
    current_streak: int
    completed_scenarios: int
    success_rate: int
    ai_insights: int
    time_invested: int


class LearningPathOutSchema(CamelSchema):
    id: int
    name: str
    description: str
    framework: str
    scenarios: list[int]
    order: int
