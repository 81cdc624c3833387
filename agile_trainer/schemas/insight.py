"""Pydantic schemas for AI insights."""
from datetime import datetime
from typing import Literal

from agile_trainer.schemas.base import CamelSchema

InsightType = Literal["insight", "strength", "improvement", "recommendation"]


class GeneratedInsightSchema(CamelSchema):
    type: InsightType
    title: str
    description: str
    priority: Literal["low", "medium", "high"] = "medium"


class InsightOutSchema(CamelSchema):
    id: int
    user_id: int
    scenario_id: int | None = None
    type: str
    title: str
    description: str
    created_at: datetime
