"""AiInsight model: coaching message generated from a decision trace. Append-only."""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from agile_trainer.db.session import Base, utcnow

INSIGHT_TYPES = ("insight", "strength", "improvement", "recommendation")


class AiInsight(Base):
    __tablename__ = "ai_insights"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    scenario_id = Column(Integer, ForeignKey("scenarios.id"), nullable=True)
    type = Column(String(32), nullable=False)  # one of INSIGHT_TYPES
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
