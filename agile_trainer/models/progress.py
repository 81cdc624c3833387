"""UserProgress model: one per user x scenario. Cursor, decision trace and score."""
from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from agile_trainer.db.session import Base, utcnow


class UserProgress(Base):
    __tablename__ = "user_progress"
    __table_args__ = (UniqueConstraint("user_id", "scenario_id", name="uq_user_progress_user_scenario"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    scenario_id = Column(Integer, ForeignKey("scenarios.id"), nullable=False, index=True)

    current_step = Column(Integer, nullable=False, default=0)  # 0-based, +1 per decision
    total_steps = Column(Integer, nullable=False)  # snapshot of len(steps) at start
    # decisions: JSON array of {stepId, decisionId, points, timestamp}; append-only
    decisions = Column(JSON, nullable=False, default=list)
    completed = Column(Boolean, nullable=False, default=False)
    score = Column(Integer, nullable=False, default=0)
    time_spent = Column(Integer, nullable=False, default=0)  # minutes

    started_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    user = relationship("User", back_populates="progress")
    scenario = relationship("Scenario")
