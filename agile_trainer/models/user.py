"""User model. Single demo user by default; profile counters updated on completion."""
from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from agile_trainer.db.session import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(64), unique=True, nullable=False, index=True)
    first_name = Column(String(64), nullable=False)
    last_name = Column(String(64), nullable=False)
    email = Column(String(255), unique=True, nullable=False)

    current_streak = Column(Integer, nullable=False, default=0)
    completed_scenarios = Column(Integer, nullable=False, default=0)
    success_rate = Column(Integer, nullable=False, default=0)  # percent
    ai_insights = Column(Integer, nullable=False, default=0)  # +1 per completion
    time_invested = Column(Integer, nullable=False, default=0)  # minutes

    progress = relationship("UserProgress", back_populates="user", uselist=True)
