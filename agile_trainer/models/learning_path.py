"""LearningPath model: ordered curriculum track grouping scenario ids."""
from sqlalchemy import JSON, Column, Integer, String, Text

from agile_trainer.db.session import Base


class LearningPath(Base):
    __tablename__ = "learning_paths"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    framework = Column(String(32), nullable=False)
    scenarios = Column(JSON, nullable=False, default=list)  # scenario ids
    order = Column(Integer, nullable=False)
