"""Scenario model: one authored or generated training scenario; steps live in content (JSON)."""
from sqlalchemy import JSON, Column, Integer, String, Text

from agile_trainer.db.session import Base


class Scenario(Base):
    __tablename__ = "scenarios"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    framework = Column(String(32), nullable=False, index=True)  # scrum | kanban | safe | dsdm | fdd | lean | xp
    difficulty = Column(String(32), nullable=False)  # beginner | intermediate | advanced | expert
    duration = Column(Integer, nullable=False)  # minutes
    rating = Column(Integer, nullable=False, default=0)  # stars * 10 (48 = 4.8)
    image_url = Column(String(512), nullable=True)
    # content: {"steps": [{id, title, situation, characters[], decisions[]}]}
    content = Column(JSON, nullable=False)
    learning_objectives = Column(JSON, nullable=True)

    @property
    def steps(self) -> list[dict]:
        return list((self.content or {}).get("steps") or [])
