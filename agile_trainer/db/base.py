"""SQLAlchemy declarative base and model imports for Alembic."""
from agile_trainer.db.session import Base

# Import all models so Alembic can see them
from agile_trainer.models.insight import AiInsight  # noqa: F401
from agile_trainer.models.learning_path import LearningPath  # noqa: F401
from agile_trainer.models.progress import UserProgress  # noqa: F401
from agile_trainer.models.scenario import Scenario  # noqa: F401
from agile_trainer.models.user import User  # noqa: F401

__all__ = ["Base", "User", "Scenario", "UserProgress", "AiInsight", "LearningPath"]
