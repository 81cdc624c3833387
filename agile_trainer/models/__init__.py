from agile_trainer.models.user import User
from agile_trainer.models.scenario import Scenario
from agile_trainer.models.progress import UserProgress
from agile_trainer.models.insight import AiInsight
from agile_trainer.models.learning_path import LearningPath

__all__ = ["User", "Scenario", "UserProgress", "AiInsight", "LearningPath"]
