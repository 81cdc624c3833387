from agile_trainer.services.profile import apply_completion, updated_success_rate
from agile_trainer.services.seeding import seed_database

__all__ = ["apply_completion", "updated_success_rate", "seed_database"]
