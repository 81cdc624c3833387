"""User profile aggregation on scenario completion."""
import math

from agile_trainer.models.user import User

MAX_SCORE = 100


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def run_success_rate(score: int) -> int:
    """Success rate of a single run; scores are already on a 0-100 scale."""
    return round_half_up(score / MAX_SCORE * 100)


def updated_success_rate(prior_rate: int, prior_count: int, score: int) -> int:
    """Running mean weighted by the number of previously completed scenarios."""
    new_count = prior_count + 1
    return round_half_up((prior_rate * prior_count + run_success_rate(score)) / new_count)


def apply_completion(user: User, score: int, time_spent: int = 0) -> User:
    """Fold one completed run into the user's counters. Caller commits."""
    prior_count = user.completed_scenarios or 0
    prior_rate = user.success_rate or 0

    user.success_rate = updated_success_rate(prior_rate, prior_count, score or 0)
    user.completed_scenarios = prior_count + 1
    user.ai_insights = (user.ai_insights or 0) + 1
    user.time_invested = (user.time_invested or 0) + max(0, time_spent)
    return user


def profile_snapshot(user: User) -> dict:
    """Subset of the profile handed to the insight generator."""
    return {
        "completedScenarios": user.completed_scenarios or 0,
        "successRate": user.success_rate or 0,
    }
