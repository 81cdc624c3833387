from agile_trainer.models.user import User
from agile_trainer.services.profile import (
    apply_completion,
    profile_snapshot,
    round_half_up,
    run_success_rate,
    updated_success_rate,
)


def test_running_rate_example():
    # (87 * 24 + 90) / 25 = 87.12
    assert updated_success_rate(87, 24, 90) == 87


def test_first_completion_takes_run_rate():
    assert updated_success_rate(0, 0, 72) == 72


def test_rounds_half_up():
    assert round_half_up(50.5) == 51
    assert round_half_up(2.5) == 3
    assert updated_success_rate(50, 1, 51) == 51


def test_run_rate_is_identity_on_percent_scale():
    assert run_success_rate(0) == 0
    assert run_success_rate(64) == 64
    assert run_success_rate(100) == 100


def test_apply_completion_updates_counters():
    user = User(completed_scenarios=24, success_rate=87, ai_insights=12, time_invested=1080, current_streak=7)

    apply_completion(user, score=90, time_spent=14)

    assert user.completed_scenarios == 25
    assert user.success_rate == 87
    assert user.ai_insights == 13
    assert user.time_invested == 1094
    assert user.current_streak == 7


def test_apply_completion_on_fresh_user():
    user = User()
    apply_completion(user, score=40)

    assert user.completed_scenarios == 1
    assert user.success_rate == 40
    assert user.ai_insights == 1
    assert user.time_invested == 0


def test_profile_snapshot():
    user = User(completed_scenarios=3, success_rate=66)
    assert profile_snapshot(user) == {"completedScenarios": 3, "successRate": 66}
