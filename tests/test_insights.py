from fastapi import BackgroundTasks
from sqlalchemy.exc import OperationalError

from agile_trainer.core.errors import GenerationError
from agile_trainer.services import content
from agile_trainer.services.insights import generate_insights, schedule_insights

from conftest import DEMO_USER_ID, make_insight

DECISIONS = [{"stepId": 1, "decisionId": 2, "points": 15}]
PROFILE = {"completedScenarios": 24, "successRate": 87}


async def test_stores_generated_insights(session_factory, db, fake_generator):
    fake_generator.feedback = [make_insight("strength"), make_insight("improvement", "Ask more questions")]

    stored = await generate_insights(session_factory, fake_generator, DEMO_USER_ID, 1, DECISIONS, PROFILE)

    assert stored == 2
    insights = await content.list_insights(db, DEMO_USER_ID)
    assert sorted(i.type for i in insights) == ["improvement", "strength"]
    assert all(i.scenario_id == 1 for i in insights)
    assert fake_generator.feedback_calls == [(1, DECISIONS, PROFILE)]


async def test_generation_failure_is_swallowed(session_factory, db, fake_generator, caplog):
    fake_generator.error = GenerationError("timed out")

    stored = await generate_insights(session_factory, fake_generator, DEMO_USER_ID, 1, DECISIONS, PROFILE)

    assert stored == 0
    assert await content.list_insights(db, DEMO_USER_ID) == []
    assert "Insight generation failed" in caplog.text


async def test_empty_feedback_stores_nothing(session_factory, db, fake_generator):
    stored = await generate_insights(session_factory, fake_generator, DEMO_USER_ID, 1, DECISIONS, PROFILE)

    assert stored == 0
    assert await content.list_insights(db, DEMO_USER_ID) == []


def test_schedule_queues_a_background_task(fake_generator):
    tasks = BackgroundTasks()
    decisions = list(DECISIONS)

    schedule_insights(tasks, None, fake_generator, DEMO_USER_ID, 1, decisions, PROFILE)
    decisions.append({"stepId": 2, "decisionId": 1, "points": 25})

    assert len(tasks.tasks) == 1
    task = tasks.tasks[0]
    assert task.func is generate_insights
    # the queued trace is a snapshot taken at scheduling time
    assert task.args[4] == DECISIONS


async def test_unexpected_generator_error_is_logged_and_swallowed(session_factory, db, fake_generator, caplog):
    fake_generator.error = KeyError("choices")

    stored = await generate_insights(session_factory, fake_generator, DEMO_USER_ID, 1, DECISIONS, PROFILE)

    assert stored == 0
    assert await content.list_insights(db, DEMO_USER_ID) == []
    assert "Could not produce insights" in caplog.text


async def test_storage_failure_is_swallowed(db, fake_generator, caplog):
    fake_generator.feedback = [make_insight("strength")]

    def broken_factory():
        raise OperationalError("INSERT", {}, Exception("database is locked"))

    stored = await generate_insights(broken_factory, fake_generator, DEMO_USER_ID, 1, DECISIONS, PROFILE)

    assert stored == 0
    assert await content.list_insights(db, DEMO_USER_ID) == []
    assert "Could not produce insights" in caplog.text
