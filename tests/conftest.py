import asyncio
import os
import tempfile

# Configure before the app modules build their engine and settings
os.environ.setdefault("DATABASE_URL", f"sqlite+aiosqlite:///{tempfile.mkdtemp()}/bootstrap.db")
os.environ["SEED_ON_STARTUP"] = "false"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

from agile_trainer.core.errors import GenerationError  # noqa: E402
from agile_trainer.db.base import Base  # noqa: E402
from agile_trainer.db.session import get_db, get_session_factory  # noqa: E402
from agile_trainer.main import app  # noqa: E402
from agile_trainer.models.scenario import Scenario  # noqa: E402
from agile_trainer.schemas.insight import GeneratedInsightSchema  # noqa: E402
from agile_trainer.schemas.scenario import GeneratedScenarioSchema, StepSchema  # noqa: E402
from agile_trainer.services.generation import get_generator  # noqa: E402
from agile_trainer.services.seeding import seed_database  # noqa: E402

DEMO_USER_ID = 1


def _step(step_id, options):
    return {
        "id": step_id,
        "title": f"Step {step_id}",
        "situation": f"Situation for step {step_id}",
        "characters": [],
        "decisions": [
            {"id": option_id, "text": f"Option {option_id}", "description": "", "points": points, "feedback": "ok"}
            for option_id, points in options
        ],
    }


# Best path (decision 1 every step) scores 25 + 25 + 20 + 20 = 90
MULTI_STEP_CONTENT = {
    "steps": [
        _step(1, [(1, 25), (2, 10)]),
        _step(2, [(1, 25), (2, 15)]),
        _step(3, [(1, 20), (2, 5)]),
        _step(4, [(1, 20), (2, 25)]),
    ]
}


async def add_multi_step_scenario(db) -> Scenario:
    scenario = Scenario(
        title="Release Train Derailment",
        description="Four escalating steps.",
        framework="safe",
        difficulty="advanced",
        duration=20,
        content=MULTI_STEP_CONTENT,
        learning_objectives=["Escalation"],
    )
    db.add(scenario)
    await db.commit()
    await db.refresh(scenario)
    return scenario


class FakeGenerator:
    """Stands in for TextGenerator; no network."""

    def __init__(self):
        self.feedback = []
        self.error = None
        self.feedback_calls = []

    def _maybe_fail(self):
        if self.error is not None:
            raise self.error

    async def generate_feedback(self, scenario_id, decisions, profile):
        self.feedback_calls.append((scenario_id, list(decisions), dict(profile)))
        self._maybe_fail()
        return list(self.feedback)

    async def generate_scenario(self, framework, difficulty, topic=None):
        self._maybe_fail()
        return GeneratedScenarioSchema.model_validate(
            {
                "title": f"Generated {framework} scenario",
                "description": topic or "Generated",
                "duration": 12,
                "learningObjectives": ["Facilitation"],
                "content": {"steps": [_step(1, [(1, 25), (2, 10)])]},
            }
        )

    async def generate_next_step(self, step, decision_id, points, context):
        self._maybe_fail()
        return StepSchema.model_validate(_step(step.id + 1, [(1, 20), (2, 12)]))


def make_insight(kind="strength", title="Clear facilitation"):
    return GeneratedInsightSchema(type=kind, title=title, description="Keep it up.")


@pytest.fixture
def fake_generator():
    return FakeGenerator()


@pytest.fixture
def failing_generator(fake_generator):
    fake_generator.error = GenerationError("model unavailable")
    return fake_generator


@pytest.fixture
async def session_factory(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'service.db'}", poolclass=NullPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        await seed_database(session)
        yield session


@pytest.fixture
async def multi_step(db):
    return await add_multi_step_scenario(db)


@pytest.fixture
def api_factory(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'api.db'}", poolclass=NullPool)
    factory = async_sessionmaker(engine, expire_on_commit=False)

    async def prepare():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        async with factory() as session:
            await seed_database(session)
            await add_multi_step_scenario(session)

    asyncio.run(prepare())
    yield factory
    asyncio.run(engine.dispose())


@pytest.fixture
def client(api_factory, fake_generator):
    async def override_db():
        async with api_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[get_session_factory] = lambda: api_factory
    app.dependency_overrides[get_generator] = lambda: fake_generator
    # no context manager: the lifespan (global engine, seeding) stays out of tests
    yield TestClient(app)
    app.dependency_overrides.clear()
