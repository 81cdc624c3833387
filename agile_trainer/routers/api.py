"""API routes: JSON for scenarios, progress, insights and learning paths."""
from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from agile_trainer.core.config import get_settings
from agile_trainer.core.errors import InputValidationError
from agile_trainer.db.session import get_db, get_session_factory
from agile_trainer.models.user import User
from agile_trainer.schemas.insight import InsightOutSchema
from agile_trainer.schemas.progress import DecisionSubmitSchema, ProgressOutSchema
from agile_trainer.schemas.scenario import (
    NextStepRequestSchema,
    ScenarioGenerateSchema,
    ScenarioOutSchema,
    ScenarioSummarySchema,
    StepSchema,
)
from agile_trainer.schemas.user import LearningPathOutSchema, UserOutSchema
from agile_trainer.services import content
from agile_trainer.services import progress as tracker
from agile_trainer.services.generation import TextGenerator, get_generator
from agile_trainer.services.insights import schedule_insights
from agile_trainer.services.profile import profile_snapshot

router = APIRouter(prefix="/api", tags=["api"])
settings = get_settings()


async def get_current_user(
    db: Annotated[AsyncSession, Depends(get_db)],
    x_user_id: Annotated[int | None, Header()] = None,
) -> User:
    """Caller identity: X-User-Id header, else the configured demo user."""
    user_id = x_user_id if x_user_id is not None else settings.demo_user_id
    return await content.get_user(db, user_id)


@router.get("/user/current", response_model=UserOutSchema)
async def get_user(current_user: Annotated[User, Depends(get_current_user)]):
    return current_user


@router.get("/scenarios", response_model=list[ScenarioSummarySchema])
async def list_scenarios(
    db: Annotated[AsyncSession, Depends(get_db)],
    framework: str | None = None,
):
    """List scenarios; `framework=all` or no filter returns everything."""
    if framework == "all":
        framework = None
    return await content.list_scenarios(db, framework)


@router.get("/scenarios/{scenario_id}", response_model=ScenarioOutSchema)
async def get_scenario(
    scenario_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Get one scenario by ID, including its steps."""
    return await content.get_scenario(db, scenario_id)


@router.post("/scenarios/generate", response_model=ScenarioOutSchema)
async def generate_scenario(
    body: ScenarioGenerateSchema,
    db: Annotated[AsyncSession, Depends(get_db)],
    generator: Annotated[TextGenerator, Depends(get_generator)],
):
    """Generate a new scenario with the text generator and store it."""
    generated = await generator.generate_scenario(body.framework, body.difficulty, body.topic)
    return await content.create_scenario(
        db,
        title=generated.title,
        description=generated.description,
        framework=body.framework.strip().lower(),
        difficulty=body.difficulty.strip().lower(),
        duration=generated.duration,
        rating=0,
        image_url=settings.scenario_image_url,
        learning_objectives=generated.learning_objectives,
        content=generated.content.model_dump(),
    )


@router.post("/scenarios/{scenario_id}/next-step", response_model=StepSchema)
async def generate_next_step(
    scenario_id: int,
    body: NextStepRequestSchema,
    db: Annotated[AsyncSession, Depends(get_db)],
    generator: Annotated[TextGenerator, Depends(get_generator)],
):
    """Generate a continuation of a step after the given decision. Not persisted."""
    scenario = await content.get_scenario(db, scenario_id)
    step = next(
        (StepSchema.model_validate(s) for s in scenario.steps if s.get("id") == body.step_id),
        None,
    )
    if step is None:
        raise InputValidationError(f"Scenario has no step {body.step_id}")
    option = step.option(body.decision_id)
    if option is None:
        raise InputValidationError(f"Decision {body.decision_id} is not an option of step {body.step_id}")

    context = {"title": scenario.title, "framework": scenario.framework, "difficulty": scenario.difficulty}
    return await generator.generate_next_step(step, option.id, option.points, context)


@router.get("/user/progress", response_model=list[ProgressOutSchema])
async def list_user_progress(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
):
    return await tracker.list_progress(db, current_user.id)


@router.get("/user/progress/{scenario_id}", response_model=ProgressOutSchema | None)
async def get_user_progress(
    scenario_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Progress for one scenario, or null if it was never started."""
    return await tracker.get_progress(db, current_user.id, scenario_id)


@router.post("/scenarios/{scenario_id}/start", response_model=ProgressOutSchema)
async def start_scenario(
    scenario_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Start or continue a scenario (idempotent)."""
    return await tracker.start_scenario(db, current_user.id, scenario_id)


@router.post("/scenarios/{scenario_id}/decision", response_model=ProgressOutSchema)
async def submit_decision(
    scenario_id: int,
    body: DecisionSubmitSchema,
    background_tasks: BackgroundTasks,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    generator: Annotated[TextGenerator, Depends(get_generator)],
    session_factory: Annotated[async_sessionmaker, Depends(get_session_factory)],
):
    """Record a decision; coaching insights are generated after the response."""
    progress = await tracker.submit_decision(
        db, current_user.id, scenario_id, body.step_id, body.decision_id, body.points
    )
    schedule_insights(
        background_tasks,
        session_factory,
        generator,
        current_user.id,
        scenario_id,
        progress.decisions,
        profile_snapshot(current_user),
    )
    return progress


@router.post("/scenarios/{scenario_id}/complete", response_model=ProgressOutSchema)
async def complete_scenario(
    scenario_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Finalize the scenario and update the user's profile counters."""
    return await tracker.complete_scenario(db, current_user.id, scenario_id)


@router.get("/user/insights", response_model=list[InsightOutSchema])
async def list_insights(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
):
    return await content.list_insights(db, current_user.id)


@router.get("/learning-paths", response_model=list[LearningPathOutSchema])
async def list_learning_paths(db: Annotated[AsyncSession, Depends(get_db)]):
    return await content.list_learning_paths(db)
