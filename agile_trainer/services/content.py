"""Data access for scenarios, users, insights and learning paths. No business rules here."""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agile_trainer.core.errors import NotFoundError
from agile_trainer.models.insight import AiInsight
from agile_trainer.models.learning_path import LearningPath
from agile_trainer.models.scenario import Scenario
from agile_trainer.models.user import User


async def get_user(db: AsyncSession, user_id: int, for_update: bool = False) -> User:
    """Load a user. With `for_update`, re-read the row and lock it for the transaction."""
    query = select(User).where(User.id == user_id)
    if for_update:
        query = query.with_for_update().execution_options(populate_existing=True)
    result = await db.execute(query)
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFoundError("User not found")
    return user


async def get_scenario(db: AsyncSession, scenario_id: int) -> Scenario:
    result = await db.execute(select(Scenario).where(Scenario.id == scenario_id))
    scenario = result.scalar_one_or_none()
    if scenario is None:
        raise NotFoundError("Scenario not found")
    return scenario


async def list_scenarios(db: AsyncSession, framework: str | None = None) -> list[Scenario]:
    """All scenarios, or only those whose framework equals `framework` exactly."""
    query = select(Scenario).order_by(Scenario.id)
    if framework:
        query = query.where(Scenario.framework == framework)
    result = await db.execute(query)
    return list(result.scalars().all())


async def create_scenario(db: AsyncSession, **fields) -> Scenario:
    scenario = Scenario(**fields)
    db.add(scenario)
    await db.commit()
    await db.refresh(scenario)
    return scenario


async def list_insights(db: AsyncSession, user_id: int) -> list[AiInsight]:
    result = await db.execute(
        select(AiInsight)
        .where(AiInsight.user_id == user_id)
        .order_by(AiInsight.created_at.desc(), AiInsight.id.desc())
    )
    return list(result.scalars().all())


def add_insight(db: AsyncSession, user_id: int, scenario_id: int | None, type: str, title: str, description: str) -> AiInsight:
    """Stage an insight on the session; the caller commits."""
    insight = AiInsight(
        user_id=user_id,
        scenario_id=scenario_id,
        type=type,
        title=title,
        description=description,
    )
    db.add(insight)
    return insight


async def list_learning_paths(db: AsyncSession) -> list[LearningPath]:
    result = await db.execute(select(LearningPath).order_by(LearningPath.order.asc()))
    return list(result.scalars().all())
