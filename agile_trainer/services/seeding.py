"""Load the demo user, built-in scenarios and learning paths into an empty database."""
import json
import logging
from pathlib import Path

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from agile_trainer.models.learning_path import LearningPath
from agile_trainer.models.scenario import Scenario
from agile_trainer.models.user import User

logger = logging.getLogger(__name__)

CATALOG_PATH = Path(__file__).resolve().parent.parent / "data" / "catalog.json"


def load_catalog(path: Path = CATALOG_PATH) -> dict:
    with path.open(encoding="utf-8") as fh:
        return json.load(fh)


async def _is_empty(db: AsyncSession, model) -> bool:
    result = await db.execute(select(func.count()).select_from(model))
    return result.scalar_one() == 0


async def seed_users(db: AsyncSession, catalog: dict) -> None:
    if not await _is_empty(db, User):
        return
    for row in catalog["users"]:
        db.add(User(**{k: v for k, v in row.items() if k != "id"}))
    await db.commit()
    logger.info("Seeded %s user(s)", len(catalog["users"]))


async def seed_scenarios(db: AsyncSession, catalog: dict) -> dict[int, int]:
    """Insert catalogue scenarios; returns catalogue id -> database id."""
    if not await _is_empty(db, Scenario):
        return {}

    created = []
    for row in catalog["scenarios"]:
        scenario = Scenario(**{k: v for k, v in row.items() if k != "id"})
        db.add(scenario)
        created.append((row["id"], scenario))
    await db.commit()
    logger.info("Seeded %s scenario(s)", len(created))
    return {catalog_id: scenario.id for catalog_id, scenario in created}


async def seed_learning_paths(db: AsyncSession, catalog: dict, scenario_ids: dict[int, int]) -> None:
    if not scenario_ids or not await _is_empty(db, LearningPath):
        return
    for row in catalog["learning_paths"]:
        db.add(
            LearningPath(
                name=row["name"],
                description=row["description"],
                framework=row["framework"],
                scenarios=[scenario_ids[i] for i in row["scenarios"] if i in scenario_ids],
                order=row["order"],
            )
        )
    await db.commit()
    logger.info("Seeded %s learning path(s)", len(catalog["learning_paths"]))


async def seed_database(db: AsyncSession, catalog: dict | None = None) -> None:
    """Idempotent: each table is only filled when it is empty."""
    catalog = catalog or load_catalog()
    await seed_users(db, catalog)
    scenario_ids = await seed_scenarios(db, catalog)
    await seed_learning_paths(db, catalog, scenario_ids)
