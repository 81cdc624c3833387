"""Best-effort coaching insights, generated after a decision has been committed."""
import logging

from fastapi import BackgroundTasks
from sqlalchemy.ext.asyncio import async_sessionmaker

from agile_trainer.core.errors import GenerationError
from agile_trainer.services import content
from agile_trainer.services.generation import TextGenerator

logger = logging.getLogger(__name__)


async def generate_insights(
    session_factory: async_sessionmaker,
    generator: TextGenerator,
    user_id: int,
    scenario_id: int,
    decisions: list[dict],
    profile: dict,
) -> int:
    """Generate and store insights; returns how many were stored. Failures are logged, never raised."""
    try:
        feedback = await generator.generate_feedback(scenario_id, decisions, profile)
        if not feedback:
            return 0

        async with session_factory() as db:
            for item in feedback:
                content.add_insight(
                    db,
                    user_id=user_id,
                    scenario_id=scenario_id,
                    type=item.type,
                    title=item.title,
                    description=item.description,
                )
            await db.commit()
    except GenerationError as exc:
        logger.warning("Insight generation failed for user %s scenario %s: %s", user_id, scenario_id, exc)
        return 0
    except Exception:
        # runs after the response; nothing upstream would report it
        logger.exception("Could not produce insights for user %s scenario %s", user_id, scenario_id)
        return 0

    logger.info("Stored %s insight(s) for user %s scenario %s", len(feedback), user_id, scenario_id)
    return len(feedback)


def schedule_insights(
    background_tasks: BackgroundTasks,
    session_factory: async_sessionmaker,
    generator: TextGenerator,
    user_id: int,
    scenario_id: int,
    decisions: list[dict],
    profile: dict,
) -> None:
    """Queue generation to run after the response; the request never awaits it."""
    background_tasks.add_task(
        generate_insights,
        session_factory,
        generator,
        user_id,
        scenario_id,
        list(decisions),
        dict(profile),
    )
