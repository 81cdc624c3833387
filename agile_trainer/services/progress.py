"""Scenario progression: start, record decisions, complete.

One UserProgress row per (user, scenario) moves through

    NotStarted (no row) -> InProgress (completed=False) -> Completed (terminal)

The cursor is server-side: a decision must answer the step at ``current_step``
and advances it by exactly one. Points come from the authored option, never
from the client.
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from agile_trainer.core.errors import InputValidationError, InvalidStateError, NotFoundError
from agile_trainer.db.session import as_utc, utcnow
from agile_trainer.models.progress import UserProgress
from agile_trainer.models.scenario import Scenario
from agile_trainer.schemas.scenario import DecisionOptionSchema, StepSchema
from agile_trainer.services import content
from agile_trainer.services.profile import apply_completion

logger = logging.getLogger(__name__)


class RecordLocks:
    """Keyed asyncio locks; an entry lives only while someone holds or waits on it."""

    def __init__(self):
        self._locks: dict[tuple[int, ...], list] = {}

    @asynccontextmanager
    async def hold(self, *key: int) -> AsyncIterator[None]:
        entry = self._locks.get(key)
        if entry is None:
            entry = self._locks[key] = [asyncio.Lock(), 0]
        entry[1] += 1
        try:
            async with entry[0]:
                yield
        finally:
            entry[1] -= 1
            if entry[1] == 0:
                self._locks.pop(key, None)

    def __len__(self) -> int:
        return len(self._locks)


# (user_id, scenario_id) -> progress record; (user_id,) -> profile counters.
# A profile lock is only ever taken while holding a record lock.
record_locks = RecordLocks()
profile_locks = RecordLocks()


async def get_progress(db: AsyncSession, user_id: int, scenario_id: int) -> UserProgress | None:
    result = await db.execute(
        select(UserProgress)
        .where(UserProgress.user_id == user_id, UserProgress.scenario_id == scenario_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def list_progress(db: AsyncSession, user_id: int) -> list[UserProgress]:
    result = await db.execute(
        select(UserProgress).where(UserProgress.user_id == user_id).order_by(UserProgress.id)
    )
    return list(result.scalars().all())


async def start_scenario(db: AsyncSession, user_id: int, scenario_id: int) -> UserProgress:
    """Fetch-or-create the progress record. Never creates a second row for the pair."""
    progress = await get_progress(db, user_id, scenario_id)
    if progress is not None:
        return progress

    scenario = await content.get_scenario(db, scenario_id)
    if not scenario.steps:
        raise InvalidStateError("Scenario has no steps")

    progress = UserProgress(
        user_id=user_id,
        scenario_id=scenario_id,
        current_step=0,
        total_steps=len(scenario.steps),
        decisions=[],
        completed=False,
        score=0,
        time_spent=0,
    )
    db.add(progress)
    try:
        await db.commit()
    except IntegrityError:
        # lost a race with a concurrent start for the same pair
        await db.rollback()
        existing = await get_progress(db, user_id, scenario_id)
        if existing is None:
            raise
        return existing

    await db.refresh(progress)
    logger.info("User %s started scenario %s (%s steps)", user_id, scenario_id, progress.total_steps)
    return progress


def _resolve_option(scenario: Scenario, progress: UserProgress, step_id: int, decision_id: int) -> DecisionOptionSchema:
    steps = scenario.steps
    if progress.current_step >= min(progress.total_steps, len(steps)):
        raise InvalidStateError("All steps of this scenario have already been answered")

    step = StepSchema.model_validate(steps[progress.current_step])
    if step.id != step_id:
        raise InvalidStateError(f"Expected a decision for step {step.id}, got step {step_id}")

    option = step.option(decision_id)
    if option is None:
        raise InputValidationError(f"Decision {decision_id} is not an option of step {step_id}")
    return option


async def submit_decision(
    db: AsyncSession,
    user_id: int,
    scenario_id: int,
    step_id: int,
    decision_id: int,
    points: int | None = None,
) -> UserProgress:
    """Record one decision: append to the trace, add points, advance the cursor. Single commit."""
    async with record_locks.hold(user_id, scenario_id):
        progress = await get_progress(db, user_id, scenario_id)
        if progress is None:
            raise NotFoundError("Scenario progress not found")
        if progress.completed:
            raise InvalidStateError("Scenario already completed; no further decisions accepted")

        scenario = await content.get_scenario(db, scenario_id)
        option = _resolve_option(scenario, progress, step_id, decision_id)
        if points is not None and points != option.points:
            logger.warning(
                "Client sent %s points for step %s decision %s of scenario %s; recording authored %s",
                points, step_id, decision_id, scenario_id, option.points,
            )

        entry = {
            "stepId": step_id,
            "decisionId": decision_id,
            "points": option.points,
            "timestamp": utcnow().isoformat(),
        }
        # assign a new list so the JSON column is flagged dirty
        progress.decisions = [*(progress.decisions or []), entry]
        progress.score = (progress.score or 0) + option.points
        progress.current_step = progress.current_step + 1

        try:
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        await db.refresh(progress)

    logger.info(
        "User %s scenario %s: step %s decision %s (+%s, score %s)",
        user_id, scenario_id, step_id, decision_id, option.points, progress.score,
    )
    return progress


async def complete_scenario(db: AsyncSession, user_id: int, scenario_id: int) -> UserProgress:
    """Mark the record completed and fold the run into the user profile. Repeat calls are no-ops."""
    async with record_locks.hold(user_id, scenario_id):
        progress = await get_progress(db, user_id, scenario_id)
        if progress is None:
            raise NotFoundError("Scenario progress not found")
        if progress.completed:
            return progress

        # other scenarios of the same user update the same counters
        async with profile_locks.hold(user_id):
            user = await content.get_user(db, user_id, for_update=True)
            now = utcnow()
            started_at = as_utc(progress.started_at) or now

            progress.completed = True
            progress.completed_at = now
            progress.time_spent = max(0, int((now - started_at).total_seconds() // 60))
            apply_completion(user, progress.score or 0, progress.time_spent)
            success_rate = user.success_rate

            try:
                await db.commit()
            except Exception:
                await db.rollback()
                raise
        await db.refresh(progress)

    logger.info(
        "User %s completed scenario %s with score %s (success rate now %s%%)",
        user_id, scenario_id, progress.score, success_rate,
    )
    return progress
