"""
Health Repository - Loads Oura days, workouts and goals for the engines.

Rows are converted to plain DailySample / GoalSpec objects so the
analytics code never touches the session.
"""
import logging
from dataclasses import fields
from datetime import date, timedelta
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from lifeadmin.models import HealthGoal, OuraDaily, Workout
from lifeadmin.services.goals import GoalSpec
from lifeadmin.services.health_insights import DailySample

logger = logging.getLogger(__name__)

# Columns copied verbatim from OuraDaily onto DailySample
_SAMPLE_FIELDS = [
    f.name for f in fields(DailySample)
    if f.name not in ("day", "steps")
]


def to_sample(row: OuraDaily) -> DailySample:
    return DailySample(
        day=row.day,
        steps=row.activity_steps,
        **{name: getattr(row, name) for name in _SAMPLE_FIELDS},
    )


class HealthRepository:
    """Data access for the health side of the app."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def upsert_day(self, values: dict[str, Any]) -> OuraDaily:
        """Insert or replace the Oura record for values['day']."""
        result = await self.db.execute(select(OuraDaily).where(OuraDaily.day == values["day"]))
        row = result.scalar_one_or_none()

        if row is None:
            row = OuraDaily(**values)
            self.db.add(row)
        else:
            for key, value in values.items():
                setattr(row, key, value)

        await self.db.commit()
        await self.db.refresh(row)
        logger.info("Stored Oura day", extra={"day": row.day.isoformat()})
        return row

    async def upsert_days(self, records: list[dict[str, Any]]) -> int:
        """
        Bulk form of upsert_day for historical imports.

        Later entries for the same day win. Returns the number of days written.
        """
        by_day = {values["day"]: values for values in records}
        if not by_day:
            return 0

        result = await self.db.execute(select(OuraDaily).where(OuraDaily.day.in_(list(by_day))))
        existing = {row.day: row for row in result.scalars().all()}

        for day, values in by_day.items():
            row = existing.get(day)
            if row is None:
                self.db.add(OuraDaily(**values))
            else:
                for key, value in values.items():
                    setattr(row, key, value)

        await self.db.commit()
        logger.info(
            "Bulk stored Oura days",
            extra={"written": len(by_day), "updated": len(existing)},
        )
        return len(by_day)

    async def get_day(self, day: date) -> OuraDaily | None:
        result = await self.db.execute(select(OuraDaily).where(OuraDaily.day == day))
        return result.scalar_one_or_none()

    async def delete_day(self, row: OuraDaily) -> None:
        day = row.day
        await self.db.delete(row)
        await self.db.commit()
        logger.info("Deleted Oura day", extra={"day": day.isoformat()})

    async def latest_day(self) -> date | None:
        """Most recent day with stored data."""
        result = await self.db.execute(select(OuraDaily.day).order_by(OuraDaily.day.desc()).limit(1))
        return result.scalars().first()

    async def score_history(self, limit: int) -> list[OuraDaily]:
        """The newest `limit` stored days, oldest first."""
        result = await self.db.execute(select(OuraDaily).order_by(OuraDaily.day.desc()).limit(limit))
        history = list(result.scalars().all())
        history.reverse()
        return history

    async def list_days(self, start: date, end: date) -> list[OuraDaily]:
        result = await self.db.execute(
            select(OuraDaily)
            .where(OuraDaily.day >= start, OuraDaily.day <= end)
            .order_by(OuraDaily.day)
        )
        return list(result.scalars().all())

    async def samples_between(self, start: date, end: date) -> list[DailySample]:
        """Samples for start..end inclusive, oldest first."""
        return [to_sample(row) for row in await self.list_days(start, end)]

    async def recent_samples(self, days: int, today: date) -> list[DailySample]:
        """Samples for the trailing window of `days` days ending today."""
        return await self.samples_between(today - timedelta(days=days - 1), today)

    async def add_workout(self, workout_date: date, workout_type: str, notes: str = "") -> Workout:
        workout = Workout(date=workout_date, type=workout_type, notes=notes)
        self.db.add(workout)
        await self.db.commit()
        await self.db.refresh(workout)
        return workout

    async def workout_dates(self, start: date, end: date) -> list[date]:
        result = await self.db.execute(
            select(Workout.date)
            .where(Workout.date >= start, Workout.date <= end)
            .order_by(Workout.date)
        )
        return list(result.scalars().all())

    async def count_workouts(self, start: date, end: date) -> int:
        result = await self.db.execute(
            select(func.count(Workout.id)).where(Workout.date >= start, Workout.date <= end)
        )
        return result.scalar_one()

    async def list_goals(self) -> list[GoalSpec]:
        result = await self.db.execute(select(HealthGoal).order_by(HealthGoal.id))
        return [
            GoalSpec(goal_type=g.goal_type, target=g.target, active=g.active, id=g.id)
            for g in result.scalars().all()
        ]

    async def upsert_goal(self, goal_type: str, target: int, active: bool = True) -> GoalSpec:
        """One goal per type; setting it again replaces the target."""
        result = await self.db.execute(select(HealthGoal).where(HealthGoal.goal_type == goal_type))
        goal = result.scalar_one_or_none()

        if goal is None:
            goal = HealthGoal(goal_type=goal_type, target=target, active=active)
            self.db.add(goal)
        else:
            goal.target = target
            goal.active = active

        await self.db.commit()
        await self.db.refresh(goal)
        return GoalSpec(goal_type=goal.goal_type, target=goal.target, active=goal.active, id=goal.id)
