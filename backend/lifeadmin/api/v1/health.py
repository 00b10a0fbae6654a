import logging
from datetime import date, timedelta

from fastapi import APIRouter, HTTPException, Query, status

from lifeadmin.api.deps import Analytics, DbSession, Today
from lifeadmin.config import get_settings
from lifeadmin.models import OuraDaily, Workout
from lifeadmin.repositories.health import HealthRepository
from lifeadmin.schemas.health import (
    GoalsOverviewResponse,
    HealthDashboardResponse,
    HealthGoalInput,
    HealthGoalResponse,
    HealthInsightsResponse,
    OuraBulkResponse,
    OuraDailyInput,
    OuraDailyResponse,
    ScoreHistoryPointResponse,
    SleepAnalysisResponse,
    WeeklySummaryResponse,
    WorkoutCreate,
    WorkoutResponse,
)
from lifeadmin.services.dates import monday_of
from lifeadmin.services.goals import compute_goals_overview, compute_weekly_summary
from lifeadmin.services.health_insights import (
    build_dashboard,
    build_health_insights,
    build_sleep_analysis,
    compute_records_and_streaks,
)

logger = logging.getLogger(__name__)
router = APIRouter()

settings = get_settings()

# Goal streaks look back this far
GOAL_HISTORY_DAYS = 90


@router.put("/oura", response_model=OuraDailyResponse)
async def upsert_oura_day(data: OuraDailyInput, db: DbSession) -> OuraDaily:
    """Store one day of Oura scores, replacing any existing record for that day."""
    return await HealthRepository(db).upsert_day(data.model_dump())


@router.get("/oura", response_model=list[OuraDailyResponse])
async def list_oura_days(
    db: DbSession,
    today: Today,
    days: int = Query(30, ge=1, le=365),
) -> list[OuraDaily]:
    """Oura records for the trailing window, oldest first."""
    return await HealthRepository(db).list_days(today - timedelta(days=days - 1), today)


@router.post("/oura/bulk", response_model=OuraBulkResponse)
async def bulk_upsert_oura_days(records: list[OuraDailyInput], db: DbSession) -> OuraBulkResponse:
    """Historical import: store many days at once, replacing existing records."""
    inserted = await HealthRepository(db).upsert_days([r.model_dump() for r in records])
    return OuraBulkResponse(inserted=inserted, total=len(records))


@router.get("/oura/{day}", response_model=OuraDailyResponse)
async def get_oura_day(day: date, db: DbSession) -> OuraDaily:
    row = await HealthRepository(db).get_day(day)
    if not row:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Day not found",
        )
    return row


@router.delete("/oura/{day}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_oura_day(day: date, db: DbSession) -> None:
    repo = HealthRepository(db)
    row = await repo.get_day(day)
    if not row:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Day not found",
        )
    await repo.delete_day(row)


@router.post("/workouts", response_model=WorkoutResponse, status_code=status.HTTP_201_CREATED)
async def create_workout(workout_in: WorkoutCreate, db: DbSession, today: Today) -> Workout:
    """Log a workout. Date defaults to today."""
    return await HealthRepository(db).add_workout(
        workout_in.date or today,
        workout_in.type.value,
        workout_in.notes,
    )


@router.get("/dashboard", response_model=HealthDashboardResponse)
async def get_dashboard(db: DbSession) -> HealthDashboardResponse:
    """Latest stored scores plus averages over the 7 days before them, however old."""
    repo = HealthRepository(db)
    latest = await repo.latest_day()
    samples = [] if latest is None else await repo.samples_between(latest - timedelta(days=7), latest)
    return HealthDashboardResponse.model_validate(build_dashboard(samples))


@router.get("/history", response_model=list[ScoreHistoryPointResponse])
async def get_history(
    db: DbSession,
    days: int = Query(30, ge=1, le=365),
) -> list[OuraDaily]:
    """Headline scores for the newest `days` stored days, oldest first, for charting."""
    return await HealthRepository(db).score_history(days)


@router.get("/insights", response_model=HealthInsightsResponse)
async def get_insights(
    db: DbSession,
    today: Today,
    config: Analytics,
    days: int = Query(settings.default_insights_days, ge=7, le=365),
) -> HealthInsightsResponse:
    """Correlations, weekday patterns, records and streaks over the window."""
    repo = HealthRepository(db)
    start = today - timedelta(days=days - 1)
    samples = await repo.samples_between(start, today)
    workouts = await repo.workout_dates(start, today)

    insights = build_health_insights(samples, workouts, config)
    logger.info(
        "Health insights generated",
        extra={"days": days, "total_days": insights.total_days, "correlations": len(insights.correlations)},
    )
    return HealthInsightsResponse.model_validate(insights)


@router.get("/sleep", response_model=SleepAnalysisResponse)
async def get_sleep_analysis(
    db: DbSession,
    today: Today,
    config: Analytics,
    days: int = Query(30, ge=7, le=365),
) -> SleepAnalysisResponse:
    """Sleep component breakdown, timing consistency and sleep debt."""
    samples = await HealthRepository(db).recent_samples(days, today)
    analysis = build_sleep_analysis(samples, config)
    logger.info(
        "Sleep analysis generated",
        extra={"days": days, "current_debt": analysis.debt.current_debt},
    )
    return SleepAnalysisResponse.model_validate(analysis)


@router.get("/goals", response_model=GoalsOverviewResponse)
async def get_goals(db: DbSession, today: Today) -> GoalsOverviewResponse:
    """Progress toward every active goal."""
    repo = HealthRepository(db)
    start = today - timedelta(days=GOAL_HISTORY_DAYS - 1)
    overview = compute_goals_overview(
        await repo.list_goals(),
        await repo.samples_between(start, today),
        await repo.workout_dates(monday_of(start), today),
        today,
    )
    return GoalsOverviewResponse.model_validate(overview)


@router.put("/goals", response_model=HealthGoalResponse)
async def set_goal(goal_in: HealthGoalInput, db: DbSession) -> HealthGoalResponse:
    """Create or replace the goal of this type."""
    goal = await HealthRepository(db).upsert_goal(goal_in.goal_type.value, goal_in.target, goal_in.active)
    logger.info("Health goal set", extra={"goal_type": goal.goal_type.value, "target": goal.target})
    return HealthGoalResponse.model_validate(goal)


@router.get("/weekly-summary", response_model=WeeklySummaryResponse)
async def get_weekly_summary(
    db: DbSession,
    today: Today,
    config: Analytics,
    week_start: date | None = Query(None, description="Monday of the week; defaults to the current week"),
) -> WeeklySummaryResponse:
    """Review one Monday-start week against the week before."""
    repo = HealthRepository(db)
    start = monday_of(week_start or today)
    end = start + timedelta(days=6)

    week = await repo.samples_between(start, end)
    previous = await repo.samples_between(start - timedelta(days=7), start - timedelta(days=1))

    # Goals and streaks are judged as of the last day of the week that has happened
    as_of = min(end, today)
    history_start = as_of - timedelta(days=GOAL_HISTORY_DAYS - 1)
    history = await repo.samples_between(history_start, as_of)
    goals = compute_goals_overview(
        await repo.list_goals(),
        history,
        await repo.workout_dates(monday_of(history_start), as_of),
        as_of,
    )

    summary = compute_weekly_summary(
        week,
        previous,
        await repo.count_workouts(start, end),
        goals.goals,
        start,
        streaks=compute_records_and_streaks(history, config).streaks,
        config=config,
    )
    return WeeklySummaryResponse.model_validate(summary)
