"""
Goal tracking and the end-of-week health review.
"""
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Optional

from lifeadmin.schemas.enums import DAILY_GOAL_TYPES, GoalType
from lifeadmin.services.analytics_config import AnalyticsConfig, get_analytics_config
from lifeadmin.services.dates import monday_of, parse_day
from lifeadmin.services.health_insights import (
    DailySample,
    Streak,
    compute_records_and_streaks,
    prepare_samples,
)
from lifeadmin.services.statistics import longest_and_current_streak, max_of, mean_of, min_of

logger = logging.getLogger(__name__)

# Sample attribute measured by each daily goal
GOAL_METRIC: dict[GoalType, str] = {
    GoalType.STEP_GOAL: "steps",
    GoalType.SLEEP_SCORE: "sleep_score",
    GoalType.READINESS_SCORE: "readiness_score",
}


@dataclass
class GoalSpec:
    goal_type: GoalType
    target: int
    active: bool = True
    id: Optional[int] = None

    def __post_init__(self):
        self.goal_type = GoalType(self.goal_type)


@dataclass
class GoalProgress:
    goal: GoalSpec
    current_value: int = 0
    progress: float = 0.0  # 0-100
    met: bool = False
    current_streak: int = 0
    best_streak: int = 0
    weekly_count: int = 0
    last_achieved: Optional[date] = None


@dataclass
class GoalsOverview:
    goals: list[GoalProgress] = field(default_factory=list)
    todays_met: int = 0
    todays_total: int = 0
    weekly_met: int = 0
    weekly_total: int = 0


@dataclass
class WeeklySummary:
    week_start: date
    week_end: date

    avg_sleep: float = 0.0
    avg_readiness: float = 0.0
    avg_activity: float = 0.0
    avg_steps: float = 0.0
    total_steps: int = 0

    sleep_delta: float = 0.0
    readiness_delta: float = 0.0
    activity_delta: float = 0.0
    steps_delta: float = 0.0

    goals_met: int = 0
    goals_total: int = 0

    highlights: list[str] = field(default_factory=list)
    lowlights: list[str] = field(default_factory=list)

    best_sleep_day: Optional[date] = None
    best_sleep_score: Optional[int] = None
    worst_sleep_day: Optional[date] = None
    worst_sleep_score: Optional[int] = None
    best_readiness_day: Optional[date] = None
    best_readiness_score: Optional[int] = None

    workout_count: int = 0
    active_streaks: list[Streak] = field(default_factory=list)


def _progress(value: Optional[int], target: int) -> float:
    if value is None or target <= 0:
        return 0.0
    return min(100.0, value / target * 100)


def _workout_days(workout_dates: Iterable[Any]) -> set[date]:
    return {d for d in (parse_day(w) for w in workout_dates) if d is not None}


def _workout_goal_progress(
    goal: GoalSpec,
    workout_dates: Iterable[Any],
    today: date,
) -> GoalProgress:
    """Workout frequency is measured per Monday-start week, not per day."""
    days = _workout_days(workout_dates)
    this_week = monday_of(today)
    weekly_count = sum(1 for d in days if this_week <= d <= today)

    result = GoalProgress(
        goal=goal,
        current_value=weekly_count,
        progress=_progress(weekly_count, goal.target),
        met=weekly_count >= goal.target,
        weekly_count=weekly_count,
    )

    past = [d for d in days if d <= today]
    if not past:
        return result

    weeks = []
    week = monday_of(min(past))
    while week <= this_week:
        weeks.append(week)
        week += timedelta(days=7)

    counts = {w: 0 for w in weeks}
    for d in past:
        counts[monday_of(d)] += 1

    def week_met(w: date) -> bool:
        return counts[w] >= goal.target

    run = longest_and_current_streak(weeks, week_met, lambda w: w)
    result.best_streak = run.best
    result.last_achieved = run.last_achieved
    if result.met:
        result.current_streak = run.current
    else:
        # The in-progress week doesn't break a streak until it is over
        result.current_streak = longest_and_current_streak(weeks[:-1], week_met, lambda w: w).current

    return result


def compute_goal_progress(
    goal: GoalSpec,
    today_value: Optional[int],
    history: Iterable[DailySample],
    today: date,
    workout_dates: Iterable[Any] = (),
) -> GoalProgress:
    """
    Progress toward one goal.

    Daily goals compare today's value to the target and run a daily streak
    over the history window. Workout frequency counts workout days in the
    current week.
    """
    if goal.goal_type == GoalType.WORKOUT_FREQUENCY:
        return _workout_goal_progress(goal, workout_dates, today)

    attr = GOAL_METRIC[goal.goal_type]
    days = [s for s in prepare_samples(history) if s.day <= today]
    run = longest_and_current_streak(
        days,
        lambda s: getattr(s, attr) is not None and getattr(s, attr) >= goal.target,
        lambda s: s.day,
    )

    return GoalProgress(
        goal=goal,
        current_value=today_value or 0,
        progress=_progress(today_value, goal.target),
        met=today_value is not None and today_value >= goal.target,
        current_streak=run.current,
        best_streak=run.best,
        last_achieved=run.last_achieved,
    )


def compute_goals_overview(
    goals: Iterable[GoalSpec],
    samples: Iterable[DailySample],
    workout_dates: Iterable[Any],
    today: date,
) -> GoalsOverview:
    """Progress for every active goal plus today's and this week's tallies."""
    days = prepare_samples(samples)
    by_day = {s.day: s for s in days}
    workouts = list(workout_dates)
    week_start = monday_of(today)
    elapsed = [week_start + timedelta(days=i) for i in range((today - week_start).days + 1)]

    overview = GoalsOverview()
    for goal in goals:
        if not goal.active:
            continue

        if goal.goal_type in DAILY_GOAL_TYPES:
            attr = GOAL_METRIC[goal.goal_type]
            today_sample = by_day.get(today)
            today_value = getattr(today_sample, attr) if today_sample else None
            progress = compute_goal_progress(goal, today_value, days, today)

            for day in elapsed:
                sample = by_day.get(day)
                value = getattr(sample, attr) if sample else None
                if value is not None and value >= goal.target:
                    overview.weekly_met += 1
            overview.weekly_total += len(elapsed)
        else:
            progress = compute_goal_progress(goal, None, days, today, workouts)
            overview.weekly_total += 1
            if progress.met:
                overview.weekly_met += 1

        overview.goals.append(progress)
        overview.todays_total += 1
        if progress.met:
            overview.todays_met += 1

    return overview


def _extreme(
    days: Sequence[DailySample],
    attr: str,
    highest: bool,
) -> tuple[Optional[date], Optional[int]]:
    """Earliest day holding the highest (or lowest) value of attr."""
    target = (max_of if highest else min_of)(getattr(s, attr) for s in days)
    if target is None:
        return None, None
    return next(s.day for s in days if getattr(s, attr) == target), target


def compute_weekly_summary(
    week_samples: Iterable[DailySample],
    previous_week_samples: Iterable[DailySample],
    workout_count: int,
    goals_snapshot: Sequence[GoalProgress],
    week_start: date,
    streaks: Optional[Sequence[Streak]] = None,
    config: Optional[AnalyticsConfig] = None,
) -> WeeklySummary:
    """
    Review one Monday-start week against the week before.

    Swings larger than the highlight delta become highlight/lowlight text.
    When no streaks are supplied they are computed over the week itself.
    """
    if config is None:
        config = get_analytics_config()
    threshold = config.weekly_summary.highlight_delta

    week = prepare_samples(week_samples)
    previous = prepare_samples(previous_week_samples)

    summary = WeeklySummary(
        week_start=week_start,
        week_end=week_start + timedelta(days=6),
        workout_count=workout_count,
        goals_met=sum(1 for g in goals_snapshot if g.met),
        goals_total=len(goals_snapshot),
    )

    for name, attr, label in (
        ("sleep", "sleep_score", "Sleep score"),
        ("readiness", "readiness_score", "Readiness"),
        ("activity", "activity_score", "Activity score"),
        ("steps", "steps", None),
    ):
        current = mean_of(getattr(s, attr) for s in week)
        before = mean_of(getattr(s, attr) for s in previous)
        setattr(summary, f"avg_{name}", current or 0.0)

        if current is None or before is None:
            continue
        delta = current - before
        setattr(summary, f"{name}_delta", delta)

        if label is None:
            continue
        if delta > threshold:
            summary.highlights.append(f"{label} up {delta:.0f} points from last week")
        elif delta < -threshold:
            summary.lowlights.append(f"{label} down {abs(delta):.0f} points from last week")

    summary.total_steps = sum(s.steps for s in week if s.steps is not None)

    summary.best_sleep_day, summary.best_sleep_score = _extreme(week, "sleep_score", highest=True)
    summary.worst_sleep_day, summary.worst_sleep_score = _extreme(week, "sleep_score", highest=False)
    summary.best_readiness_day, summary.best_readiness_score = _extreme(week, "readiness_score", highest=True)

    if streaks is None:
        streaks = compute_records_and_streaks(week, config).streaks
    summary.active_streaks = [s for s in streaks if s.is_active]

    logger.debug(
        "Weekly summary computed",
        extra={
            "week_start": week_start.isoformat(),
            "days": len(week),
            "highlights": len(summary.highlights),
            "lowlights": len(summary.lowlights),
        },
    )
    return summary
