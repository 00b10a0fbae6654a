"""
Health Insights - Correlations, weekday patterns, records, streaks and sleep debt.

All functions are pure: they take daily samples supplied by the repository
layer and return plain result objects. Missing metrics are excluded from
every average; insufficient data omits a result instead of raising.
"""
import datetime as dt
import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Optional

from lifeadmin.schemas.enums import DebtTrend, Direction, InsightType, Strength
from lifeadmin.services.analytics_config import AnalyticsConfig, get_analytics_config
from lifeadmin.services.dates import DAY_NAMES, parse_day, sunday_index
from lifeadmin.services.statistics import (
    RunningAverage,
    StreakRun,
    classify_direction,
    classify_strength,
    longest_and_current_streak,
    max_of,
    mean_of,
    pearson_correlation,
)

logger = logging.getLogger(__name__)


@dataclass
class DailySample:
    """One calendar day of Oura metrics. Every metric is optional."""

    day: date

    # Headline scores
    sleep_score: Optional[int] = None
    readiness_score: Optional[int] = None
    activity_score: Optional[int] = None
    steps: Optional[int] = None

    # Sleep contributors
    sleep_deep_sleep: Optional[int] = None
    sleep_efficiency: Optional[int] = None
    sleep_latency: Optional[int] = None
    sleep_rem_sleep: Optional[int] = None
    sleep_restfulness: Optional[int] = None
    sleep_timing: Optional[int] = None
    sleep_total_sleep: Optional[int] = None

    # Readiness contributors
    readiness_activity_balance: Optional[int] = None
    readiness_body_temperature: Optional[int] = None
    readiness_hrv_balance: Optional[int] = None
    readiness_previous_day_activity: Optional[int] = None
    readiness_previous_night: Optional[int] = None
    readiness_recovery_index: Optional[int] = None
    readiness_resting_heart_rate: Optional[int] = None
    readiness_sleep_balance: Optional[int] = None
    readiness_sleep_regularity: Optional[int] = None
    temperature_deviation: Optional[float] = None

    # Activity contributors
    activity_active_calories: Optional[int] = None
    activity_total_calories: Optional[int] = None
    activity_meet_daily_targets: Optional[int] = None
    activity_move_every_hour: Optional[int] = None
    activity_recovery_time: Optional[int] = None
    activity_stay_active: Optional[int] = None
    activity_training_frequency: Optional[int] = None
    activity_training_volume: Optional[int] = None


@dataclass
class Correlation:
    metric1: str
    metric2: str
    coefficient: float
    strength: Strength
    direction: Direction
    insight: str
    sample_size: int = 0


@dataclass
class WeekdayPattern:
    day_name: str
    day_number: int  # 0=Sunday .. 6=Saturday
    avg_sleep: float = 0.0
    avg_readiness: float = 0.0
    avg_activity: float = 0.0
    avg_steps: float = 0.0
    sample_size: int = 0


@dataclass
class WeekdayInsight:
    day_name: str
    metric: str
    type: InsightType
    value: float
    avg_all: float
    insight: str


@dataclass
class WeekdayAnalysis:
    patterns: list[WeekdayPattern] = field(default_factory=list)
    insights: list[WeekdayInsight] = field(default_factory=list)


@dataclass
class PersonalRecord:
    type: str
    value: int
    description: str
    date: Optional[dt.date] = None


@dataclass
class Streak:
    type: str
    current_streak: int = 0
    best_streak: int = 0
    last_achieved: Optional[date] = None
    is_active: bool = False

    @classmethod
    def from_run(cls, streak_type: str, run: StreakRun) -> "Streak":
        return cls(
            type=streak_type,
            current_streak=run.current,
            best_streak=run.best,
            last_achieved=run.last_achieved,
            is_active=run.is_active,
        )


@dataclass
class RecordsAndStreaks:
    records: list[PersonalRecord] = field(default_factory=list)
    streaks: list[Streak] = field(default_factory=list)


@dataclass
class SleepDebtData:
    current_debt: float = 0.0
    debt_trend: DebtTrend = DebtTrend.STABLE
    days_in_debt: int = 0
    last_good_night: Optional[date] = None
    weekly_avg_score: float = 0.0
    recommended_rest: int = 0


@dataclass
class HealthInsights:
    correlations: list[Correlation] = field(default_factory=list)
    weekday_patterns: list[WeekdayPattern] = field(default_factory=list)
    weekday_insights: list[WeekdayInsight] = field(default_factory=list)
    records: list[PersonalRecord] = field(default_factory=list)
    streaks: list[Streak] = field(default_factory=list)
    total_days: int = 0
    avg_sleep: float = 0.0
    avg_readiness: float = 0.0
    avg_activity: float = 0.0


@dataclass
class SleepBreakdownPoint:
    day: date
    score: Optional[int] = None
    deep_sleep: Optional[int] = None
    rem_sleep: Optional[int] = None
    efficiency: Optional[int] = None
    latency: Optional[int] = None
    restfulness: Optional[int] = None
    timing: Optional[int] = None
    total_sleep: Optional[int] = None


@dataclass
class SleepTimingPoint:
    day: date
    day_of_week: int
    timing_score: Optional[int] = None


@dataclass
class SleepAnalysis:
    breakdown: list[SleepBreakdownPoint] = field(default_factory=list)
    debt: SleepDebtData = field(default_factory=SleepDebtData)
    timing: list[SleepTimingPoint] = field(default_factory=list)
    averages: dict[str, float] = field(default_factory=dict)
    weekday_timing_avg: dict[str, float] = field(default_factory=dict)


@dataclass
class HealthDashboard:
    latest_day: Optional[date] = None
    sleep_score: Optional[int] = None
    readiness_score: Optional[int] = None
    activity_score: Optional[int] = None
    avg_sleep_score_7d: float = 0.0
    avg_readiness_7d: float = 0.0
    avg_activity_7d: float = 0.0


def prepare_samples(samples: Iterable[Any]) -> list[DailySample]:
    """
    Return samples sorted oldest to newest.

    Records whose day cannot be parsed are dropped. Inputs are never
    mutated; string days are coerced on a copy.
    """
    prepared = []
    for sample in samples:
        day = parse_day(sample.day)
        if day is None:
            logger.debug("Dropping sample with malformed day", extra={"day": sample.day})
            continue
        if day is not sample.day:
            sample = DailySample(**{**sample.__dict__, "day": day})
        prepared.append(sample)
    prepared.sort(key=lambda s: s.day)
    return prepared


def _paired(
    left: Sequence[Optional[float]],
    right: Sequence[Optional[float]],
) -> tuple[list[float], list[float]]:
    """Keep only positions where both series have a value."""
    xs, ys = [], []
    for a, b in zip(left, right):
        if a is not None and b is not None:
            xs.append(float(a))
            ys.append(float(b))
    return xs, ys


def _sleep_readiness_insight(r: float) -> str:
    if r >= 0.4:
        return "Your sleep strongly predicts how ready you feel the next day. Protecting your sleep pays off."
    elif r >= 0.2:
        return "Better sleep tends to lift your readiness the following day."
    elif r <= -0.2:
        return "Higher sleep scores are followed by lower readiness. Other recovery factors may be dominating."
    return "Sleep and next-day readiness move independently for you."


def _activity_sleep_insight(r: float) -> str:
    if r >= 0.4:
        return "Active days are reliably followed by better sleep."
    elif r >= 0.2:
        return "More activity tends to improve your sleep that night."
    elif r <= -0.4:
        return "Very active days hurt your sleep. Try winding down earlier after big days."
    elif r <= -0.2:
        return "Higher activity is slightly associated with worse sleep."
    return "Your activity level has little effect on how you sleep."


def _steps_activity_insight(r: float) -> str:
    if r >= 0.7:
        return "Steps are the main driver of your activity score."
    elif r >= 0.4:
        return "More steps reliably raise your activity score."
    elif r >= 0.2:
        return "Steps contribute somewhat to your activity score."
    return "Your activity score depends on more than step count."


def _build_correlation(
    metric1: str,
    metric2: str,
    left: Sequence[Optional[float]],
    right: Sequence[Optional[float]],
    insight_for: Callable[[float], str],
    config: AnalyticsConfig,
) -> Optional[Correlation]:
    xs, ys = _paired(left, right)
    if len(xs) < config.correlation.min_paired_samples:
        logger.debug(
            "Correlation omitted: insufficient paired samples",
            extra={"metric1": metric1, "metric2": metric2, "pairs": len(xs)},
        )
        return None

    r = pearson_correlation(xs, ys)
    return Correlation(
        metric1=metric1,
        metric2=metric2,
        coefficient=r,
        strength=classify_strength(r, config.correlation),
        direction=classify_direction(r, config.correlation),
        insight=insight_for(r),
        sample_size=len(xs),
    )


def compute_correlations(
    samples: Iterable[DailySample],
    config: Optional[AnalyticsConfig] = None,
) -> list[Correlation]:
    """
    Correlate sleep with next-day readiness, activity with that night's
    sleep, and steps with same-day activity score.
    """
    if config is None:
        config = get_analytics_config()

    days = prepare_samples(samples)
    sleep = [s.sleep_score for s in days]
    readiness = [s.readiness_score for s in days]
    activity = [s.activity_score for s in days]
    steps = [s.steps for s in days]

    candidates = [
        _build_correlation(
            "Sleep Score", "Next-Day Readiness",
            sleep[:-1], readiness[1:], _sleep_readiness_insight, config,
        ),
        _build_correlation(
            "Activity Score", "Same-Night Sleep",
            activity[:-1], sleep[1:], _activity_sleep_insight, config,
        ),
        _build_correlation(
            "Steps", "Activity Score",
            steps, activity, _steps_activity_insight, config,
        ),
    ]
    return [c for c in candidates if c is not None]


def compute_workout_correlation(
    samples: Iterable[DailySample],
    workout_dates: Iterable[Any],
    config: Optional[AnalyticsConfig] = None,
) -> Optional[Correlation]:
    """
    Compare next-day readiness after workout days against rest days.

    The difference of means is scaled into a correlation-like value so it
    can share the strength/direction bands.
    """
    if config is None:
        config = get_analytics_config()
    cfg = config.correlation

    trained = {d for d in (parse_day(w) for w in workout_dates) if d is not None}
    days = prepare_samples(samples)

    after_workout, after_rest = [], []
    for today, tomorrow in zip(days, days[1:]):
        if tomorrow.readiness_score is None:
            continue
        if today.day in trained:
            after_workout.append(tomorrow.readiness_score)
        else:
            after_rest.append(tomorrow.readiness_score)

    if len(after_workout) < cfg.min_group_size or len(after_rest) < cfg.min_group_size:
        logger.debug(
            "Workout correlation omitted: groups too small",
            extra={"after_workout": len(after_workout), "after_rest": len(after_rest)},
        )
        return None

    difference = mean_of(after_workout) - mean_of(after_rest)
    coefficient = max(-1.0, min(1.0, difference / cfg.difference_scale))

    if difference >= cfg.notable_difference:
        insight = f"Your readiness is {difference:.0f} points higher the day after a workout."
    elif difference <= -cfg.notable_difference:
        insight = f"Your readiness drops {abs(difference):.0f} points the day after a workout. Plan recovery accordingly."
    elif abs(difference) >= cfg.slight_difference:
        insight = f"Workouts shift your next-day readiness slightly ({difference:+.0f} points)."
    else:
        insight = "Workouts don't noticeably change your next-day readiness."

    return Correlation(
        metric1="Workout",
        metric2="Next-Day Readiness",
        coefficient=coefficient,
        strength=classify_strength(coefficient, cfg),
        direction=classify_direction(coefficient, cfg),
        insight=insight,
        sample_size=len(after_workout) + len(after_rest),
    )


def compute_weekday_patterns(
    samples: Iterable[DailySample],
    config: Optional[AnalyticsConfig] = None,
) -> WeekdayAnalysis:
    """Average each metric by day of week and find best/worst days."""
    if config is None:
        config = get_analytics_config()

    days = prepare_samples(samples)
    buckets = {
        n: {metric: RunningAverage() for metric in ("sleep", "readiness", "activity", "steps")}
        for n in range(7)
    }
    seen = set()

    for sample in days:
        n = sunday_index(sample.day)
        seen.add(n)
        buckets[n]["sleep"].add(sample.sleep_score)
        buckets[n]["readiness"].add(sample.readiness_score)
        buckets[n]["activity"].add(sample.activity_score)
        buckets[n]["steps"].add(sample.steps)

    patterns = [
        WeekdayPattern(
            day_name=DAY_NAMES[n],
            day_number=n,
            avg_sleep=buckets[n]["sleep"].value,
            avg_readiness=buckets[n]["readiness"].value,
            avg_activity=buckets[n]["activity"].value,
            avg_steps=buckets[n]["steps"].value,
            sample_size=buckets[n]["sleep"].count,
        )
        for n in range(7)
        if n in seen
    ]

    insights: list[WeekdayInsight] = []
    min_size = config.weekday.min_sample_size

    for metric, label, best_text, worst_text in (
        (
            "sleep", "Sleep",
            "You sleep best on {day}s ({value:.0f} vs {avg:.0f} average).",
            "{day}s are your weakest sleep nights ({value:.0f} vs {avg:.0f} average).",
        ),
        (
            "readiness", "Readiness",
            "You feel most ready on {day}s ({value:.0f} vs {avg:.0f} average).",
            "Readiness dips on {day}s ({value:.0f} vs {avg:.0f} average).",
        ),
    ):
        eligible = [
            p for p in patterns
            if p.sample_size >= min_size and buckets[p.day_number][metric].count > 0
        ]
        if not eligible:
            continue

        overall = mean_of(getattr(s, f"{metric}_score") for s in days) or 0.0

        def value_of(pattern: WeekdayPattern, m: str = metric) -> float:
            return buckets[pattern.day_number][m].value

        best = max(eligible, key=value_of)
        worst = min(eligible, key=value_of)

        insights.append(WeekdayInsight(
            day_name=best.day_name,
            metric=label,
            type=InsightType.BEST,
            value=value_of(best),
            avg_all=overall,
            insight=best_text.format(day=best.day_name, value=value_of(best), avg=overall),
        ))
        if worst.day_number != best.day_number:
            insights.append(WeekdayInsight(
                day_name=worst.day_name,
                metric=label,
                type=InsightType.WORST,
                value=value_of(worst),
                avg_all=overall,
                insight=worst_text.format(day=worst.day_name, value=value_of(worst), avg=overall),
            ))

    return WeekdayAnalysis(patterns=patterns, insights=insights)


def _highest(days: Sequence[DailySample], attr: str) -> Optional[DailySample]:
    """Earliest sample holding the top value of attr."""
    top = max_of(getattr(s, attr) for s in days)
    if top is None:
        return None
    return next(s for s in days if getattr(s, attr) == top)


def compute_records_and_streaks(
    samples: Iterable[DailySample],
    config: Optional[AnalyticsConfig] = None,
) -> RecordsAndStreaks:
    """Personal bests over the window plus the three daily streaks."""
    if config is None:
        config = get_analytics_config()
    thresholds = config.streaks

    days = prepare_samples(samples)
    result = RecordsAndStreaks()

    for record_type, attr, description in (
        ("highest_sleep", "sleep_score", "Highest sleep score"),
        ("highest_readiness", "readiness_score", "Highest readiness score"),
        ("highest_activity", "activity_score", "Highest activity score"),
    ):
        top = _highest(days, attr)
        if top is not None:
            result.records.append(PersonalRecord(
                type=record_type,
                value=getattr(top, attr),
                date=top.day,
                description=description,
            ))

    runs = {
        "sleep_80": longest_and_current_streak(
            days,
            lambda s: s.sleep_score is not None and s.sleep_score >= thresholds.sleep_threshold,
            lambda s: s.day,
        ),
        "readiness_80": longest_and_current_streak(
            days,
            lambda s: s.readiness_score is not None and s.readiness_score >= thresholds.readiness_threshold,
            lambda s: s.day,
        ),
        "steps_10k": longest_and_current_streak(
            days,
            lambda s: s.steps is not None and s.steps >= thresholds.steps_threshold,
            lambda s: s.day,
        ),
    }
    result.streaks = [Streak.from_run(name, run) for name, run in runs.items()]

    sleep_run = runs["sleep_80"]
    if sleep_run.best > 1:
        result.records.append(PersonalRecord(
            type="longest_sleep_streak",
            value=sleep_run.best,
            description=f"{sleep_run.best} days in a row with sleep score {thresholds.sleep_threshold}+",
        ))

    return result


def compute_sleep_debt(
    samples: Iterable[DailySample],
    config: Optional[AnalyticsConfig] = None,
) -> SleepDebtData:
    """
    Accrue debt for nights below threshold and pay it back on good nights.

    Debt never goes below zero. Days without a total sleep score are not
    processed at all.
    """
    if config is None:
        config = get_analytics_config()
    cfg = config.sleep_debt

    days = prepare_samples(samples)
    result = SleepDebtData()
    processed: list[int] = []

    for sample in days:
        score = sample.sleep_total_sleep
        if score is None:
            continue
        processed.append(score)

        if score < cfg.threshold:
            result.current_debt += (cfg.threshold - score) / cfg.points_per_unit
            result.days_in_debt += 1
        else:
            result.current_debt -= (score - cfg.threshold) / cfg.points_per_unit
            result.current_debt = max(0.0, result.current_debt)
            result.days_in_debt = 0
            result.last_good_night = sample.day

    if not processed:
        return result

    if len(processed) >= 2:
        deficits = [max(0, cfg.threshold - score) for score in processed]
        half = len(deficits) // 2
        first = mean_of(deficits[:half])
        second = mean_of(deficits[half:])
        if second - first > cfg.trend_delta:
            result.debt_trend = DebtTrend.INCREASING
        elif first - second > cfg.trend_delta:
            result.debt_trend = DebtTrend.DECREASING

    recent = processed[-cfg.weekly_window:]
    result.weekly_avg_score = mean_of(recent)

    for floor, rest in sorted(cfg.rest_steps, reverse=True):
        if result.current_debt > floor:
            result.recommended_rest = rest
            break

    return result


def build_health_insights(
    samples: Iterable[DailySample],
    workout_dates: Iterable[Any] = (),
    config: Optional[AnalyticsConfig] = None,
) -> HealthInsights:
    """Assemble the full insights bundle for a window."""
    if config is None:
        config = get_analytics_config()

    days = prepare_samples(samples)
    correlations = compute_correlations(days, config)
    workout = compute_workout_correlation(days, workout_dates, config)
    if workout is not None:
        correlations.append(workout)

    weekday = compute_weekday_patterns(days, config)
    records = compute_records_and_streaks(days, config)

    insights = HealthInsights(
        correlations=correlations,
        weekday_patterns=weekday.patterns,
        weekday_insights=weekday.insights,
        records=records.records,
        streaks=records.streaks,
        total_days=len(days),
        avg_sleep=mean_of(s.sleep_score for s in days) or 0.0,
        avg_readiness=mean_of(s.readiness_score for s in days) or 0.0,
        avg_activity=mean_of(s.activity_score for s in days) or 0.0,
    )
    logger.debug(
        "Health insights computed",
        extra={
            "total_days": insights.total_days,
            "correlations": len(insights.correlations),
            "weekday_insights": len(insights.weekday_insights),
        },
    )
    return insights


SLEEP_COMPONENTS = {
    "score": "sleep_score",
    "deep_sleep": "sleep_deep_sleep",
    "rem_sleep": "sleep_rem_sleep",
    "efficiency": "sleep_efficiency",
    "latency": "sleep_latency",
    "restfulness": "sleep_restfulness",
    "timing": "sleep_timing",
    "total_sleep": "sleep_total_sleep",
}


def build_sleep_analysis(
    samples: Iterable[DailySample],
    config: Optional[AnalyticsConfig] = None,
) -> SleepAnalysis:
    """Sleep deep dive: component breakdown, timing consistency and debt."""
    days = prepare_samples(samples)
    analysis = SleepAnalysis(debt=compute_sleep_debt(days, config))

    for sample in days:
        analysis.breakdown.append(SleepBreakdownPoint(
            day=sample.day,
            **{name: getattr(sample, attr) for name, attr in SLEEP_COMPONENTS.items()},
        ))
        analysis.timing.append(SleepTimingPoint(
            day=sample.day,
            day_of_week=sunday_index(sample.day),
            timing_score=sample.sleep_timing,
        ))

    for name, attr in SLEEP_COMPONENTS.items():
        avg = mean_of(getattr(s, attr) for s in days)
        if avg is not None:
            analysis.averages[name] = avg

    by_weekday = {n: RunningAverage() for n in range(7)}
    for point in analysis.timing:
        by_weekday[point.day_of_week].add(point.timing_score)
    analysis.weekday_timing_avg = {
        DAY_NAMES[n]: avg.value for n, avg in by_weekday.items() if avg.count > 0
    }

    return analysis


def build_dashboard(samples: Iterable[DailySample]) -> HealthDashboard:
    """Latest scores plus trailing averages measured from the latest day."""
    days = prepare_samples(samples)
    if not days:
        return HealthDashboard()

    latest = days[-1]
    window_start = latest.day - timedelta(days=7)
    window = [s for s in days if s.day >= window_start]

    return HealthDashboard(
        latest_day=latest.day,
        sleep_score=latest.sleep_score,
        readiness_score=latest.readiness_score,
        activity_score=latest.activity_score,
        avg_sleep_score_7d=mean_of(s.sleep_score for s in window) or 0.0,
        avg_readiness_7d=mean_of(s.readiness_score for s in window) or 0.0,
        avg_activity_7d=mean_of(s.activity_score for s in window) or 0.0,
    )
