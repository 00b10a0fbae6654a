import datetime as dt
from datetime import date, datetime

from pydantic import BaseModel, Field

from lifeadmin.schemas.enums import (
    DebtTrend,
    Direction,
    GoalType,
    InsightType,
    Strength,
    WorkoutType,
)


# --- Oura daily data ---

class OuraDailyBase(BaseModel):
    day: date

    # Sleep
    sleep_score: int | None = Field(None, ge=0, le=100)
    sleep_deep_sleep: int | None = Field(None, ge=0, le=100)
    sleep_efficiency: int | None = Field(None, ge=0, le=100)
    sleep_latency: int | None = Field(None, ge=0, le=100)
    sleep_rem_sleep: int | None = Field(None, ge=0, le=100)
    sleep_restfulness: int | None = Field(None, ge=0, le=100)
    sleep_timing: int | None = Field(None, ge=0, le=100)
    sleep_total_sleep: int | None = Field(None, ge=0, le=100)

    # Readiness
    readiness_score: int | None = Field(None, ge=0, le=100)
    readiness_activity_balance: int | None = Field(None, ge=0, le=100)
    readiness_body_temperature: int | None = Field(None, ge=0, le=100)
    readiness_hrv_balance: int | None = Field(None, ge=0, le=100)
    readiness_previous_day_activity: int | None = Field(None, ge=0, le=100)
    readiness_previous_night: int | None = Field(None, ge=0, le=100)
    readiness_recovery_index: int | None = Field(None, ge=0, le=100)
    readiness_resting_heart_rate: int | None = Field(None, ge=0, le=100)
    readiness_sleep_balance: int | None = Field(None, ge=0, le=100)
    readiness_sleep_regularity: int | None = Field(None, ge=0, le=100)
    temperature_deviation: float | None = None

    # Activity
    activity_score: int | None = Field(None, ge=0, le=100)
    activity_active_calories: int | None = Field(None, ge=0)
    activity_steps: int | None = Field(None, ge=0)
    activity_total_calories: int | None = Field(None, ge=0)
    activity_meet_daily_targets: int | None = Field(None, ge=0, le=100)
    activity_move_every_hour: int | None = Field(None, ge=0, le=100)
    activity_recovery_time: int | None = Field(None, ge=0, le=100)
    activity_stay_active: int | None = Field(None, ge=0, le=100)
    activity_training_frequency: int | None = Field(None, ge=0, le=100)
    activity_training_volume: int | None = Field(None, ge=0, le=100)


class OuraDailyInput(OuraDailyBase):
    pass


class OuraDailyResponse(OuraDailyBase):
    id: int
    created_at: datetime

    class Config:
        from_attributes = True


class OuraBulkResponse(BaseModel):
    inserted: int = Field(..., description="Days written, after collapsing duplicates")
    total: int = Field(..., description="Records received")


class ScoreHistoryPointResponse(BaseModel):
    day: date
    sleep_score: int | None = None
    readiness_score: int | None = None
    activity_score: int | None = None

    class Config:
        from_attributes = True


# --- Workouts ---

class WorkoutCreate(BaseModel):
    date: dt.date | None = Field(None, description="Defaults to today")
    type: WorkoutType
    notes: str = ""


class WorkoutResponse(BaseModel):
    id: int
    date: dt.date
    type: WorkoutType
    notes: str
    created_at: datetime

    class Config:
        from_attributes = True


# --- Goals ---

class HealthGoalInput(BaseModel):
    goal_type: GoalType
    target: int = Field(..., gt=0)
    active: bool = True


class HealthGoalResponse(BaseModel):
    id: int | None = None
    goal_type: GoalType
    target: int
    active: bool

    class Config:
        from_attributes = True


class GoalProgressResponse(BaseModel):
    goal: HealthGoalResponse
    current_value: int
    progress: float = Field(..., ge=0, le=100)
    met: bool
    current_streak: int
    best_streak: int
    weekly_count: int
    last_achieved: date | None = None

    class Config:
        from_attributes = True


class GoalsOverviewResponse(BaseModel):
    goals: list[GoalProgressResponse]
    todays_met: int
    todays_total: int
    weekly_met: int
    weekly_total: int

    class Config:
        from_attributes = True


# --- Insights ---

class CorrelationResponse(BaseModel):
    metric1: str
    metric2: str
    coefficient: float = Field(..., ge=-1, le=1)
    strength: Strength
    direction: Direction
    insight: str
    sample_size: int

    class Config:
        from_attributes = True


class WeekdayPatternResponse(BaseModel):
    day_name: str
    day_number: int = Field(..., ge=0, le=6, description="0=Sunday, 6=Saturday")
    avg_sleep: float
    avg_readiness: float
    avg_activity: float
    avg_steps: float
    sample_size: int

    class Config:
        from_attributes = True


class WeekdayInsightResponse(BaseModel):
    day_name: str
    metric: str
    type: InsightType
    value: float
    avg_all: float
    insight: str

    class Config:
        from_attributes = True


class PersonalRecordResponse(BaseModel):
    type: str
    value: int
    date: dt.date | None = None
    description: str

    class Config:
        from_attributes = True


class StreakResponse(BaseModel):
    type: str
    current_streak: int
    best_streak: int
    last_achieved: date | None = None
    is_active: bool

    class Config:
        from_attributes = True


class HealthInsightsResponse(BaseModel):
    correlations: list[CorrelationResponse]
    weekday_patterns: list[WeekdayPatternResponse]
    weekday_insights: list[WeekdayInsightResponse]
    records: list[PersonalRecordResponse]
    streaks: list[StreakResponse]
    total_days: int
    avg_sleep: float
    avg_readiness: float
    avg_activity: float

    class Config:
        from_attributes = True


# --- Sleep analysis ---

class SleepDebtResponse(BaseModel):
    current_debt: float = Field(..., ge=0)
    debt_trend: DebtTrend
    days_in_debt: int
    last_good_night: date | None = None
    weekly_avg_score: float
    recommended_rest: int = Field(..., ge=0, le=3)

    class Config:
        from_attributes = True


class SleepBreakdownPointResponse(BaseModel):
    day: date
    score: int | None = None
    deep_sleep: int | None = None
    rem_sleep: int | None = None
    efficiency: int | None = None
    latency: int | None = None
    restfulness: int | None = None
    timing: int | None = None
    total_sleep: int | None = None

    class Config:
        from_attributes = True


class SleepTimingPointResponse(BaseModel):
    day: date
    timing_score: int | None = None
    day_of_week: int

    class Config:
        from_attributes = True


class SleepAnalysisResponse(BaseModel):
    breakdown: list[SleepBreakdownPointResponse]
    debt: SleepDebtResponse
    timing: list[SleepTimingPointResponse]
    averages: dict[str, float]
    weekday_timing_avg: dict[str, float]

    class Config:
        from_attributes = True


# --- Dashboard & weekly review ---

class HealthDashboardResponse(BaseModel):
    latest_day: date | None = None
    sleep_score: int | None = None
    readiness_score: int | None = None
    activity_score: int | None = None
    avg_sleep_score_7d: float
    avg_readiness_7d: float
    avg_activity_7d: float

    class Config:
        from_attributes = True


class WeeklySummaryResponse(BaseModel):
    week_start: date
    week_end: date

    avg_sleep: float
    avg_readiness: float
    avg_activity: float
    avg_steps: float
    total_steps: int

    sleep_delta: float
    readiness_delta: float
    activity_delta: float
    steps_delta: float

    goals_met: int
    goals_total: int

    highlights: list[str]
    lowlights: list[str]

    best_sleep_day: date | None = None
    best_sleep_score: int | None = None
    worst_sleep_day: date | None = None
    worst_sleep_score: int | None = None
    best_readiness_day: date | None = None
    best_readiness_score: int | None = None

    workout_count: int
    active_streaks: list[StreakResponse]

    class Config:
        from_attributes = True
