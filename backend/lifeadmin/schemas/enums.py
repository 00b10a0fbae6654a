from enum import Enum


class Strength(str, Enum):
    NONE = "none"
    WEAK = "weak"
    MODERATE = "moderate"
    STRONG = "strong"


class Direction(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class DebtTrend(str, Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class InsightType(str, Enum):
    BEST = "best"
    WORST = "worst"


class GoalType(str, Enum):
    STEP_GOAL = "step_goal"
    SLEEP_SCORE = "sleep_score"
    READINESS_SCORE = "readiness_score"
    WORKOUT_FREQUENCY = "workout_frequency"


class WorkoutType(str, Enum):
    STRENGTH = "strength"
    CARDIO = "cardio"
    OTHER = "other"


class ContactFrequency(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"
    NONE = "none"


class RelationshipType(str, Enum):
    FRIEND = "friend"
    FAMILY = "family"
    COLLEAGUE = "colleague"
    ACQUAINTANCE = "acquaintance"


class InteractionType(str, Enum):
    MESSAGE = "message"
    CALL = "call"
    VIDEO = "video"
    IN_PERSON = "in_person"


class SpecialDateType(str, Enum):
    ANNIVERSARY = "anniversary"
    CHILD_BIRTHDAY = "child_birthday"
    MEMORIAL = "memorial"
    CUSTOM = "custom"


# Contact frequency to expected days between contacts (0 disables tracking)
FREQUENCY_DAYS: dict[ContactFrequency, int] = {
    ContactFrequency.WEEKLY: 7,
    ContactFrequency.MONTHLY: 30,
    ContactFrequency.QUARTERLY: 90,
    ContactFrequency.YEARLY: 365,
    ContactFrequency.NONE: 0,
}

# Goals evaluated per day (as opposed to per week)
DAILY_GOAL_TYPES: list[GoalType] = [
    GoalType.STEP_GOAL,
    GoalType.SLEEP_SCORE,
    GoalType.READINESS_SCORE,
]
