"""
Analytics Configuration - Thresholds used by the insight and scoring engines.

The defaults below are the behavioural contract. A YAML file may override
individual keys for tuning without code changes.
"""
from dataclasses import dataclass, field
from typing import Optional

import yaml
from pathlib import Path


@dataclass
class CorrelationConfig:
    """Correlation strength/direction bands and minimum sample sizes."""
    # |r| band lower bounds
    weak_threshold: float = 0.2
    moderate_threshold: float = 0.4
    strong_threshold: float = 0.7

    # r >= +direction_threshold is positive, r <= -direction_threshold negative
    direction_threshold: float = 0.1

    # Paired samples required before a correlation is reported
    min_paired_samples: int = 7

    # Workout vs. rest-day comparison
    min_group_size: int = 3
    difference_scale: float = 10.0
    notable_difference: float = 3.0
    slight_difference: float = 2.0


@dataclass
class StreakConfig:
    """Daily streak thresholds."""
    sleep_threshold: int = 80
    readiness_threshold: int = 80
    steps_threshold: int = 10000


@dataclass
class WeekdayConfig:
    """Weekday pattern mining."""
    min_sample_size: int = 2


@dataclass
class SleepDebtConfig:
    """Sleep debt accrual/decay model."""
    threshold: int = 75
    points_per_unit: float = 10.0
    trend_delta: float = 5.0
    weekly_window: int = 7

    # recommended_rest steps: debt > value -> rest nights
    rest_steps: list[tuple[float, int]] = field(
        default_factory=lambda: [(30.0, 3), (20.0, 2), (10.0, 1)]
    )


@dataclass
class WeeklySummaryConfig:
    """Week-over-week highlight detection."""
    highlight_delta: float = 5.0


@dataclass
class RelationshipConfig:
    """Relationship health score, overdue and suggestion weights."""
    # Frequency compliance (max 40)
    on_schedule_points: int = 40
    overdue_bands: list[tuple[float, int]] = field(
        default_factory=lambda: [(0.5, 30), (1.0, 20), (2.0, 10)]
    )

    # Recency (max 30)
    recency_bands: list[tuple[int, int]] = field(
        default_factory=lambda: [(7, 30), (14, 20), (30, 10)]
    )

    # Variety (max 20): distinct interaction types in the trailing window
    variety_window_days: int = 90
    variety_points: dict[int, int] = field(
        default_factory=lambda: {3: 20, 2: 15, 1: 10}
    )

    # Streak bonus (max 10)
    streak_bands: list[tuple[int, int]] = field(
        default_factory=lambda: [(5, 10), (3, 7), (1, 5)]
    )

    # Suggestions
    overdue_weight: int = 3
    streak_risk_window: int = 2
    streak_risk_points: int = 20
    birthday_window: int = 7
    birthday_weight: int = 4
    max_suggestions: int = 10

    # Birthdays / special dates
    birthday_horizon_days: int = 30
    unknown_birth_year: int = 1900
    lunar_offset_days: int = 30

    # Reconnect
    reconnect_months: int = 6


@dataclass
class AnalyticsConfig:
    """Master configuration for all analytics parameters."""
    correlation: CorrelationConfig = field(default_factory=CorrelationConfig)
    streaks: StreakConfig = field(default_factory=StreakConfig)
    weekday: WeekdayConfig = field(default_factory=WeekdayConfig)
    sleep_debt: SleepDebtConfig = field(default_factory=SleepDebtConfig)
    weekly_summary: WeeklySummaryConfig = field(default_factory=WeeklySummaryConfig)
    relationship: RelationshipConfig = field(default_factory=RelationshipConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "AnalyticsConfig":
        """Load configuration from a YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}

        config = cls()

        if "correlation" in data:
            config.correlation = CorrelationConfig(**data["correlation"])
        if "streaks" in data:
            config.streaks = StreakConfig(**data["streaks"])
        if "weekday" in data:
            config.weekday = WeekdayConfig(**data["weekday"])
        if "sleep_debt" in data:
            sleep_debt = dict(data["sleep_debt"])
            if "rest_steps" in sleep_debt:
                sleep_debt["rest_steps"] = [tuple(step) for step in sleep_debt["rest_steps"]]
            config.sleep_debt = SleepDebtConfig(**sleep_debt)
        if "weekly_summary" in data:
            config.weekly_summary = WeeklySummaryConfig(**data["weekly_summary"])
        if "relationship" in data:
            relationship = dict(data["relationship"])
            for key in ("overdue_bands", "recency_bands", "streak_bands"):
                if key in relationship:
                    relationship[key] = [tuple(band) for band in relationship[key]]
            config.relationship = RelationshipConfig(**relationship)

        return config

    def to_dict(self) -> dict:
        """Convert configuration to dictionary."""
        return {
            "correlation": self.correlation.__dict__,
            "streaks": self.streaks.__dict__,
            "weekday": self.weekday.__dict__,
            "sleep_debt": self.sleep_debt.__dict__,
            "weekly_summary": self.weekly_summary.__dict__,
            "relationship": self.relationship.__dict__,
        }


# Global default configuration instance
_default_config: Optional[AnalyticsConfig] = None


def get_analytics_config() -> AnalyticsConfig:
    """Get the current analytics configuration (singleton pattern)."""
    global _default_config
    if _default_config is None:
        _default_config = AnalyticsConfig()
    return _default_config


def set_analytics_config(config: AnalyticsConfig) -> None:
    """Set a custom analytics configuration."""
    global _default_config
    _default_config = config


def load_analytics_config_from_yaml(path: str | Path) -> AnalyticsConfig:
    """Load and set analytics configuration from YAML file."""
    config = AnalyticsConfig.from_yaml(path)
    set_analytics_config(config)
    return config
