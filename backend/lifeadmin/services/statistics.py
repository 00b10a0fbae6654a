"""
Statistics primitives shared by the health and relationship engines.

Every aggregate here works over optional samples: ``None`` means "no data"
and is excluded from the denominator, never treated as zero.
"""
import math
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from statistics import mean
from typing import Optional, TypeVar

from lifeadmin.schemas.enums import Direction, Strength
from lifeadmin.services.analytics_config import CorrelationConfig, get_analytics_config

T = TypeVar("T")


def pearson_correlation(x: Sequence[float], y: Sequence[float]) -> float:
    """
    Pearson correlation coefficient of two paired series.

    Returns 0.0 for mismatched lengths, fewer than two points, or a
    zero-variance series.
    """
    n = len(x)
    if n != len(y) or n < 2:
        return 0.0

    sum_x = sum(x)
    sum_y = sum(y)
    sum_xy = sum(a * b for a, b in zip(x, y))
    sum_x2 = sum(a * a for a in x)
    sum_y2 = sum(b * b for b in y)

    numerator = n * sum_xy - sum_x * sum_y
    denominator = (n * sum_x2 - sum_x * sum_x) * (n * sum_y2 - sum_y * sum_y)
    if denominator <= 0:
        return 0.0

    r = numerator / math.sqrt(denominator)
    # Floating point noise can push a perfect correlation past +/-1
    return max(-1.0, min(1.0, r))


def classify_strength(r: float, config: Optional[CorrelationConfig] = None) -> Strength:
    """Bucket |r| into none/weak/moderate/strong."""
    if config is None:
        config = get_analytics_config().correlation

    magnitude = abs(r)
    if magnitude >= config.strong_threshold:
        return Strength.STRONG
    elif magnitude >= config.moderate_threshold:
        return Strength.MODERATE
    elif magnitude >= config.weak_threshold:
        return Strength.WEAK
    return Strength.NONE


def classify_direction(r: float, config: Optional[CorrelationConfig] = None) -> Direction:
    if config is None:
        config = get_analytics_config().correlation

    if r >= config.direction_threshold:
        return Direction.POSITIVE
    elif r <= -config.direction_threshold:
        return Direction.NEGATIVE
    return Direction.NEUTRAL


@dataclass
class StreakRun:
    """Result of a streak scan."""
    current: int = 0
    best: int = 0
    last_achieved: Optional[date] = None

    @property
    def is_active(self) -> bool:
        return self.current > 0


def longest_and_current_streak(
    samples: Sequence[T],
    predicate: Callable[[T], bool],
    day_of: Callable[[T], Optional[date]],
) -> StreakRun:
    """
    Scan samples ordered oldest to newest.

    ``best`` is the longest qualifying run anywhere in the window and
    ``current`` the run ending at the newest sample (0 if it fails).
    ``last_achieved`` is the last qualifying day in the whole window, even
    when that day is not part of the current run.
    """
    result = StreakRun()
    running = 0

    for sample in samples:
        if predicate(sample):
            running += 1
            result.best = max(result.best, running)
            result.last_achieved = day_of(sample)
        else:
            running = 0

    for sample in reversed(samples):
        if not predicate(sample):
            break
        result.current += 1

    return result


def present(values: Iterable[Optional[float]]) -> list[float]:
    """Drop missing values."""
    return [v for v in values if v is not None]


def mean_of(values: Iterable[Optional[float]]) -> Optional[float]:
    """Mean of the non-None values, or None when there are none."""
    filtered = present(values)
    if not filtered:
        return None
    return float(mean(filtered))


def min_of(values: Iterable[Optional[float]]) -> Optional[float]:
    filtered = present(values)
    return min(filtered) if filtered else None


def max_of(values: Iterable[Optional[float]]) -> Optional[float]:
    filtered = present(values)
    return max(filtered) if filtered else None


class RunningAverage:
    """Accumulates a mean over optional samples, counting only present ones."""

    def __init__(self) -> None:
        self.total = 0.0
        self.count = 0

    def add(self, value: Optional[float]) -> None:
        if value is None:
            return
        self.total += value
        self.count += 1

    @property
    def value(self) -> float:
        """Mean of the added values, 0.0 when nothing was added."""
        if self.count == 0:
            return 0.0
        return self.total / self.count
