"""Calendar helpers for day-granularity arithmetic."""
import calendar
import logging
from datetime import date, datetime, timedelta
from typing import Optional

logger = logging.getLogger(__name__)

# Index matches sunday_index(): 0=Sunday .. 6=Saturday
DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


def parse_day(value) -> Optional[date]:
    """
    Coerce a date, datetime or YYYY-MM-DD string to a date.

    Anything unparseable yields None so callers can skip the record.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            logger.debug("Skipping malformed date", extra={"value": value})
            return None
    return None


def parse_month_day(value: str) -> Optional[tuple[int, int]]:
    """Parse a recurring MM-DD string into (month, day)."""
    if not isinstance(value, str):
        return None
    parts = value.strip().split("-")
    if len(parts) != 2:
        return None
    try:
        month, day = int(parts[0]), int(parts[1])
    except ValueError:
        return None
    if not 1 <= month <= 12 or not 1 <= day <= 31:
        return None
    if day > calendar.monthrange(2000, month)[1]:
        return None
    return month, day


def days_between(earlier: date, later: date) -> int:
    return (later - earlier).days


def sunday_index(day: date) -> int:
    """Day of week with 0=Sunday .. 6=Saturday."""
    return (day.weekday() + 1) % 7


def monday_of(day: date) -> date:
    """Start of the Monday-based week containing day."""
    return day - timedelta(days=day.weekday())


def anniversary(year: int, month: int, day: int) -> date:
    """Occurrence of month/day in year; Feb 29 rolls to Mar 1 in common years."""
    try:
        return date(year, month, day)
    except ValueError:
        return date(year, month, 1) + timedelta(days=day - 1)


def next_occurrence(month: int, day: int, today: date) -> date:
    """This year's occurrence, or next year's if it has already passed."""
    occurrence = anniversary(today.year, month, day)
    if occurrence < today:
        occurrence = anniversary(today.year + 1, month, day)
    return occurrence


def subtract_months(day: date, months: int) -> date:
    """Same day-of-month `months` earlier, clamped to the target month's length."""
    total = day.year * 12 + (day.month - 1) - months
    year, month = divmod(total, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))
