"""
Relationship Scoring - Contact streaks, health scores and who to reach out to.

Works over person snapshots and interaction histories supplied by the
repository layer. Unparseable dates are treated as missing data.
"""
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Optional

from lifeadmin.schemas.enums import (
    FREQUENCY_DAYS,
    ContactFrequency,
    RelationshipType,
    SpecialDateType,
)
from lifeadmin.services.analytics_config import (
    AnalyticsConfig,
    RelationshipConfig,
    get_analytics_config,
)
from lifeadmin.services.dates import (
    anniversary,
    days_between,
    next_occurrence,
    parse_day,
    parse_month_day,
    subtract_months,
)

logger = logging.getLogger(__name__)


@dataclass
class PersonSnapshot:
    """What the scoring engine needs to know about a contact."""
    id: int
    name: str
    contact_frequency: ContactFrequency = ContactFrequency.NONE
    nickname: str = ""
    relationship: RelationshipType = RelationshipType.FRIEND
    current_streak: int = 0
    longest_streak: int = 0
    last_contact: Any = None  # date or YYYY-MM-DD
    birthday: Any = None  # date or YYYY-MM-DD
    birthday_lunar: bool = False


@dataclass
class InteractionRecord:
    person_id: int
    date: Any
    type: str


@dataclass
class StreakUpdate:
    current_streak: int
    longest_streak: int
    changed: bool = False


@dataclass
class OverduePerson:
    id: int
    name: str
    last_contact: str  # YYYY-MM-DD or "never"
    days_overdue: int
    frequency: str
    nickname: str = ""


@dataclass
class UpcomingBirthday:
    id: int
    name: str
    birthday: date
    days_until: int
    turning_age: Optional[int] = None
    nickname: str = ""


@dataclass
class Suggestion:
    id: int
    name: str
    reason: str
    priority: int
    nickname: str = ""


@dataclass
class ReconnectCandidate:
    id: int
    name: str
    last_contact: str  # YYYY-MM-DD or "Never"
    months_ago: int  # -1 when never contacted
    nickname: str = ""


@dataclass
class SpecialDateSnapshot:
    person_id: int
    person_name: str
    date_type: SpecialDateType
    label: str
    date: str  # MM-DD
    recurring: bool = True
    nickname: str = ""


@dataclass
class UpcomingDate:
    person_id: int
    person_name: str
    date_type: SpecialDateType
    label: str
    date: str
    days_until: int
    nickname: str = ""


@dataclass
class PeopleDashboard:
    total_people: int = 0
    overdue_count: int = 0
    upcoming_birthdays: list[UpcomingBirthday] = field(default_factory=list)
    overdue_contacts: list[OverduePerson] = field(default_factory=list)


def frequency_to_days(frequency: ContactFrequency | str) -> int:
    """Expected days between contacts; 0 means no tracking."""
    try:
        return FREQUENCY_DAYS[ContactFrequency(frequency)]
    except ValueError:
        return 0


def update_streak(
    person: PersonSnapshot,
    interaction_dates: Iterable[Any],
    today: date,
) -> StreakUpdate:
    """
    Recount the contact streak from today backwards.

    Each interaction continues the streak while it falls within the
    contact interval of the previously counted date. People without a
    frequency, or without any interactions, keep their stored values.
    """
    unchanged = StreakUpdate(person.current_streak, person.longest_streak)

    freq_days = frequency_to_days(person.contact_frequency)
    if freq_days == 0:
        return unchanged

    dates = sorted(
        (d for d in (parse_day(v) for v in interaction_dates) if d is not None),
        reverse=True,
    )
    if not dates:
        return unchanged

    streak = 0
    last = today
    for d in dates:
        if days_between(d, last) > freq_days:
            break
        streak += 1
        last = d

    longest = max(person.longest_streak, streak)
    changed = streak != person.current_streak or longest != person.longest_streak
    logger.debug(
        "Streak recalculated",
        extra={"person_id": person.id, "current_streak": streak, "longest_streak": longest},
    )
    return StreakUpdate(current_streak=streak, longest_streak=longest, changed=changed)


def count_recent_interaction_types(
    interactions: Iterable[InteractionRecord],
    today: date,
    window_days: Optional[int] = None,
) -> int:
    """Distinct interaction types on or after today - window_days."""
    if window_days is None:
        window_days = get_analytics_config().relationship.variety_window_days

    since = today - timedelta(days=window_days)
    types = set()
    for interaction in interactions:
        day = parse_day(interaction.date)
        if day is not None and day >= since:
            types.add(str(interaction.type))
    return len(types)


def calculate_health_score(
    frequency: ContactFrequency | str,
    last_contact: Any,
    current_streak: int,
    interaction_type_count: int,
    today: date,
    config: Optional[RelationshipConfig] = None,
) -> int:
    """
    Relationship health (0-100) from four capped components:
    frequency compliance (40), recency (30), variety (20), streak (10).
    """
    if config is None:
        config = get_analytics_config().relationship

    freq_days = frequency_to_days(frequency)
    if freq_days == 0:
        return 100

    score = 0
    last = parse_day(last_contact)

    if last is not None:
        days_since = days_between(last, today)

        # Frequency compliance
        if days_since <= freq_days:
            score += config.on_schedule_points
        else:
            overdue_pct = (days_since - freq_days) / freq_days
            for upper, points in config.overdue_bands:
                if overdue_pct < upper:
                    score += points
                    break

        # Recency
        for max_days, points in config.recency_bands:
            if days_since <= max_days:
                score += points
                break

    # Variety
    best_variety = max(config.variety_points)
    if interaction_type_count >= best_variety:
        score += config.variety_points[best_variety]
    else:
        score += config.variety_points.get(interaction_type_count, 0)

    # Streak bonus
    for min_streak, points in config.streak_bands:
        if current_streak >= min_streak:
            score += points
            break

    return max(0, min(100, score))


def _days_overdue(person: PersonSnapshot, today: date) -> Optional[int]:
    """
    Days past the contact interval, None if not overdue or untracked.

    Never-contacted people count as one day past the interval; a malformed
    last-contact value excludes the person.
    """
    freq_days = frequency_to_days(person.contact_frequency)
    if freq_days == 0:
        return None

    if person.last_contact is None:
        return freq_days + 1

    last = parse_day(person.last_contact)
    if last is None:
        return None

    days_since = days_between(last, today)
    if days_since <= freq_days:
        return None
    return days_since - freq_days


def calculate_overdue(people: Iterable[PersonSnapshot], today: date) -> list[OverduePerson]:
    """People past their contact interval, never-contacted first, then oldest contact."""
    overdue = []
    for person in people:
        days_overdue = _days_overdue(person, today)
        if days_overdue is None:
            continue

        last = parse_day(person.last_contact)
        overdue.append(OverduePerson(
            id=person.id,
            name=person.name,
            nickname=person.nickname,
            last_contact=last.isoformat() if last else "never",
            days_overdue=days_overdue,
            frequency=ContactFrequency(person.contact_frequency).value,
        ))

    overdue.sort(key=lambda p: (p.last_contact != "never", p.last_contact))
    return overdue


def calculate_birthdays(
    people: Iterable[PersonSnapshot],
    today: date,
    horizon_days: Optional[int] = None,
    config: Optional[RelationshipConfig] = None,
) -> list[UpcomingBirthday]:
    """Non-lunar birthdays falling within the horizon, soonest first."""
    if config is None:
        config = get_analytics_config().relationship
    if horizon_days is None:
        horizon_days = config.birthday_horizon_days

    upcoming = []
    for person in people:
        if person.birthday_lunar:
            continue
        birthday = parse_day(person.birthday)
        if birthday is None:
            continue

        occurrence = next_occurrence(birthday.month, birthday.day, today)
        days_until = days_between(today, occurrence)
        if days_until > horizon_days:
            continue

        turning_age = None
        if birthday.year > config.unknown_birth_year:
            turning_age = occurrence.year - birthday.year

        upcoming.append(UpcomingBirthday(
            id=person.id,
            name=person.name,
            nickname=person.nickname,
            birthday=birthday,
            days_until=days_until,
            turning_age=turning_age,
        ))

    upcoming.sort(key=lambda b: (b.days_until, b.name))
    return upcoming


def calculate_suggestions(
    people: Iterable[PersonSnapshot],
    today: date,
    config: Optional[RelationshipConfig] = None,
) -> list[Suggestion]:
    """
    Rank people to contact by overdue days, streaks about to break and
    birthdays in the coming week. Returns the top entries only.
    """
    if config is None:
        config = get_analytics_config().relationship

    suggestions = []
    for person in people:
        freq_days = frequency_to_days(person.contact_frequency)
        if freq_days == 0:
            continue

        priority = 0
        reasons = []
        last = parse_day(person.last_contact)

        if person.last_contact is None:
            priority += freq_days * config.overdue_weight
            reasons.append("Never contacted")
        elif last is not None:
            days_since = days_between(last, today)
            if days_since > freq_days:
                overdue = days_since - freq_days
                priority += overdue * config.overdue_weight
                reasons.append(f"Overdue by {overdue} days")

            if person.current_streak > 0 and freq_days - config.streak_risk_window <= days_since <= freq_days:
                priority += config.streak_risk_points
                reasons.append("🔥 Streak at risk")

        birthday = None if person.birthday_lunar else parse_day(person.birthday)
        if birthday is not None:
            days_until = days_between(today, next_occurrence(birthday.month, birthday.day, today))
            if days_until <= config.birthday_window:
                priority += (config.birthday_window - days_until) * config.birthday_weight
                if days_until == 0:
                    reasons.append("🎂 Birthday today!")
                else:
                    reasons.append(f"🎂 Birthday in {days_until} days")

        if priority > 0:
            suggestions.append(Suggestion(
                id=person.id,
                name=person.name,
                nickname=person.nickname,
                reason="; ".join(reasons),
                priority=priority,
            ))

    suggestions.sort(key=lambda s: (-s.priority, s.name))
    return suggestions[:config.max_suggestions]


def calculate_reconnect(
    people: Iterable[PersonSnapshot],
    today: date,
    config: Optional[RelationshipConfig] = None,
) -> list[ReconnectCandidate]:
    """Untracked contacts and acquaintances not heard from in months."""
    if config is None:
        config = get_analytics_config().relationship

    cutoff = subtract_months(today, config.reconnect_months)
    candidates = []
    for person in people:
        untracked = frequency_to_days(person.contact_frequency) == 0
        if not untracked and person.relationship != RelationshipType.ACQUAINTANCE:
            continue

        if person.last_contact is None:
            candidates.append(ReconnectCandidate(
                id=person.id,
                name=person.name,
                nickname=person.nickname,
                last_contact="Never",
                months_ago=-1,
            ))
            continue

        last = parse_day(person.last_contact)
        if last is None or last >= cutoff:
            continue
        candidates.append(ReconnectCandidate(
            id=person.id,
            name=person.name,
            nickname=person.nickname,
            last_contact=last.isoformat(),
            months_ago=days_between(last, today) // 30,
        ))

    candidates.sort(key=lambda c: (c.months_ago != -1, -c.months_ago))
    return candidates


def calculate_upcoming_dates(
    special_dates: Iterable[SpecialDateSnapshot],
    today: date,
    horizon_days: Optional[int] = None,
) -> list[UpcomingDate]:
    """Recurring MM-DD dates whose next occurrence falls within the horizon."""
    if horizon_days is None:
        horizon_days = get_analytics_config().relationship.birthday_horizon_days

    upcoming = []
    for special in special_dates:
        if not special.recurring:
            continue
        parsed = parse_month_day(special.date)
        if parsed is None:
            logger.debug("Skipping malformed special date", extra={"date": special.date})
            continue

        days_until = days_between(today, next_occurrence(parsed[0], parsed[1], today))
        if days_until > horizon_days:
            continue
        upcoming.append(UpcomingDate(
            person_id=special.person_id,
            person_name=special.person_name,
            nickname=special.nickname,
            date_type=special.date_type,
            label=special.label,
            date=special.date,
            days_until=days_until,
        ))

    upcoming.sort(key=lambda d: d.days_until)
    return upcoming


def lunar_to_gregorian(
    lunar_date: Any,
    year: int,
    config: Optional[RelationshipConfig] = None,
) -> Optional[date]:
    """
    Rough Gregorian date for a lunar birthday in the given year.

    This is a fixed-offset approximation, not a lunisolar calendar
    conversion; results can be off by several weeks.
    """
    if config is None:
        config = get_analytics_config().relationship

    lunar = parse_day(lunar_date)
    if lunar is None:
        return None
    return anniversary(year, lunar.month, lunar.day) + timedelta(days=config.lunar_offset_days)


def build_people_dashboard(
    people: Iterable[PersonSnapshot],
    today: date,
    config: Optional[AnalyticsConfig] = None,
) -> PeopleDashboard:
    if config is None:
        config = get_analytics_config()

    people = list(people)
    overdue = calculate_overdue(people, today)
    return PeopleDashboard(
        total_people=len(people),
        overdue_count=len(overdue),
        overdue_contacts=overdue,
        upcoming_birthdays=calculate_birthdays(people, today, config=config.relationship),
    )
