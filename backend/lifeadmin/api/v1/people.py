import logging
from datetime import date

from fastapi import APIRouter, HTTPException, Query, status

from lifeadmin.api.deps import Analytics, DbSession, Today
from lifeadmin.models import Person
from lifeadmin.repositories.people import PeopleRepository, to_snapshot
from lifeadmin.schemas.people import (
    InteractionCreate,
    InteractionLoggedResponse,
    InteractionResponse,
    OverduePersonResponse,
    PeopleDashboardResponse,
    PersonCreate,
    PersonDateCreate,
    PersonDateResponse,
    PersonDetailResponse,
    PersonResponse,
    PersonUpdate,
    ReconnectCandidateResponse,
    StreakUpdateResponse,
    SuggestionResponse,
    UpcomingBirthdayResponse,
    UpcomingDateResponse,
)
from lifeadmin.services.analytics_config import AnalyticsConfig
from lifeadmin.services.relationship_scoring import (
    build_people_dashboard,
    calculate_birthdays,
    calculate_health_score,
    calculate_overdue,
    calculate_reconnect,
    calculate_suggestions,
    calculate_upcoming_dates,
    lunar_to_gregorian,
)

logger = logging.getLogger(__name__)
router = APIRouter()


def _derived_fields(
    person: Person,
    last_contact: date | None,
    type_count: int,
    today: date,
    config: AnalyticsConfig,
) -> dict:
    """Values computed at read time rather than stored on the row."""
    snapshot = to_snapshot(person, last_contact)
    overdue = calculate_overdue([snapshot], today)

    birthday_gregorian = None
    if person.birthday_lunar and person.birthday:
        birthday_gregorian = lunar_to_gregorian(person.birthday, today.year, config.relationship)

    return {
        "last_contact": last_contact,
        "days_overdue": overdue[0].days_overdue if overdue else 0,
        "health_score": calculate_health_score(
            person.contact_frequency,
            last_contact,
            person.current_streak or 0,
            type_count,
            today,
            config.relationship,
        ),
        "birthday_gregorian": birthday_gregorian,
    }


def _person_values(person_in: PersonCreate | PersonUpdate) -> dict:
    values = person_in.model_dump()
    values["relationship_type"] = person_in.relationship_type.value
    values["contact_frequency"] = person_in.contact_frequency.value
    return values


async def _get_person_or_404(repo: PeopleRepository, person_id: int, with_details: bool = False) -> Person:
    person = await repo.get_person(person_id, with_details=with_details)
    if not person:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Person not found",
        )
    return person


@router.post("", response_model=PersonResponse, status_code=status.HTTP_201_CREATED)
async def create_person(
    person_in: PersonCreate,
    db: DbSession,
    today: Today,
    config: Analytics,
) -> PersonResponse:
    """Add a contact."""
    person = await PeopleRepository(db).create_person(**_person_values(person_in))
    return PersonResponse.model_validate(person).model_copy(
        update=_derived_fields(person, None, 0, today, config)
    )


@router.get("", response_model=list[PersonResponse])
async def list_people(db: DbSession, today: Today, config: Analytics) -> list[PersonResponse]:
    """All contacts with their relationship health."""
    repo = PeopleRepository(db)
    type_counts = await repo.interaction_type_counts(today, config.relationship.variety_window_days)

    return [
        PersonResponse.model_validate(person).model_copy(
            update=_derived_fields(person, last_contact, type_counts.get(person.id, 0), today, config)
        )
        for person, last_contact in await repo.list_people()
    ]


@router.get("/overdue", response_model=list[OverduePersonResponse])
async def get_overdue(db: DbSession, today: Today) -> list[OverduePersonResponse]:
    """Contacts past their contact interval."""
    people = await PeopleRepository(db).snapshots()
    return [OverduePersonResponse.model_validate(p) for p in calculate_overdue(people, today)]


@router.get("/birthdays", response_model=list[UpcomingBirthdayResponse])
async def get_birthdays(
    db: DbSession,
    today: Today,
    config: Analytics,
    days: int = Query(30, ge=1, le=366),
) -> list[UpcomingBirthdayResponse]:
    """Birthdays within the next `days` days."""
    people = await PeopleRepository(db).snapshots()
    return [
        UpcomingBirthdayResponse.model_validate(b)
        for b in calculate_birthdays(people, today, horizon_days=days, config=config.relationship)
    ]


@router.get("/suggestions", response_model=list[SuggestionResponse])
async def get_suggestions(db: DbSession, today: Today, config: Analytics) -> list[SuggestionResponse]:
    """Who to reach out to next, highest priority first."""
    people = await PeopleRepository(db).snapshots()
    suggestions = calculate_suggestions(people, today, config.relationship)
    logger.info("Contact suggestions generated", extra={"people": len(people), "suggestions": len(suggestions)})
    return [SuggestionResponse.model_validate(s) for s in suggestions]


@router.get("/reconnect", response_model=list[ReconnectCandidateResponse])
async def get_reconnect(db: DbSession, today: Today, config: Analytics) -> list[ReconnectCandidateResponse]:
    """Untracked contacts and acquaintances gone quiet for months."""
    people = await PeopleRepository(db).snapshots()
    return [ReconnectCandidateResponse.model_validate(c) for c in calculate_reconnect(people, today, config.relationship)]


@router.get("/upcoming-dates", response_model=list[UpcomingDateResponse])
async def get_upcoming_dates(
    db: DbSession,
    today: Today,
    days: int = Query(30, ge=1, le=366),
) -> list[UpcomingDateResponse]:
    """Anniversaries and other recurring dates coming up."""
    special_dates = await PeopleRepository(db).special_dates()
    return [
        UpcomingDateResponse.model_validate(d)
        for d in calculate_upcoming_dates(special_dates, today, horizon_days=days)
    ]


@router.get("/dashboard", response_model=PeopleDashboardResponse)
async def get_dashboard(db: DbSession, today: Today, config: Analytics) -> PeopleDashboardResponse:
    people = await PeopleRepository(db).snapshots()
    return PeopleDashboardResponse.model_validate(build_people_dashboard(people, today, config))


@router.get("/{person_id}", response_model=PersonDetailResponse)
async def get_person(person_id: int, db: DbSession, today: Today, config: Analytics) -> PersonDetailResponse:
    """A contact with their interaction log and special dates."""
    repo = PeopleRepository(db)
    person = await _get_person_or_404(repo, person_id, with_details=True)

    last_contact = max((i.date for i in person.interactions), default=None)
    type_counts = await repo.interaction_type_counts(today, config.relationship.variety_window_days)

    response = PersonDetailResponse.model_validate(person)
    response.interactions.sort(key=lambda i: i.date, reverse=True)
    return response.model_copy(
        update=_derived_fields(person, last_contact, type_counts.get(person.id, 0), today, config)
    )


@router.put("/{person_id}", response_model=PersonResponse)
async def update_person(
    person_id: int,
    person_in: PersonUpdate,
    db: DbSession,
    today: Today,
    config: Analytics,
) -> PersonResponse:
    """Replace a contact's details. Changing the cadence recounts the streak."""
    repo = PeopleRepository(db)
    person = await _get_person_or_404(repo, person_id)
    frequency_changed = person.contact_frequency != person_in.contact_frequency.value

    person = await repo.update_person(person, **_person_values(person_in))
    if frequency_changed:
        await repo.refresh_streak(person, today)

    last_contact = (await repo.last_contacts()).get(person.id)
    type_counts = await repo.interaction_type_counts(today, config.relationship.variety_window_days)
    return PersonResponse.model_validate(person).model_copy(
        update=_derived_fields(person, last_contact, type_counts.get(person.id, 0), today, config)
    )


@router.delete("/{person_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_person(person_id: int, db: DbSession) -> None:
    """Remove a contact along with their interactions and special dates."""
    repo = PeopleRepository(db)
    person = await _get_person_or_404(repo, person_id, with_details=True)
    await repo.delete_person(person)


@router.post(
    "/{person_id}/interactions",
    response_model=InteractionLoggedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def log_interaction(
    person_id: int,
    interaction_in: InteractionCreate,
    db: DbSession,
    today: Today,
) -> InteractionLoggedResponse:
    """Record a contact and recount the person's streak."""
    repo = PeopleRepository(db)
    person = await _get_person_or_404(repo, person_id)

    interaction = await repo.add_interaction(
        person,
        date=interaction_in.date or today,
        type=interaction_in.type.value,
        notes=interaction_in.notes,
        topics=interaction_in.topics,
    )
    streak = await repo.refresh_streak(person, today)

    return InteractionLoggedResponse(
        interaction=InteractionResponse.model_validate(interaction),
        streak=StreakUpdateResponse.model_validate(streak),
    )


@router.delete("/{person_id}/interactions/{interaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_interaction(
    person_id: int,
    interaction_id: int,
    db: DbSession,
    today: Today,
) -> None:
    """Remove an interaction and recount the person's streak."""
    repo = PeopleRepository(db)
    person = await _get_person_or_404(repo, person_id)

    interaction = await repo.get_interaction(person_id, interaction_id)
    if not interaction:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Interaction not found",
        )

    await repo.delete_interaction(interaction)
    await repo.refresh_streak(person, today)


@router.post("/{person_id}/dates", response_model=PersonDateResponse, status_code=status.HTTP_201_CREATED)
async def add_special_date(
    person_id: int,
    date_in: PersonDateCreate,
    db: DbSession,
) -> PersonDateResponse:
    """Attach a recurring MM-DD date (anniversary, memorial, ...) to a contact."""
    repo = PeopleRepository(db)
    person = await _get_person_or_404(repo, person_id)

    special = await repo.add_special_date(
        person,
        date_type=date_in.date_type.value,
        label=date_in.label,
        date=date_in.date,
        recurring=date_in.recurring,
    )
    return PersonDateResponse.model_validate(special)


@router.get("/{person_id}/dates", response_model=list[PersonDateResponse])
async def list_special_dates(person_id: int, db: DbSession) -> list[PersonDateResponse]:
    repo = PeopleRepository(db)
    await _get_person_or_404(repo, person_id)
    return [PersonDateResponse.model_validate(d) for d in await repo.list_special_dates(person_id)]


@router.delete("/{person_id}/dates/{date_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_special_date(person_id: int, date_id: int, db: DbSession) -> None:
    repo = PeopleRepository(db)
    await _get_person_or_404(repo, person_id)

    special = await repo.get_special_date(person_id, date_id)
    if not special:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Date not found",
        )
    await repo.delete_special_date(special)
