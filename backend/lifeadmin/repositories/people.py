"""
People Repository - Contacts, interactions and special dates.

Builds PersonSnapshot objects (with last contact derived from the
interaction log) and persists recalculated contact streaks.
"""
import logging
from collections import defaultdict
from datetime import date, timedelta

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from lifeadmin.models import Interaction, Person, PersonDate
from lifeadmin.services.relationship_scoring import (
    InteractionRecord,
    PersonSnapshot,
    SpecialDateSnapshot,
    StreakUpdate,
    count_recent_interaction_types,
    update_streak,
)

logger = logging.getLogger(__name__)


def to_snapshot(person: Person, last_contact: date | None) -> PersonSnapshot:
    return PersonSnapshot(
        id=person.id,
        name=person.name,
        nickname=person.nickname or "",
        relationship=person.relationship_type,
        contact_frequency=person.contact_frequency,
        current_streak=person.current_streak or 0,
        longest_streak=person.longest_streak or 0,
        last_contact=last_contact,
        birthday=person.birthday,
        birthday_lunar=bool(person.birthday_lunar),
    )


class PeopleRepository:
    """Data access for contacts."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_person(self, **values) -> Person:
        person = Person(**values)
        self.db.add(person)
        await self.db.commit()
        await self.db.refresh(person)
        logger.info("Person created", extra={"person_id": person.id})
        return person

    async def update_person(self, person: Person, **values) -> Person:
        for key, value in values.items():
            setattr(person, key, value)
        await self.db.commit()
        await self.db.refresh(person)
        logger.info("Person updated", extra={"person_id": person.id})
        return person

    async def delete_person(self, person: Person) -> None:
        """Delete a contact. Load it with_details so interactions and dates cascade."""
        person_id = person.id
        await self.db.delete(person)
        await self.db.commit()
        logger.info("Person deleted", extra={"person_id": person_id})

    async def get_person(self, person_id: int, with_details: bool = False) -> Person | None:
        query = select(Person).where(Person.id == person_id)
        if with_details:
            query = query.options(
                selectinload(Person.interactions),
                selectinload(Person.special_dates),
            ).execution_options(populate_existing=True)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def last_contacts(self) -> dict[int, date]:
        """Most recent interaction date per person."""
        result = await self.db.execute(
            select(Interaction.person_id, func.max(Interaction.date)).group_by(Interaction.person_id)
        )
        return {person_id: last for person_id, last in result.all()}

    async def list_people(self) -> list[tuple[Person, date | None]]:
        result = await self.db.execute(select(Person).order_by(Person.name))
        people = result.scalars().all()
        last = await self.last_contacts()
        return [(p, last.get(p.id)) for p in people]

    async def snapshots(self) -> list[PersonSnapshot]:
        return [to_snapshot(p, last) for p, last in await self.list_people()]

    async def interaction_dates(self, person_id: int) -> list[date]:
        """Interaction dates for one person, newest first."""
        result = await self.db.execute(
            select(Interaction.date)
            .where(Interaction.person_id == person_id)
            .order_by(Interaction.date.desc())
        )
        return list(result.scalars().all())

    async def interactions_since(self, since: date) -> list[InteractionRecord]:
        result = await self.db.execute(
            select(Interaction.person_id, Interaction.date, Interaction.type)
            .where(Interaction.date >= since)
        )
        return [InteractionRecord(person_id=pid, date=d, type=t) for pid, d, t in result.all()]

    async def interaction_type_counts(self, today: date, window_days: int) -> dict[int, int]:
        """Distinct interaction types per person within the variety window."""
        by_person: dict[int, list[InteractionRecord]] = defaultdict(list)
        for record in await self.interactions_since(today - timedelta(days=window_days)):
            by_person[record.person_id].append(record)
        return {
            person_id: count_recent_interaction_types(records, today, window_days)
            for person_id, records in by_person.items()
        }

    async def add_interaction(self, person: Person, **values) -> Interaction:
        interaction = Interaction(person_id=person.id, **values)
        self.db.add(interaction)
        await self.db.commit()
        await self.db.refresh(interaction)
        return interaction

    async def get_interaction(self, person_id: int, interaction_id: int) -> Interaction | None:
        result = await self.db.execute(
            select(Interaction).where(
                Interaction.id == interaction_id,
                Interaction.person_id == person_id,
            )
        )
        return result.scalar_one_or_none()

    async def delete_interaction(self, interaction: Interaction) -> None:
        await self.db.delete(interaction)
        await self.db.commit()

    async def refresh_streak(self, person: Person, today: date) -> StreakUpdate:
        """Recount the contact streak from the interaction log and store it if it moved."""
        last = await self.last_contacts()
        snapshot = to_snapshot(person, last.get(person.id))
        update = update_streak(snapshot, await self.interaction_dates(person.id), today)

        if update.changed:
            person.current_streak = update.current_streak
            person.longest_streak = update.longest_streak
            await self.db.commit()
            await self.db.refresh(person)
            logger.info(
                "Contact streak updated",
                extra={
                    "person_id": person.id,
                    "current_streak": update.current_streak,
                    "longest_streak": update.longest_streak,
                },
            )
        return update

    async def add_special_date(self, person: Person, **values) -> PersonDate:
        special = PersonDate(person_id=person.id, **values)
        self.db.add(special)
        await self.db.commit()
        await self.db.refresh(special)
        return special

    async def list_special_dates(self, person_id: int) -> list[PersonDate]:
        result = await self.db.execute(
            select(PersonDate).where(PersonDate.person_id == person_id).order_by(PersonDate.date)
        )
        return list(result.scalars().all())

    async def get_special_date(self, person_id: int, date_id: int) -> PersonDate | None:
        result = await self.db.execute(
            select(PersonDate).where(
                PersonDate.id == date_id,
                PersonDate.person_id == person_id,
            )
        )
        return result.scalar_one_or_none()

    async def delete_special_date(self, special: PersonDate) -> None:
        await self.db.delete(special)
        await self.db.commit()

    async def special_dates(self) -> list[SpecialDateSnapshot]:
        result = await self.db.execute(
            select(PersonDate, Person.name, Person.nickname).join(Person, PersonDate.person_id == Person.id)
        )
        return [
            SpecialDateSnapshot(
                person_id=special.person_id,
                person_name=name,
                nickname=nickname or "",
                date_type=special.date_type,
                label=special.label or "",
                date=special.date,
                recurring=special.recurring,
            )
            for special, name, nickname in result.all()
        ]
