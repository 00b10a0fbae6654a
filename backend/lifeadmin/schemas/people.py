import datetime as dt
from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator

from lifeadmin.schemas.enums import (
    ContactFrequency,
    InteractionType,
    RelationshipType,
    SpecialDateType,
)
from lifeadmin.services.dates import parse_month_day


# --- People ---

class PersonBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    nickname: str = ""
    relationship_type: RelationshipType = RelationshipType.FRIEND
    email: str = ""
    phone: str = ""
    location: str = ""
    how_met: str = ""
    notes: str = ""
    birthday: date | None = Field(None, description="Year 1900 or earlier means unknown year")
    birthday_lunar: bool = False
    contact_frequency: ContactFrequency = ContactFrequency.MONTHLY


class PersonCreate(PersonBase):
    pass


class PersonUpdate(PersonBase):
    pass


class PersonResponse(PersonBase):
    id: int
    current_streak: int
    longest_streak: int
    created_at: datetime

    # Derived at read time
    last_contact: date | None = None
    days_overdue: int = 0
    health_score: int = Field(100, ge=0, le=100)
    birthday_gregorian: date | None = Field(None, description="Approximate date of a lunar birthday this year")

    class Config:
        from_attributes = True


# --- Interactions ---

class InteractionCreate(BaseModel):
    date: dt.date | None = Field(None, description="Defaults to today")
    type: InteractionType
    notes: str = ""
    topics: str = ""


class InteractionResponse(BaseModel):
    id: int
    person_id: int
    date: dt.date
    type: InteractionType
    notes: str
    topics: str
    created_at: datetime

    class Config:
        from_attributes = True


# --- Special dates ---

class PersonDateCreate(BaseModel):
    date_type: SpecialDateType
    label: str = ""
    date: str = Field(..., description="Recurring date as MM-DD")
    recurring: bool = True

    @field_validator("date")
    @classmethod
    def validate_month_day(cls, v: str) -> str:
        parsed = parse_month_day(v)
        if parsed is None:
            raise ValueError("date must be a valid MM-DD value")
        return f"{parsed[0]:02d}-{parsed[1]:02d}"


class PersonDateResponse(BaseModel):
    id: int
    person_id: int
    date_type: SpecialDateType
    label: str
    date: str
    recurring: bool

    class Config:
        from_attributes = True


class PersonDetailResponse(PersonResponse):
    interactions: list[InteractionResponse] = []
    special_dates: list[PersonDateResponse] = []


# --- Engine output ---

class StreakUpdateResponse(BaseModel):
    current_streak: int
    longest_streak: int

    class Config:
        from_attributes = True


class InteractionLoggedResponse(BaseModel):
    interaction: InteractionResponse
    streak: StreakUpdateResponse


class OverduePersonResponse(BaseModel):
    id: int
    name: str
    nickname: str
    last_contact: str = Field(..., description="YYYY-MM-DD or 'never'")
    days_overdue: int
    frequency: str

    class Config:
        from_attributes = True


class UpcomingBirthdayResponse(BaseModel):
    id: int
    name: str
    nickname: str
    birthday: date
    days_until: int
    turning_age: int | None = None

    class Config:
        from_attributes = True


class SuggestionResponse(BaseModel):
    id: int
    name: str
    nickname: str
    reason: str
    priority: int

    class Config:
        from_attributes = True


class ReconnectCandidateResponse(BaseModel):
    id: int
    name: str
    nickname: str
    last_contact: str = Field(..., description="YYYY-MM-DD or 'Never'")
    months_ago: int = Field(..., description="-1 when never contacted")

    class Config:
        from_attributes = True


class UpcomingDateResponse(BaseModel):
    person_id: int
    person_name: str
    nickname: str
    date_type: SpecialDateType
    label: str
    date: str
    days_until: int

    class Config:
        from_attributes = True


class PeopleDashboardResponse(BaseModel):
    total_people: int
    overdue_count: int
    upcoming_birthdays: list[UpcomingBirthdayResponse]
    overdue_contacts: list[OverduePersonResponse]

    class Config:
        from_attributes = True
