import datetime as dt
from datetime import date, datetime

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lifeadmin.database import Base


class Person(Base):
    __tablename__ = "people"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(200), index=True, nullable=False)
    nickname: Mapped[str] = mapped_column(String(100), default="")
    relationship_type: Mapped[str] = mapped_column("relationship", String(20), default="friend")

    # Contact details
    email: Mapped[str] = mapped_column(String(255), default="")
    phone: Mapped[str] = mapped_column(String(50), default="")
    location: Mapped[str] = mapped_column(String(200), default="")
    how_met: Mapped[str] = mapped_column(Text, default="")
    notes: Mapped[str] = mapped_column(Text, default="")

    # Birthday (year 1900 or earlier means "year unknown")
    birthday: Mapped[date | None] = mapped_column(Date, nullable=True)
    birthday_lunar: Mapped[bool] = mapped_column(Boolean, default=False)

    # Contact cadence and streaks (maintained after each interaction change)
    contact_frequency: Mapped[str] = mapped_column(String(20), default="monthly")
    current_streak: Mapped[int] = mapped_column(Integer, default=0)
    longest_streak: Mapped[int] = mapped_column(Integer, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Relationships
    interactions = relationship("Interaction", back_populates="person", cascade="all, delete-orphan")
    special_dates = relationship("PersonDate", back_populates="person", cascade="all, delete-orphan")


class Interaction(Base):
    __tablename__ = "interactions"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    person_id: Mapped[int] = mapped_column(ForeignKey("people.id", ondelete="CASCADE"), index=True, nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, index=True, nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False)  # message, call, video, in_person
    notes: Mapped[str] = mapped_column(Text, default="")
    topics: Mapped[str] = mapped_column(Text, default="")

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    person = relationship("Person", back_populates="interactions")


class PersonDate(Base):
    __tablename__ = "person_dates"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    person_id: Mapped[int] = mapped_column(ForeignKey("people.id", ondelete="CASCADE"), index=True, nullable=False)
    date_type: Mapped[str] = mapped_column(String(30), nullable=False)
    label: Mapped[str] = mapped_column(String(200), default="")
    date: Mapped[str] = mapped_column(String(5), nullable=False)  # MM-DD
    recurring: Mapped[bool] = mapped_column(Boolean, default=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    person = relationship("Person", back_populates="special_dates")
