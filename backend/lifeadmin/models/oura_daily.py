from datetime import date, datetime

from sqlalchemy import Date, DateTime, Float, Integer
from sqlalchemy.orm import Mapped, mapped_column

from lifeadmin.database import Base


class OuraDaily(Base):
    __tablename__ = "oura_daily"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    day: Mapped[date] = mapped_column(Date, unique=True, index=True, nullable=False)

    # Sleep metrics
    sleep_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    sleep_deep_sleep: Mapped[int | None] = mapped_column(Integer, nullable=True)
    sleep_efficiency: Mapped[int | None] = mapped_column(Integer, nullable=True)
    sleep_latency: Mapped[int | None] = mapped_column(Integer, nullable=True)
    sleep_rem_sleep: Mapped[int | None] = mapped_column(Integer, nullable=True)
    sleep_restfulness: Mapped[int | None] = mapped_column(Integer, nullable=True)
    sleep_timing: Mapped[int | None] = mapped_column(Integer, nullable=True)
    sleep_total_sleep: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Readiness metrics
    readiness_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    readiness_activity_balance: Mapped[int | None] = mapped_column(Integer, nullable=True)
    readiness_body_temperature: Mapped[int | None] = mapped_column(Integer, nullable=True)
    readiness_hrv_balance: Mapped[int | None] = mapped_column(Integer, nullable=True)
    readiness_previous_day_activity: Mapped[int | None] = mapped_column(Integer, nullable=True)
    readiness_previous_night: Mapped[int | None] = mapped_column(Integer, nullable=True)
    readiness_recovery_index: Mapped[int | None] = mapped_column(Integer, nullable=True)
    readiness_resting_heart_rate: Mapped[int | None] = mapped_column(Integer, nullable=True)
    readiness_sleep_balance: Mapped[int | None] = mapped_column(Integer, nullable=True)
    readiness_sleep_regularity: Mapped[int | None] = mapped_column(Integer, nullable=True)
    temperature_deviation: Mapped[float | None] = mapped_column(Float, nullable=True)

    # Activity metrics
    activity_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    activity_active_calories: Mapped[int | None] = mapped_column(Integer, nullable=True)
    activity_steps: Mapped[int | None] = mapped_column(Integer, nullable=True)
    activity_total_calories: Mapped[int | None] = mapped_column(Integer, nullable=True)
    activity_meet_daily_targets: Mapped[int | None] = mapped_column(Integer, nullable=True)
    activity_move_every_hour: Mapped[int | None] = mapped_column(Integer, nullable=True)
    activity_recovery_time: Mapped[int | None] = mapped_column(Integer, nullable=True)
    activity_stay_active: Mapped[int | None] = mapped_column(Integer, nullable=True)
    activity_training_frequency: Mapped[int | None] = mapped_column(Integer, nullable=True)
    activity_training_volume: Mapped[int | None] = mapped_column(Integer, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
