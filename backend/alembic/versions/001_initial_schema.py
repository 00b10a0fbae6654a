"""Initial schema

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

OURA_SCORE_COLUMNS = [
    "sleep_score",
    "sleep_deep_sleep",
    "sleep_efficiency",
    "sleep_latency",
    "sleep_rem_sleep",
    "sleep_restfulness",
    "sleep_timing",
    "sleep_total_sleep",
    "readiness_score",
    "readiness_activity_balance",
    "readiness_body_temperature",
    "readiness_hrv_balance",
    "readiness_previous_day_activity",
    "readiness_previous_night",
    "readiness_recovery_index",
    "readiness_resting_heart_rate",
    "readiness_sleep_balance",
    "readiness_sleep_regularity",
    "activity_score",
    "activity_active_calories",
    "activity_steps",
    "activity_total_calories",
    "activity_meet_daily_targets",
    "activity_move_every_hour",
    "activity_recovery_time",
    "activity_stay_active",
    "activity_training_frequency",
    "activity_training_volume",
]


def upgrade() -> None:
    # Oura daily scores
    op.create_table(
        "oura_daily",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("day", sa.Date(), nullable=False),
        *[sa.Column(name, sa.Integer(), nullable=True) for name in OURA_SCORE_COLUMNS],
        sa.Column("temperature_deviation", sa.Float(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_oura_daily_day"), "oura_daily", ["day"], unique=True)
    op.create_index(op.f("ix_oura_daily_id"), "oura_daily", ["id"], unique=False)

    # Workouts table
    op.create_table(
        "workouts",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_workouts_date"), "workouts", ["date"], unique=False)
    op.create_index(op.f("ix_workouts_id"), "workouts", ["id"], unique=False)

    # Health goals table
    op.create_table(
        "health_goals",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("goal_type", sa.String(30), nullable=False),
        sa.Column("target", sa.Integer(), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=True, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("goal_type"),
    )
    op.create_index(op.f("ix_health_goals_id"), "health_goals", ["id"], unique=False)

    # People table
    op.create_table(
        "people",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("nickname", sa.String(100), nullable=True),
        sa.Column("relationship", sa.String(20), nullable=True, server_default="friend"),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("location", sa.String(200), nullable=True),
        sa.Column("how_met", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("birthday", sa.Date(), nullable=True),
        sa.Column("birthday_lunar", sa.Boolean(), nullable=True, server_default=sa.false()),
        sa.Column("contact_frequency", sa.String(20), nullable=True, server_default="monthly"),
        sa.Column("current_streak", sa.Integer(), nullable=True, server_default="0"),
        sa.Column("longest_streak", sa.Integer(), nullable=True, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_people_id"), "people", ["id"], unique=False)
    op.create_index(op.f("ix_people_name"), "people", ["name"], unique=False)

    # Interactions table
    op.create_table(
        "interactions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("person_id", sa.Integer(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("topics", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["person_id"], ["people.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_interactions_date"), "interactions", ["date"], unique=False)
    op.create_index(op.f("ix_interactions_id"), "interactions", ["id"], unique=False)
    op.create_index(op.f("ix_interactions_person_id"), "interactions", ["person_id"], unique=False)

    # Special dates (MM-DD) table
    op.create_table(
        "person_dates",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("person_id", sa.Integer(), nullable=False),
        sa.Column("date_type", sa.String(30), nullable=False),
        sa.Column("label", sa.String(200), nullable=True),
        sa.Column("date", sa.String(5), nullable=False),
        sa.Column("recurring", sa.Boolean(), nullable=True, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["person_id"], ["people.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_person_dates_id"), "person_dates", ["id"], unique=False)
    op.create_index(op.f("ix_person_dates_person_id"), "person_dates", ["person_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_person_dates_person_id"), table_name="person_dates")
    op.drop_index(op.f("ix_person_dates_id"), table_name="person_dates")
    op.drop_table("person_dates")

    op.drop_index(op.f("ix_interactions_person_id"), table_name="interactions")
    op.drop_index(op.f("ix_interactions_id"), table_name="interactions")
    op.drop_index(op.f("ix_interactions_date"), table_name="interactions")
    op.drop_table("interactions")

    op.drop_index(op.f("ix_people_name"), table_name="people")
    op.drop_index(op.f("ix_people_id"), table_name="people")
    op.drop_table("people")

    op.drop_index(op.f("ix_health_goals_id"), table_name="health_goals")
    op.drop_table("health_goals")

    op.drop_index(op.f("ix_workouts_id"), table_name="workouts")
    op.drop_index(op.f("ix_workouts_date"), table_name="workouts")
    op.drop_table("workouts")

    op.drop_index(op.f("ix_oura_daily_id"), table_name="oura_daily")
    op.drop_index(op.f("ix_oura_daily_day"), table_name="oura_daily")
    op.drop_table("oura_daily")
