"""create timetable slots

Revision ID: 20261001_0002
Revises: 20261001_0001
Create Date: 2026-10-01 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261001_0002"
down_revision = "20261001_0001"
branch_labels = None
depends_on = None


day_of_week_enum = sa.Enum(
    "MONDAY",
    "TUESDAY",
    "WEDNESDAY",
    "THURSDAY",
    "FRIDAY",
    "SATURDAY",
    "SUNDAY",
    name="day_of_week",
)


def upgrade() -> None:
    op.create_table(
        "timetable_slots",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("day_of_week", day_of_week_enum, nullable=False),
        sa.Column("start_time", sa.String(length=5), nullable=False),
        sa.Column("end_time", sa.String(length=5), nullable=False),
        sa.Column("class_identifier", sa.String(length=100), nullable=False),
        sa.Column("section", sa.String(length=50), nullable=True),
        sa.Column("subject", sa.String(length=200), nullable=False),
        sa.Column(
            "teacher_id",
            sa.String(length=36),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "substitute_teacher_id",
            sa.String(length=36),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("date", sa.Date(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint(
            "day_of_week",
            "start_time",
            "class_identifier",
            "section",
            "subject",
            "date",
            name="uq_timetable_slots_day_time_class_section_subject_date",
            postgresql_nulls_not_distinct=True,
        ),
    )
    op.create_index(
        "ix_timetable_slots_class_section_day_date",
        "timetable_slots",
        ["class_identifier", "section", "day_of_week", "date"],
    )
    op.create_index(
        "ix_timetable_slots_teacher_date_day",
        "timetable_slots",
        ["teacher_id", "date", "day_of_week"],
    )
    op.create_index(
        "ix_timetable_slots_substitute_date_day",
        "timetable_slots",
        ["substitute_teacher_id", "date", "day_of_week"],
    )


def downgrade() -> None:
    op.drop_index("ix_timetable_slots_substitute_date_day", table_name="timetable_slots")
    op.drop_index("ix_timetable_slots_teacher_date_day", table_name="timetable_slots")
    op.drop_index("ix_timetable_slots_class_section_day_date", table_name="timetable_slots")
    op.drop_table("timetable_slots")
    day_of_week_enum.drop(op.get_bind(), checkfirst=True)
