import datetime
import uuid
from enum import Enum

from sqlalchemy import Date, DateTime, Enum as SAEnum, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base


class DayOfWeek(str, Enum):
    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"


class TimetableSlot(Base):
    """One teaching period for a class/section.

    ``date`` is NULL for recurring weekly slots. Date-bound slots carry the
    calendar date they apply to and their ``day_of_week`` is derived from it.
    """

    __tablename__ = "timetable_slots"
    __table_args__ = (
        UniqueConstraint(
            "day_of_week",
            "start_time",
            "class_identifier",
            "section",
            "subject",
            "date",
            name="uq_timetable_slots_day_time_class_section_subject_date",
            postgresql_nulls_not_distinct=True,
        ),
        Index("ix_timetable_slots_class_section_day_date", "class_identifier", "section", "day_of_week", "date"),
        Index("ix_timetable_slots_teacher_date_day", "teacher_id", "date", "day_of_week"),
        Index("ix_timetable_slots_substitute_date_day", "substitute_teacher_id", "date", "day_of_week"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    day_of_week: Mapped[DayOfWeek] = mapped_column(SAEnum(DayOfWeek, name="day_of_week"), nullable=False)
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)
    class_identifier: Mapped[str] = mapped_column(String(100), nullable=False)
    section: Mapped[str | None] = mapped_column(String(50), nullable=True)
    subject: Mapped[str] = mapped_column(String(200), nullable=False)
    teacher_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    substitute_teacher_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    date: Mapped[datetime.date | None] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime.datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())
