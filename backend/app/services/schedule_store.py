from __future__ import annotations

from datetime import date
import logging
from typing import Any

from sqlalchemy import Select, delete, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, NotFoundError
from app.models.timetable_slot import DayOfWeek, TimetableSlot

logger = logging.getLogger(__name__)

DUPLICATE_SLOT_MESSAGE = (
    "A timetable slot conflict occurred. One or more slots "
    "(day, time, class, section, subject, date) already exist."
)
UPDATABLE_FIELDS = {
    "day_of_week",
    "start_time",
    "end_time",
    "class_identifier",
    "section",
    "subject",
    "teacher_id",
    "substitute_teacher_id",
    "date",
}


class ScheduleStore:
    """Persistence for timetable slots.

    Query helpers share one scoping rule: ``slot_date=None`` selects the
    weekly universe (``date IS NULL``), a concrete date selects only slots
    bound to that date, and ``day=None`` means any day. Writes are flushed
    into the session's current transaction; ``commit`` ends it and turns a
    unique-constraint race into a ``ConflictError``.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def _scoped(
        self,
        statement: Select,
        day: DayOfWeek | None,
        slot_date: date | None,
        exclude_id: str | None,
    ) -> Select:
        if day is not None:
            statement = statement.where(TimetableSlot.day_of_week == day)
        if slot_date is None:
            statement = statement.where(TimetableSlot.date.is_(None))
        else:
            statement = statement.where(TimetableSlot.date == slot_date)
        if exclude_id:
            statement = statement.where(TimetableSlot.id != exclude_id)
        return statement.order_by(TimetableSlot.day_of_week, TimetableSlot.start_time, TimetableSlot.id)

    def find_by_id(self, slot_id: str) -> TimetableSlot | None:
        return self.db.get(TimetableSlot, slot_id)

    def find_by_class_section(
        self,
        class_identifier: str,
        section: str | None,
        day: DayOfWeek | None,
        slot_date: date | None,
        exclude_id: str | None = None,
    ) -> list[TimetableSlot]:
        statement = select(TimetableSlot).where(TimetableSlot.class_identifier == class_identifier)
        if section is None:
            statement = statement.where(TimetableSlot.section.is_(None))
        else:
            statement = statement.where(TimetableSlot.section == section)
        return list(self.db.execute(self._scoped(statement, day, slot_date, exclude_id)).scalars())

    def find_by_teacher(
        self,
        teacher_id: str,
        day: DayOfWeek | None,
        slot_date: date | None,
        exclude_id: str | None = None,
        *,
        unsubstituted_only: bool = False,
    ) -> list[TimetableSlot]:
        statement = select(TimetableSlot).where(TimetableSlot.teacher_id == teacher_id)
        if unsubstituted_only:
            statement = statement.where(TimetableSlot.substitute_teacher_id.is_(None))
        return list(self.db.execute(self._scoped(statement, day, slot_date, exclude_id)).scalars())

    def find_by_substitute(
        self,
        teacher_id: str,
        day: DayOfWeek | None,
        slot_date: date | None,
        exclude_id: str | None = None,
    ) -> list[TimetableSlot]:
        statement = select(TimetableSlot).where(TimetableSlot.substitute_teacher_id == teacher_id)
        return list(self.db.execute(self._scoped(statement, day, slot_date, exclude_id)).scalars())

    def find_commitments(
        self,
        teacher_id: str,
        day: DayOfWeek | None,
        slot_date: date | None,
        exclude_id: str | None = None,
    ) -> list[TimetableSlot]:
        """Every slot the teacher is bound to, as primary teacher or as substitute."""
        statement = select(TimetableSlot).where(
            or_(
                TimetableSlot.teacher_id == teacher_id,
                TimetableSlot.substitute_teacher_id == teacher_id,
            )
        )
        return list(self.db.execute(self._scoped(statement, day, slot_date, exclude_id)).scalars())

    def create(self, slot: TimetableSlot) -> TimetableSlot:
        self.db.add(slot)
        self._flush()
        return slot

    def update(self, slot_id: str, patch: dict[str, Any]) -> TimetableSlot:
        slot = self.find_by_id(slot_id)
        if slot is None:
            raise NotFoundError("Timetable slot", slot_id)
        unknown = set(patch) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update timetable slot field(s): {', '.join(sorted(unknown))}")
        for key, value in patch.items():
            setattr(slot, key, value)
        self._flush()
        return slot

    def delete_all_for_date(self, slot_date: date) -> int:
        result = self.db.execute(
            delete(TimetableSlot).where(TimetableSlot.date == slot_date).execution_options(synchronize_session="fetch")
        )
        return result.rowcount or 0

    def commit(self) -> None:
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            logger.info("Timetable commit rejected by unique constraint: %s", exc.orig)
            raise ConflictError(DUPLICATE_SLOT_MESSAGE, category="Duplicate slot") from exc

    def rollback(self) -> None:
        self.db.rollback()

    def refresh(self, slot: TimetableSlot) -> TimetableSlot:
        self.db.refresh(slot)
        return slot

    def _flush(self) -> None:
        try:
            self.db.flush()
        except IntegrityError as exc:
            self.db.rollback()
            logger.info("Timetable write rejected by unique constraint: %s", exc.orig)
            raise ConflictError(DUPLICATE_SLOT_MESSAGE, category="Duplicate slot") from exc
