from __future__ import annotations

from datetime import date
import logging

from app.core.exceptions import NotFoundError, ValidationError
from app.models.timetable_slot import DayOfWeek, TimetableSlot
from app.models.user import User
from app.schemas.timetable import AlternateSlotIn, TimetableSlotIn
from app.services.audit import log_activity
from app.services.conflict_detector import ConflictDetector, SlotCandidate
from app.services.schedule_store import ScheduleStore
from app.services.teacher_directory import TeacherDirectory
from app.services.time_utils import (
    day_of_week_for,
    is_valid_time,
    parse_calendar_date,
    parse_day_of_week,
    to_minutes,
)

logger = logging.getLogger(__name__)


def build_candidate(
    data: AlternateSlotIn,
    *,
    day: DayOfWeek,
    slot_date: date | None,
    directory: TeacherDirectory,
) -> SlotCandidate:
    """Validate the per-slot fields shared by weekly and date-bound writes."""
    subject_label = f" in slot for subject '{data.subject}'" if data.subject else ""
    if not data.start_time or not data.end_time or not data.class_identifier or not data.subject:
        raise ValidationError("Each slot requires startTime, endTime, classIdentifier and subject.")
    if not is_valid_time(data.start_time) or not is_valid_time(data.end_time):
        raise ValidationError(f"Invalid startTime or endTime format{subject_label}. Use HH:MM.")
    if to_minutes(data.start_time) >= to_minutes(data.end_time):
        raise ValidationError(f"Start time must be before end time{subject_label}.")
    if data.teacher_id and not directory.is_teacher(data.teacher_id):
        raise ValidationError(
            f"Teacher with ID '{data.teacher_id}' not found or is not a teacher.",
            details={"teacherId": data.teacher_id},
        )
    return SlotCandidate(
        day_of_week=day,
        start_time=data.start_time,
        end_time=data.end_time,
        class_identifier=data.class_identifier,
        section=data.section,
        subject=data.subject,
        teacher_id=data.teacher_id,
        date=slot_date,
    )


class SlotScheduler:
    def __init__(self, store: ScheduleStore, directory: TeacherDirectory) -> None:
        self.store = store
        self.directory = directory
        self.detector = ConflictDetector(store)

    def _resolve_day_and_date(self, data: TimetableSlotIn) -> tuple[DayOfWeek, date | None]:
        requested_day = parse_day_of_week(data.day_of_week)
        if data.day_of_week and requested_day is None:
            raise ValidationError("Invalid dayOfWeek value.")
        if data.date is None:
            if requested_day is None:
                raise ValidationError("dayOfWeek is required for a weekly slot.")
            return requested_day, None

        slot_date = parse_calendar_date(data.date)
        derived_day = day_of_week_for(slot_date)
        if requested_day is not None and requested_day != derived_day:
            raise ValidationError(
                f"dayOfWeek {requested_day.value} does not match date {slot_date.isoformat()} ({derived_day.value})."
            )
        return derived_day, slot_date

    def upsert_slot(
        self,
        data: TimetableSlotIn,
        existing_id: str | None = None,
        *,
        actor: User | None = None,
    ) -> TimetableSlot:
        existing: TimetableSlot | None = None
        if existing_id is not None:
            existing = self.store.find_by_id(existing_id)
            if existing is None:
                raise NotFoundError("Timetable slot", existing_id)

        day, slot_date = self._resolve_day_and_date(data)
        candidate = build_candidate(data, day=day, slot_date=slot_date, directory=self.directory)

        extra_teacher_ids: list[str] = []
        if existing is not None and existing.substitute_teacher_id:
            if candidate.teacher_id == existing.substitute_teacher_id:
                raise ValidationError("Teacher cannot be assigned as a substitute for their own original slot.")
            extra_teacher_ids.append(existing.substitute_teacher_id)

        self.detector.ensure_no_conflict(candidate, exclude_id=existing_id, extra_teacher_ids=extra_teacher_ids)

        values = {
            "day_of_week": candidate.day_of_week,
            "start_time": candidate.start_time,
            "end_time": candidate.end_time,
            "class_identifier": candidate.class_identifier,
            "section": candidate.section,
            "subject": candidate.subject,
            "teacher_id": candidate.teacher_id,
            "date": candidate.date,
        }
        if existing is None:
            slot = self.store.create(TimetableSlot(**values))
            action = "timetable.slot.create"
        else:
            slot = self.store.update(existing.id, values)
            action = "timetable.slot.update"

        log_activity(
            self.store.db,
            user=actor,
            action=action,
            entity_id=slot.id,
            details={
                "day_of_week": slot.day_of_week.value,
                "start_time": slot.start_time,
                "end_time": slot.end_time,
                "class_identifier": slot.class_identifier,
                "section": slot.section,
            },
        )
        self.store.commit()
        self.store.refresh(slot)
        logger.info(
            "%s slot %s: %s %s-%s %s %s",
            "Created" if existing is None else "Updated",
            slot.id,
            slot.day_of_week.value,
            slot.start_time,
            slot.end_time,
            slot.class_identifier,
            slot.section or "",
        )
        return slot
