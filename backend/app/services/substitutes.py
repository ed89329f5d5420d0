from __future__ import annotations

import logging

from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.models.timetable_slot import TimetableSlot
from app.models.user import User
from app.services.audit import log_activity
from app.services.conflict_detector import SUBSTITUTE_CONFLICT, ConflictDetector, SlotCandidate
from app.services.notifications import create_notification
from app.services.schedule_store import ScheduleStore
from app.services.teacher_directory import TeacherDirectory

logger = logging.getLogger(__name__)


def _slot_label(slot: TimetableSlot) -> str:
    when = slot.date.isoformat() if slot.date is not None else f"every {slot.day_of_week.value.title()}"
    section = f" {slot.section}" if slot.section else ""
    return f"{slot.subject} for {slot.class_identifier}{section}, {when} {slot.start_time}-{slot.end_time}"


class SubstituteManager:
    """Sets or clears the substitute on an existing slot.

    The primary ``teacher_id`` is never modified. A substitute on a weekly
    slot covers every occurrence of that slot until it is cleared.
    """

    def __init__(self, store: ScheduleStore, directory: TeacherDirectory) -> None:
        self.store = store
        self.directory = directory
        self.detector = ConflictDetector(store)

    def _get_slot(self, slot_id: str) -> TimetableSlot:
        slot = self.store.find_by_id(slot_id)
        if slot is None:
            raise NotFoundError("Timetable slot", slot_id)
        return slot

    def assign_substitute(
        self,
        slot_id: str,
        substitute_teacher_id: str,
        *,
        actor: User | None = None,
    ) -> TimetableSlot:
        slot = self._get_slot(slot_id)

        if not self.directory.is_teacher(substitute_teacher_id):
            raise ValidationError(f"User with ID '{substitute_teacher_id}' is not a valid substitute teacher.")
        if slot.teacher_id and slot.teacher_id == substitute_teacher_id:
            raise ValidationError("Teacher cannot be assigned as a substitute for their own original slot.")

        conflict = self.detector.find_teacher_conflict(
            substitute_teacher_id,
            SlotCandidate.from_slot(slot),
            exclude_id=slot.id,
            category=SUBSTITUTE_CONFLICT,
        )
        if conflict is not None:
            logger.info("Rejected substitute %s for slot %s: busy", substitute_teacher_id, slot.id)
            raise conflict.to_error()
        if slot.substitute_teacher_id == substitute_teacher_id:
            raise ConflictError(
                "Substitute teacher conflict: Teacher is already the substitute for this slot.",
                category=SUBSTITUTE_CONFLICT,
            )

        previous_substitute_id = slot.substitute_teacher_id
        self.store.update(slot.id, {"substitute_teacher_id": substitute_teacher_id})

        label = _slot_label(slot)
        create_notification(
            self.store.db,
            user_id=substitute_teacher_id,
            title="Substitute assignment",
            message=f"You are substituting {label}.",
            related_slot_id=slot.id,
        )
        if slot.teacher_id:
            create_notification(
                self.store.db,
                user_id=slot.teacher_id,
                title="Substitute assigned",
                message=f"{self.directory.get_name(substitute_teacher_id)} will cover {label}.",
                related_slot_id=slot.id,
            )
        if previous_substitute_id:
            create_notification(
                self.store.db,
                user_id=previous_substitute_id,
                title="Substitute assignment removed",
                message=f"You are no longer substituting {label}.",
                related_slot_id=slot.id,
            )
        log_activity(
            self.store.db,
            user=actor,
            action="timetable.substitute.assign",
            entity_id=slot.id,
            details={
                "teacher_id": slot.teacher_id,
                "substitute_teacher_id": substitute_teacher_id,
                "previous_substitute_teacher_id": previous_substitute_id,
            },
        )
        self.store.commit()
        self.store.refresh(slot)
        logger.info("Assigned substitute %s to slot %s", substitute_teacher_id, slot.id)
        return slot

    def clear_substitute(self, slot_id: str, *, actor: User | None = None) -> TimetableSlot:
        slot = self._get_slot(slot_id)
        previous_substitute_id = slot.substitute_teacher_id
        self.store.update(slot.id, {"substitute_teacher_id": None})

        if previous_substitute_id:
            create_notification(
                self.store.db,
                user_id=previous_substitute_id,
                title="Substitute assignment removed",
                message=f"You are no longer substituting {_slot_label(slot)}.",
                related_slot_id=slot.id,
            )
        log_activity(
            self.store.db,
            user=actor,
            action="timetable.substitute.clear",
            entity_id=slot.id,
            details={"previous_substitute_teacher_id": previous_substitute_id},
        )
        self.store.commit()
        self.store.refresh(slot)
        logger.info("Cleared substitute on slot %s", slot.id)
        return slot
