from __future__ import annotations

from datetime import date
import logging
from typing import Sequence

from app.core.exceptions import ValidationError
from app.models.timetable_slot import TimetableSlot
from app.models.user import User
from app.schemas.timetable import AlternateSlotIn
from app.services.audit import log_activity
from app.services.conflict_detector import find_batch_conflict
from app.services.notifications import notify_users
from app.services.schedule_store import ScheduleStore
from app.services.slot_scheduler import build_candidate
from app.services.teacher_directory import TeacherDirectory
from app.services.time_utils import day_of_week_for, parse_calendar_date

logger = logging.getLogger(__name__)


class AlternateDayScheduler:
    """Replaces the whole date-bound schedule of one calendar date.

    Nothing is written unless every slot validates and the batch is free of
    internal clashes; the delete of the old batch and the insert of the new
    one share a single transaction.
    """

    def __init__(self, store: ScheduleStore, directory: TeacherDirectory) -> None:
        self.store = store
        self.directory = directory

    def set_alternate_schedule(
        self,
        date_value: str | date,
        slot_inputs: Sequence[AlternateSlotIn] | None,
        *,
        actor: User | None = None,
    ) -> tuple[date, list[TimetableSlot]]:
        if slot_inputs is None:
            raise ValidationError("A specific date (YYYY-MM-DD) and an array of slots are required.")
        slot_date = parse_calendar_date(date_value)
        day = day_of_week_for(slot_date)

        candidates = [
            build_candidate(item, day=day, slot_date=slot_date, directory=self.directory) for item in slot_inputs
        ]

        conflict = find_batch_conflict(candidates)
        if conflict is not None:
            logger.info("Rejected alternate schedule for %s: %s", slot_date.isoformat(), conflict.category)
            raise conflict.to_error()

        try:
            removed = self.store.delete_all_for_date(slot_date)
            created = [
                self.store.create(
                    TimetableSlot(
                        day_of_week=candidate.day_of_week,
                        start_time=candidate.start_time,
                        end_time=candidate.end_time,
                        class_identifier=candidate.class_identifier,
                        section=candidate.section,
                        subject=candidate.subject,
                        teacher_id=candidate.teacher_id,
                        date=slot_date,
                    )
                )
                for candidate in candidates
            ]
            log_activity(
                self.store.db,
                user=actor,
                action="timetable.alternate.replace",
                entity_id=slot_date.isoformat(),
                details={"removed": removed, "created": len(created), "day_of_week": day.value},
            )
            notify_users(
                self.store.db,
                user_ids=[slot.teacher_id for slot in created if slot.teacher_id],
                title="Alternate timetable",
                message=f"An alternate timetable has been set for {slot_date.isoformat()} ({day.value.title()}).",
                exclude_user_id=actor.id if actor is not None else None,
            )
        except Exception:
            self.store.rollback()
            raise
        self.store.commit()

        for slot in created:
            self.store.refresh(slot)
        logger.info(
            "Alternate schedule for %s replaced %d slot(s) with %d slot(s)",
            slot_date.isoformat(),
            removed,
            len(created),
        )
        return slot_date, created
