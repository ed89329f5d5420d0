from __future__ import annotations

from dataclasses import dataclass
from datetime import date
import logging
from typing import Iterable, Sequence

from app.core.exceptions import ConflictError
from app.models.timetable_slot import DayOfWeek, TimetableSlot
from app.schemas.timetable import slot_payload
from app.services.schedule_store import ScheduleStore
from app.services.time_utils import format_calendar_date, overlaps

logger = logging.getLogger(__name__)

TEACHER_CONFLICT = "Teacher conflict"
CLASS_SECTION_CONFLICT = "Class/Section conflict"
SUBSTITUTE_CONFLICT = "Substitute teacher conflict"


@dataclass(frozen=True)
class SlotCandidate:
    """A slot as it would be stored, before it exists."""

    day_of_week: DayOfWeek
    start_time: str
    end_time: str
    class_identifier: str
    section: str | None
    subject: str
    teacher_id: str | None = None
    date: date | None = None

    @classmethod
    def from_slot(cls, slot: TimetableSlot) -> "SlotCandidate":
        return cls(
            day_of_week=slot.day_of_week,
            start_time=slot.start_time,
            end_time=slot.end_time,
            class_identifier=slot.class_identifier,
            section=slot.section,
            subject=slot.subject,
            teacher_id=slot.teacher_id,
            date=slot.date,
        )

    def overlaps(self, other: "SlotCandidate | TimetableSlot") -> bool:
        return overlaps(self.start_time, self.end_time, other.start_time, other.end_time)

    def same_class_section(self, other: "SlotCandidate | TimetableSlot") -> bool:
        return self.class_identifier == other.class_identifier and self.section == other.section

    def as_payload(self) -> dict:
        return {
            "dayOfWeek": self.day_of_week.value,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "classIdentifier": self.class_identifier,
            "section": self.section,
            "subject": self.subject,
            "teacherId": self.teacher_id,
            "date": format_calendar_date(self.date),
        }


@dataclass(frozen=True)
class SlotConflict:
    category: str
    message: str
    conflicting: SlotCandidate | TimetableSlot

    def to_error(self) -> ConflictError:
        if isinstance(self.conflicting, SlotCandidate):
            payload = self.conflicting.as_payload()
        else:
            payload = slot_payload(self.conflicting)
        return ConflictError(self.message, category=self.category, conflicting_slot=payload)


def _section_label(section: str | None) -> str:
    return section or ""


class ConflictDetector:
    """Finds overlaps between a candidate slot and what is already stored.

    Class/section scope is always checked before teacher scope so callers see
    a deterministic conflict when both would fail.
    """

    def __init__(self, store: ScheduleStore) -> None:
        self.store = store

    def find_class_section_conflict(
        self, candidate: SlotCandidate, exclude_id: str | None = None
    ) -> SlotConflict | None:
        existing_slots = self.store.find_by_class_section(
            candidate.class_identifier,
            candidate.section,
            candidate.day_of_week,
            candidate.date,
            exclude_id=exclude_id,
        )
        for existing in existing_slots:
            if candidate.overlaps(existing):
                return SlotConflict(
                    category=CLASS_SECTION_CONFLICT,
                    message=(
                        f"Class/Section conflict: Class '{candidate.class_identifier}' "
                        f"{_section_label(candidate.section)} already has subject '{existing.subject}' "
                        "scheduled during this time."
                    ),
                    conflicting=existing,
                )
        return None

    def find_teacher_conflict(
        self,
        teacher_id: str,
        candidate: SlotCandidate,
        exclude_id: str | None = None,
        *,
        category: str = TEACHER_CONFLICT,
    ) -> SlotConflict | None:
        commitments = self.store.find_commitments(
            teacher_id,
            candidate.day_of_week,
            candidate.date,
            exclude_id=exclude_id,
        )
        for existing in commitments:
            if not candidate.overlaps(existing):
                continue
            if category == SUBSTITUTE_CONFLICT:
                message = "Substitute teacher conflict: Teacher is already assigned to another slot during this time."
            else:
                message = (
                    f"Teacher conflict: Teacher is already assigned to class '{existing.class_identifier}' "
                    f"subject '{existing.subject}' during this time."
                )
            return SlotConflict(category=category, message=message, conflicting=existing)
        return None

    def detect(
        self,
        candidate: SlotCandidate,
        exclude_id: str | None = None,
        extra_teacher_ids: Iterable[str] = (),
    ) -> SlotConflict | None:
        """Return the first conflict for ``candidate`` or ``None``.

        ``extra_teacher_ids`` lets an update re-check teachers attached to the
        slot other than the primary one (its substitute) at the new time.
        """
        conflict = self.find_class_section_conflict(candidate, exclude_id)
        if conflict is not None:
            return conflict
        teacher_ids = [candidate.teacher_id, *extra_teacher_ids]
        for teacher_id in dict.fromkeys(item for item in teacher_ids if item):
            conflict = self.find_teacher_conflict(teacher_id, candidate, exclude_id)
            if conflict is not None:
                return conflict
        return None

    def ensure_no_conflict(
        self,
        candidate: SlotCandidate,
        exclude_id: str | None = None,
        extra_teacher_ids: Iterable[str] = (),
    ) -> None:
        conflict = self.detect(candidate, exclude_id, extra_teacher_ids)
        if conflict is not None:
            logger.info(
                "Rejected %s slot %s-%s for %s %s: %s",
                candidate.day_of_week.value,
                candidate.start_time,
                candidate.end_time,
                candidate.class_identifier,
                _section_label(candidate.section),
                conflict.category,
            )
            raise conflict.to_error()


def find_batch_conflict(candidates: Sequence[SlotCandidate]) -> SlotConflict | None:
    """Check a submitted batch against itself, in submission order.

    For each candidate the teacher clash is looked for before the
    class/section clash, across every other candidate in the batch.
    """
    for index, candidate in enumerate(candidates):
        others = [other for position, other in enumerate(candidates) if position != index]
        if candidate.teacher_id:
            for other in others:
                if other.teacher_id == candidate.teacher_id and candidate.overlaps(other):
                    return SlotConflict(
                        category=TEACHER_CONFLICT,
                        message=(
                            "Teacher conflict within the submitted alternate schedule for teacher ID "
                            f"{candidate.teacher_id} and subject {candidate.subject}."
                        ),
                        conflicting=other,
                    )
        for other in others:
            if candidate.same_class_section(other) and candidate.overlaps(other):
                return SlotConflict(
                    category=CLASS_SECTION_CONFLICT,
                    message=(
                        "Class/Section conflict within the submitted alternate schedule for class "
                        f"{candidate.class_identifier} {_section_label(candidate.section)} "
                        f"and subject {candidate.subject}."
                    ),
                    conflicting=other,
                )
    return None
