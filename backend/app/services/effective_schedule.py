from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Union

from app.models.timetable_slot import TimetableSlot
from app.schemas.timetable import EffectiveSlotOut
from app.services.schedule_store import ScheduleStore
from app.services.teacher_directory import TeacherDirectory
from app.services.time_utils import DAY_ORDER, day_of_week_for, to_minutes


@dataclass(frozen=True)
class ClassSectionScope:
    class_identifier: str
    section: str | None = None


@dataclass(frozen=True)
class TeacherScope:
    teacher_id: str


Scope = Union[ClassSectionScope, TeacherScope]


def _unique(slots: Iterable[TimetableSlot]) -> list[TimetableSlot]:
    return list({slot.id: slot for slot in slots}.values())


class EffectiveScheduleResolver:
    """Works out which slots actually apply to a class/section or a teacher.

    With a target date, slots bound to that date win outright; only when the
    scope has none does the weekly schedule for that weekday apply. Teachers
    see the slots they teach themselves (not handed to a substitute) plus the
    slots they cover as substitute.
    """

    def __init__(self, store: ScheduleStore, directory: TeacherDirectory) -> None:
        self.store = store
        self.directory = directory

    def resolve(self, scope: Scope, target_date: date | None = None) -> list[EffectiveSlotOut]:
        if isinstance(scope, ClassSectionScope):
            slots = self._class_section_slots(scope, target_date)
            viewer_id = None
        elif isinstance(scope, TeacherScope):
            slots = self._teacher_slots(scope, target_date)
            viewer_id = scope.teacher_id
        else:
            raise TypeError(f"Unsupported schedule scope: {scope!r}")

        annotated = [self._annotate(slot, viewer_id) for slot in slots]
        annotated.sort(key=lambda item: (DAY_ORDER[item.day_of_week], to_minutes(item.start_time)))
        return annotated

    def _class_section_slots(self, scope: ClassSectionScope, target_date: date | None) -> list[TimetableSlot]:
        if target_date is None:
            return self.store.find_by_class_section(scope.class_identifier, scope.section, None, None)

        date_bound = self.store.find_by_class_section(scope.class_identifier, scope.section, None, target_date)
        if date_bound:
            return date_bound
        return self.store.find_by_class_section(
            scope.class_identifier,
            scope.section,
            day_of_week_for(target_date),
            None,
        )

    def _teacher_slots(self, scope: TeacherScope, target_date: date | None) -> list[TimetableSlot]:
        teacher_id = scope.teacher_id
        if target_date is None:
            return _unique(
                [
                    *self.store.find_by_teacher(teacher_id, None, None, unsubstituted_only=True),
                    *self.store.find_by_substitute(teacher_id, None, None),
                ]
            )

        substituting = self.store.find_by_substitute(teacher_id, None, target_date)
        primary = self.store.find_by_teacher(teacher_id, None, target_date)
        # A date-bound slot the teacher was relieved of still makes the date authoritative.
        if substituting or primary:
            own = [slot for slot in primary if slot.substitute_teacher_id is None]
            return _unique([*substituting, *own])

        day = day_of_week_for(target_date)
        return _unique(
            [
                *self.store.find_by_teacher(teacher_id, day, None, unsubstituted_only=True),
                *self.store.find_by_substitute(teacher_id, day, None),
            ]
        )

    def _annotate(self, slot: TimetableSlot, viewer_id: str | None) -> EffectiveSlotOut:
        original_name = self.directory.get_name(slot.teacher_id)
        if slot.substitute_teacher_id:
            teaching_name = self.directory.get_name(slot.substitute_teacher_id)
        else:
            teaching_name = original_name
        item = EffectiveSlotOut.model_validate(slot)
        item.is_substitute_assignment = viewer_id is not None and slot.substitute_teacher_id == viewer_id
        item.teaching_teacher_name = teaching_name
        item.original_teacher_name = original_name
        return item
