from datetime import date

import pytest

from app.core.exceptions import ConflictError
from app.models.timetable_slot import DayOfWeek, TimetableSlot
from app.services.conflict_detector import (
    CLASS_SECTION_CONFLICT,
    SUBSTITUTE_CONFLICT,
    TEACHER_CONFLICT,
    ConflictDetector,
    SlotCandidate,
    find_batch_conflict,
)

MONDAY_DATE = date(2024, 7, 15)


def seed_slot(store, **overrides):
    values = {
        "day_of_week": DayOfWeek.MONDAY,
        "start_time": "09:00",
        "end_time": "10:00",
        "class_identifier": "Grade10",
        "section": "A",
        "subject": "Maths",
        "teacher_id": None,
        "date": None,
    }
    values.update(overrides)
    slot = store.create(TimetableSlot(**values))
    store.commit()
    return slot


def candidate(**overrides):
    values = {
        "day_of_week": DayOfWeek.MONDAY,
        "start_time": "09:30",
        "end_time": "10:30",
        "class_identifier": "Grade10",
        "section": "A",
        "subject": "Physics",
        "teacher_id": None,
        "date": None,
    }
    values.update(overrides)
    return SlotCandidate(**values)


def test_class_section_overlap_is_reported(store):
    existing = seed_slot(store)
    conflict = ConflictDetector(store).detect(candidate())

    assert conflict is not None
    assert conflict.category == CLASS_SECTION_CONFLICT
    assert conflict.conflicting.id == existing.id
    assert "Class 'Grade10' A already has subject 'Maths'" in conflict.message


def test_adjacent_slots_and_other_sections_do_not_clash(store):
    seed_slot(store)
    detector = ConflictDetector(store)

    assert detector.detect(candidate(start_time="10:00", end_time="11:00")) is None
    assert detector.detect(candidate(section="B")) is None
    assert detector.detect(candidate(section=None)) is None
    assert detector.detect(candidate(day_of_week=DayOfWeek.TUESDAY)) is None


def test_weekly_and_date_bound_scopes_are_independent(store):
    seed_slot(store)
    seed_slot(store, subject="Art", date=MONDAY_DATE, start_time="11:00", end_time="12:00")
    detector = ConflictDetector(store)

    assert detector.detect(candidate(date=MONDAY_DATE)) is None
    assert detector.detect(candidate(start_time="11:00", end_time="11:30")) is None
    assert detector.detect(candidate(date=MONDAY_DATE, start_time="11:30", end_time="12:30")) is not None


def test_teacher_overlap_across_classes(store, make_user):
    teacher = make_user("Anita Rao")
    seed_slot(store, teacher_id=teacher.id)

    conflict = ConflictDetector(store).detect(
        candidate(class_identifier="Grade9", subject="Chemistry", teacher_id=teacher.id)
    )

    assert conflict is not None
    assert conflict.category == TEACHER_CONFLICT
    assert conflict.message == (
        "Teacher conflict: Teacher is already assigned to class 'Grade10' subject 'Maths' during this time."
    )


def test_substitute_duty_counts_as_teacher_commitment(store, make_user):
    primary = make_user("Anita Rao")
    substitute = make_user("Vikram Shah")
    seed_slot(store, teacher_id=primary.id, substitute_teacher_id=substitute.id)

    conflict = ConflictDetector(store).detect(
        candidate(class_identifier="Grade8", subject="History", teacher_id=substitute.id)
    )

    assert conflict is not None
    assert conflict.category == TEACHER_CONFLICT


def test_class_section_conflict_is_reported_before_teacher_conflict(store, make_user):
    teacher = make_user("Anita Rao")
    seed_slot(store, teacher_id=teacher.id)

    conflict = ConflictDetector(store).detect(candidate(teacher_id=teacher.id))

    assert conflict.category == CLASS_SECTION_CONFLICT


def test_excluded_slot_never_conflicts_with_itself(store, make_user):
    teacher = make_user("Anita Rao")
    existing = seed_slot(store, teacher_id=teacher.id)

    same = SlotCandidate.from_slot(existing)

    assert ConflictDetector(store).detect(same, exclude_id=existing.id) is None
    assert ConflictDetector(store).detect(same) is not None


def test_extra_teachers_are_checked(store, make_user):
    teacher = make_user("Anita Rao")
    substitute = make_user("Vikram Shah")
    seed_slot(store, class_identifier="Grade7", subject="Music", teacher_id=substitute.id)

    conflict = ConflictDetector(store).detect(
        candidate(class_identifier="Grade9", teacher_id=teacher.id),
        extra_teacher_ids=[substitute.id],
    )

    assert conflict is not None
    assert conflict.category == TEACHER_CONFLICT


def test_substitute_category_message(store, make_user):
    teacher = make_user("Anita Rao")
    seed_slot(store, teacher_id=teacher.id)

    conflict = ConflictDetector(store).find_teacher_conflict(
        teacher.id,
        candidate(class_identifier="Grade9"),
        category=SUBSTITUTE_CONFLICT,
    )

    assert conflict.category == SUBSTITUTE_CONFLICT
    assert conflict.message.startswith("Substitute teacher conflict:")


def test_ensure_no_conflict_raises_with_conflicting_slot(store):
    existing = seed_slot(store)

    with pytest.raises(ConflictError) as exc_info:
        ConflictDetector(store).ensure_no_conflict(candidate())

    error = exc_info.value
    assert error.status_code == 409
    assert error.category == CLASS_SECTION_CONFLICT
    assert error.details["category"] == CLASS_SECTION_CONFLICT
    assert error.details["conflictingSlot"]["id"] == existing.id
    assert error.details["conflictingSlot"]["dayOfWeek"] == "MONDAY"


def test_batch_conflict_checks_teacher_before_class_section():
    batch = [
        candidate(start_time="09:00", end_time="10:00", subject="Maths", teacher_id="t-1"),
        candidate(start_time="09:30", end_time="10:30", subject="Physics", teacher_id="t-1"),
    ]

    conflict = find_batch_conflict(batch)

    assert conflict.category == TEACHER_CONFLICT
    assert "within the submitted alternate schedule" in conflict.message
    assert conflict.conflicting == batch[1]
    assert conflict.to_error().details["conflictingSlot"]["subject"] == "Physics"


def test_batch_conflict_for_class_section():
    batch = [
        candidate(start_time="09:00", end_time="10:00", subject="Maths", teacher_id="t-1"),
        candidate(start_time="09:30", end_time="10:30", subject="Physics", teacher_id="t-2"),
    ]

    conflict = find_batch_conflict(batch)

    assert conflict.category == CLASS_SECTION_CONFLICT
    assert "class Grade10 A and subject Maths" in conflict.message


def test_batch_without_clashes():
    batch = [
        candidate(start_time="09:00", end_time="10:00", teacher_id="t-1"),
        candidate(start_time="10:00", end_time="11:00", teacher_id="t-1"),
        candidate(start_time="09:00", end_time="10:00", section="B", teacher_id="t-2"),
    ]

    assert find_batch_conflict(batch) is None
    assert find_batch_conflict([]) is None
