from datetime import date

import pytest

from app.core.exceptions import ConflictError
from app.models.timetable_slot import DayOfWeek, TimetableSlot


def exam_slot(**overrides):
    values = {
        "day_of_week": DayOfWeek.MONDAY,
        "start_time": "09:00",
        "end_time": "10:00",
        "class_identifier": "Grade10",
        "section": "A",
        "subject": "Exam",
        "date": date(2024, 7, 15),
    }
    values.update(overrides)
    return TimetableSlot(**values)


def test_duplicate_tuple_surfaces_as_conflict(store):
    first = store.create(exam_slot())
    store.commit()
    first_id = first.id

    with pytest.raises(ConflictError) as exc_info:
        store.create(exam_slot(end_time="11:00"))

    assert exc_info.value.category == "Duplicate slot"
    assert exc_info.value.status_code == 409

    # session was rolled back and keeps working
    assert store.find_by_id(first_id) is not None
    store.create(exam_slot(subject="Revision"))
    store.commit()
    assert len(store.find_by_class_section("Grade10", "A", None, date(2024, 7, 15))) == 2


def test_weekly_finders_ignore_date_bound_slots(store):
    store.create(exam_slot())
    store.create(exam_slot(date=None, subject="Maths"))
    store.commit()

    weekly = store.find_by_class_section("Grade10", "A", DayOfWeek.MONDAY, None)
    assert [slot.subject for slot in weekly] == ["Maths"]
    assert store.delete_all_for_date(date(2024, 7, 15)) == 1
    store.commit()
    assert store.find_by_class_section("Grade10", "A", None, date(2024, 7, 15)) == []
