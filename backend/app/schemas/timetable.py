from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field, field_validator

from app.models.timetable_slot import DayOfWeek


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    trimmed = value.strip()
    return trimmed or None


class AlternateSlotIn(BaseModel):
    """One slot of a date-bound batch; day and date come from the batch."""

    start_time: str | None = Field(default=None, alias="startTime")
    end_time: str | None = Field(default=None, alias="endTime")
    class_identifier: str | None = Field(default=None, alias="classIdentifier", max_length=100)
    section: str | None = Field(default=None, max_length=50)
    subject: str | None = Field(default=None, max_length=200)
    teacher_id: str | None = Field(default=None, alias="teacherId", max_length=36)

    model_config = {
        "populate_by_name": True,
    }

    @field_validator("start_time", "end_time", "class_identifier", "subject")
    @classmethod
    def strip_text(cls, value: str | None) -> str | None:
        return value.strip() if value is not None else None

    @field_validator("section", "teacher_id")
    @classmethod
    def normalize_optional_reference(cls, value: str | None) -> str | None:
        return _blank_to_none(value)


class TimetableSlotIn(AlternateSlotIn):
    day_of_week: str | None = Field(default=None, alias="dayOfWeek")
    date: str | None = None

    @field_validator("date")
    @classmethod
    def normalize_date(cls, value: str | None) -> str | None:
        return _blank_to_none(value)


class AlternateScheduleIn(BaseModel):
    date: str
    slots: list[AlternateSlotIn] | None = Field(default=None, max_length=500)


class SubstituteAssignIn(BaseModel):
    substitute_teacher_id: str = Field(alias="substituteTeacherId", min_length=1, max_length=36)

    model_config = {
        "populate_by_name": True,
    }


class SlotOut(BaseModel):
    id: str
    day_of_week: DayOfWeek = Field(alias="dayOfWeek")
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    class_identifier: str = Field(alias="classIdentifier")
    section: str | None = None
    subject: str
    teacher_id: str | None = Field(default=None, alias="teacherId")
    substitute_teacher_id: str | None = Field(default=None, alias="substituteTeacherId")
    date: str | None = None

    model_config = {
        "populate_by_name": True,
        "from_attributes": True,
    }

    @field_validator("date", mode="before")
    @classmethod
    def format_date(cls, value: date | str | None) -> str | None:
        if isinstance(value, date):
            return value.isoformat()
        return value


class EffectiveSlotOut(SlotOut):
    is_substitute_assignment: bool = Field(default=False, alias="isSubstituteAssignment")
    teaching_teacher_name: str | None = Field(default=None, alias="teachingTeacherName")
    original_teacher_name: str | None = Field(default=None, alias="originalTeacherName")


class AlternateScheduleOut(BaseModel):
    message: str
    date: str
    slots: list[SlotOut] = Field(default_factory=list)


class SubstituteOut(BaseModel):
    message: str
    slot: SlotOut


def slot_payload(slot) -> dict:
    return SlotOut.model_validate(slot).model_dump(by_alias=True, mode="json")
