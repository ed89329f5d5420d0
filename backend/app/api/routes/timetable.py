from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.deps import get_current_user, get_schedule_store, get_teacher_directory, require_roles
from app.core.exceptions import NotFoundError
from app.models.user import User, UserRole
from app.schemas.timetable import (
    AlternateScheduleIn,
    AlternateScheduleOut,
    EffectiveSlotOut,
    SlotOut,
    SubstituteAssignIn,
    SubstituteOut,
    TimetableSlotIn,
)
from app.services.alternate_scheduler import AlternateDayScheduler
from app.services.effective_schedule import ClassSectionScope, EffectiveScheduleResolver, TeacherScope
from app.services.schedule_store import ScheduleStore
from app.services.slot_scheduler import SlotScheduler
from app.services.substitutes import SubstituteManager
from app.services.teacher_directory import TeacherDirectory
from app.services.time_utils import parse_calendar_date

router = APIRouter()


def parse_query_date(value: str | None) -> date | None:
    if value is None or not value.strip():
        return None
    return parse_calendar_date(value)


@router.post("/slots", response_model=SlotOut, status_code=status.HTTP_201_CREATED)
def create_slot(
    payload: TimetableSlotIn,
    current_user: User = Depends(require_roles(UserRole.admin)),
    store: ScheduleStore = Depends(get_schedule_store),
    directory: TeacherDirectory = Depends(get_teacher_directory),
) -> SlotOut:
    slot = SlotScheduler(store, directory).upsert_slot(payload, actor=current_user)
    return SlotOut.model_validate(slot)


@router.put("/slots/{slot_id}", response_model=SlotOut)
def update_slot(
    slot_id: str,
    payload: TimetableSlotIn,
    current_user: User = Depends(require_roles(UserRole.admin)),
    store: ScheduleStore = Depends(get_schedule_store),
    directory: TeacherDirectory = Depends(get_teacher_directory),
) -> SlotOut:
    slot = SlotScheduler(store, directory).upsert_slot(payload, slot_id, actor=current_user)
    return SlotOut.model_validate(slot)


@router.get("/slots/{slot_id}", response_model=SlotOut)
def get_slot(
    slot_id: str,
    current_user: User = Depends(get_current_user),
    store: ScheduleStore = Depends(get_schedule_store),
) -> SlotOut:
    slot = store.find_by_id(slot_id)
    if slot is None:
        raise NotFoundError("Timetable slot", slot_id)
    return SlotOut.model_validate(slot)


@router.post("/alternate", response_model=AlternateScheduleOut, status_code=status.HTTP_201_CREATED)
def set_alternate_schedule(
    payload: AlternateScheduleIn,
    current_user: User = Depends(require_roles(UserRole.admin)),
    store: ScheduleStore = Depends(get_schedule_store),
    directory: TeacherDirectory = Depends(get_teacher_directory),
) -> AlternateScheduleOut:
    slot_date, slots = AlternateDayScheduler(store, directory).set_alternate_schedule(
        payload.date,
        payload.slots,
        actor=current_user,
    )
    return AlternateScheduleOut(
        message=f"Alternate timetable for {slot_date.isoformat()} set successfully.",
        date=slot_date.isoformat(),
        slots=[SlotOut.model_validate(slot) for slot in slots],
    )


@router.put("/slots/{slot_id}/substitute", response_model=SubstituteOut)
def assign_substitute(
    slot_id: str,
    payload: SubstituteAssignIn,
    current_user: User = Depends(require_roles(UserRole.admin)),
    store: ScheduleStore = Depends(get_schedule_store),
    directory: TeacherDirectory = Depends(get_teacher_directory),
) -> SubstituteOut:
    slot = SubstituteManager(store, directory).assign_substitute(
        slot_id,
        payload.substitute_teacher_id,
        actor=current_user,
    )
    return SubstituteOut(message="Substitute teacher assigned successfully.", slot=SlotOut.model_validate(slot))


@router.delete("/slots/{slot_id}/substitute", response_model=SubstituteOut)
def clear_substitute(
    slot_id: str,
    current_user: User = Depends(require_roles(UserRole.admin)),
    store: ScheduleStore = Depends(get_schedule_store),
    directory: TeacherDirectory = Depends(get_teacher_directory),
) -> SubstituteOut:
    slot = SubstituteManager(store, directory).clear_substitute(slot_id, actor=current_user)
    return SubstituteOut(message="Substitute teacher cleared successfully.", slot=SlotOut.model_validate(slot))


@router.get("/classes/{class_identifier}", response_model=list[EffectiveSlotOut])
def get_class_timetable(
    class_identifier: str,
    section: str | None = Query(default=None, max_length=50),
    date_value: str | None = Query(default=None, alias="date", description="YYYY-MM-DD"),
    current_user: User = Depends(get_current_user),
    store: ScheduleStore = Depends(get_schedule_store),
    directory: TeacherDirectory = Depends(get_teacher_directory),
) -> list[EffectiveSlotOut]:
    scope = ClassSectionScope(class_identifier=class_identifier, section=(section or "").strip() or None)
    return EffectiveScheduleResolver(store, directory).resolve(scope, parse_query_date(date_value))


@router.get("/teachers/{teacher_id}", response_model=list[EffectiveSlotOut])
def get_teacher_timetable(
    teacher_id: str,
    date_value: str | None = Query(default=None, alias="date", description="YYYY-MM-DD"),
    current_user: User = Depends(require_roles(UserRole.admin, UserRole.teacher)),
    store: ScheduleStore = Depends(get_schedule_store),
    directory: TeacherDirectory = Depends(get_teacher_directory),
) -> list[EffectiveSlotOut]:
    if current_user.role == UserRole.teacher and current_user.id != teacher_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Teachers can only view their own timetable")
    return EffectiveScheduleResolver(store, directory).resolve(TeacherScope(teacher_id), parse_query_date(date_value))


@router.get("/me", response_model=list[EffectiveSlotOut])
def get_my_timetable(
    date_value: str | None = Query(default=None, alias="date", description="YYYY-MM-DD"),
    current_user: User = Depends(require_roles(UserRole.teacher)),
    store: ScheduleStore = Depends(get_schedule_store),
    directory: TeacherDirectory = Depends(get_teacher_directory),
) -> list[EffectiveSlotOut]:
    return EffectiveScheduleResolver(store, directory).resolve(
        TeacherScope(current_user.id),
        parse_query_date(date_value),
    )
