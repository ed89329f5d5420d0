import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db
from app.core.exceptions import NotFoundError
from app.models.notification import Notification, NotificationType
from app.models.user import User
from app.schemas.notification import NotificationOut

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/notifications", response_model=list[NotificationOut])
def list_notifications(
    notification_type: NotificationType | None = Query(default=None),
    is_read: bool | None = Query(default=None),
    slot_id: str | None = Query(default=None, max_length=36, description="Only notices about this timetable slot"),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[NotificationOut]:
    query = select(Notification).where(Notification.user_id == current_user.id)
    if notification_type is not None:
        query = query.where(Notification.notification_type == notification_type)
    if is_read is not None:
        query = query.where(Notification.is_read.is_(is_read))
    if slot_id:
        query = query.where(Notification.related_slot_id == slot_id)
    query = query.order_by(Notification.created_at.desc(), Notification.id).offset(offset).limit(limit)
    return list(db.execute(query).scalars())


@router.post("/notifications/{notification_id}/read", response_model=NotificationOut)
def mark_notification_read(
    notification_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> NotificationOut:
    notification = db.get(Notification, notification_id)
    # Someone else's notice is reported as missing rather than forbidden.
    if notification is None or notification.user_id != current_user.id:
        raise NotFoundError("Notification", notification_id)
    if not notification.is_read:
        notification.is_read = True
        db.commit()
        db.refresh(notification)
    return notification


@router.post("/notifications/read-all")
def mark_all_notifications_read(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict[str, int]:
    result = db.execute(
        update(Notification)
        .where(Notification.user_id == current_user.id, Notification.is_read.is_(False))
        .values(is_read=True)
    )
    db.commit()
    updated = result.rowcount or 0
    logger.info("Marked %d notification(s) read for user %s", updated, current_user.id)
    return {"updated": updated}
