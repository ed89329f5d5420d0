from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from app.models.activity_log import ActivityLog
from app.models.user import User

logger = logging.getLogger(__name__)

SLOT_ENTITY = "timetable_slot"


def log_activity(
    db: Session,
    *,
    user: User | None,
    action: str,
    entity_type: str | None = SLOT_ENTITY,
    entity_id: str | None = None,
    details: dict | None = None,
) -> ActivityLog:
    record = ActivityLog(
        user_id=user.id if user is not None else None,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        details=details or {},
    )
    db.add(record)
    logger.debug("Recorded %s on %s %s", action, entity_type, entity_id)
    return record
