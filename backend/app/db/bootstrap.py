from __future__ import annotations

import logging

from sqlalchemy import inspect, text

from app.core.config import get_settings
from app.db.base import Base
from app.db.session import engine

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS: dict[str, set[str]] = {
    "users": {"id", "name", "role", "is_active"},
    "timetable_slots": {
        "id",
        "day_of_week",
        "start_time",
        "end_time",
        "class_identifier",
        "section",
        "subject",
        "teacher_id",
        "substitute_teacher_id",
        "date",
    },
    "activity_logs": {"id", "action"},
    "notifications": {"id", "user_id", "related_slot_id"},
}


def _ensure_tables() -> None:
    import app.models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def _ensure_column(table_name: str, column_name: str, ddl_type: str) -> None:
    with engine.begin() as connection:
        inspector = inspect(connection)
        if table_name not in set(inspector.get_table_names()):
            return
        column_names = {item["name"] for item in inspector.get_columns(table_name)}
        if column_name in column_names:
            return
        connection.execute(text(f"ALTER TABLE {table_name} ADD COLUMN {column_name} {ddl_type}"))
        logger.info("Added missing column %s.%s", table_name, column_name)


def ensure_runtime_schema_compatibility() -> None:
    """Bring long-lived developer databases up to the current schema.

    Additive only: tables are created when ``auto_create_schema`` is on, and
    columns introduced after the first release are added in place. Anything
    else is left to ``alembic upgrade head``.
    """
    if get_settings().auto_create_schema:
        _ensure_tables()
    _ensure_column("timetable_slots", "substitute_teacher_id", "VARCHAR(36)")
