from __future__ import annotations

from sqlalchemy.orm import Session

from app.models.user import User, UserRole


class TeacherDirectory:
    """Answers "is this user a teacher?" and "what is their name?" for the scheduler."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self._names: dict[str, str | None] = {}

    def _get(self, user_id: str | None) -> User | None:
        if not user_id:
            return None
        return self.db.get(User, user_id)

    def is_teacher(self, user_id: str | None) -> bool:
        user = self._get(user_id)
        return user is not None and user.role == UserRole.teacher and user.is_active

    def get_name(self, user_id: str | None) -> str | None:
        if not user_id:
            return None
        if user_id not in self._names:
            user = self._get(user_id)
            self._names[user_id] = user.name if user is not None else None
        return self._names[user_id]
