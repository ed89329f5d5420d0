from app.models.activity_log import ActivityLog  # noqa: F401
from app.models.notification import Notification, NotificationType  # noqa: F401
from app.models.timetable_slot import DayOfWeek, TimetableSlot  # noqa: F401
from app.models.user import User, UserRole  # noqa: F401
