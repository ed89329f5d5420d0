class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

class ValidationError(AppError):
    """Raised when timetable input is malformed or references an invalid entity."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=400, details=details)

class ConflictError(AppError):
    """Raised when a write would break a scheduling invariant.

    ``category`` is the human-readable conflict kind ("Teacher conflict",
    "Class/Section conflict", ...) and ``conflicting_slot`` the serialized
    slot that blocked the write, when one is known.
    """
    def __init__(self, message: str, category: str, conflicting_slot: dict | None = None):
        details = {"category": category}
        if conflicting_slot is not None:
            details["conflictingSlot"] = conflicting_slot
        super().__init__(message, status_code=409, details=details)
        self.category = category
        self.conflicting_slot = conflicting_slot

class NotFoundError(AppError):
    """Raised when a requested resource is not found."""
    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(f"{resource_type} with id {resource_id} not found", status_code=404)
        self.resource_type = resource_type
        self.resource_id = resource_id
