"""Typed failures raised by the scheduling services.

The API layer turns each of these into a JSON error response; services only
raise them.
"""
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from medsched.db.models import Schedule


class ScheduleError(Exception):
    code = "schedule_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRange(ScheduleError):
    code = "invalid_range"

    def __init__(self, message: str = "End time must be after start time"):
        super().__init__(message)


class ScheduleConflict(ScheduleError):
    code = "time_conflict"

    def __init__(self, conflicting: "Schedule"):
        super().__init__("This schedule conflicts with an existing schedule for this doctor.")
        self.conflicting = conflicting
        # Snapshot now, a later rollback expires the instance
        self.details = self._describe(conflicting)

    def to_dict(self) -> dict:
        return dict(self.details)

    @staticmethod
    def _describe(s: "Schedule") -> dict:
        return {
            "schedule_id": str(s.id),
            "scope": "specific_date" if s.specific_date else "recurring",
            "day_of_week": s.day_of_week,
            "specific_date": s.specific_date.isoformat() if s.specific_date else None,
            "start_time": s.start_time.isoformat(),
            "end_time": s.end_time.isoformat(),
            "status": s.status,
        }


class NotFound(ScheduleError):
    code = "not_found"

    def __init__(self, entity: str, entity_id):
        super().__init__(f"{entity} not found")
        self.entity = entity
        self.entity_id = entity_id


class InvalidRejectionNote(ScheduleError):
    code = "invalid_rejection_note"

    def __init__(self, message: str = "A rejection note of at most 255 characters is required"):
        super().__init__(message)


class PermissionDenied(ScheduleError):
    code = "permission_denied"
