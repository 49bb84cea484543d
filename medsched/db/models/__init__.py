from sqlmodel import SQLModel
from .doctor import Doctor
from .schedule import Schedule, ScheduleStatus

__all__ = [
    "SQLModel",
    "Doctor",
    "Schedule",
    "ScheduleStatus",
]
