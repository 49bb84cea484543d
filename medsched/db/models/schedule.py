from enum import Enum
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, TYPE_CHECKING
from datetime import date, datetime, time
from uuid import UUID, uuid4

from sqlalchemy import DateTime

from medsched.core.utils import utcnow

if TYPE_CHECKING:
    from .doctor import Doctor

class ScheduleStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

class Schedule(SQLModel, table=True):
    __tablename__ = "doctor_schedules"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    doctor_id: UUID = Field(foreign_key="doctors.id", index=True)
    day_of_week: int # 0=Sunday..6=Saturday
    specific_date: Optional[date] = Field(default=None, index=True)
    schedule_date: date = Field(index=True)
    start_time: time
    end_time: time
    is_available: bool = Field(default=True)
    max_appointments: int = Field(default=10)
    notes: Optional[str] = Field(default=None, max_length=255)
    is_approved: bool = Field(default=False)
    status: str = Field(default=ScheduleStatus.PENDING.value, max_length=16)
    rejection_note: Optional[str] = Field(default=None, max_length=255)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))

    doctor: "Doctor" = Relationship(back_populates="schedules")

    @property
    def is_recurring(self) -> bool:
        return self.specific_date is None
