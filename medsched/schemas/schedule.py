from pydantic import BaseModel, Field
from datetime import date, datetime, time
from typing import Optional, List
from uuid import UUID

class ScheduleCreate(BaseModel):
    doctor_id: UUID
    day_of_week: int = Field(ge=0, le=6)
    start_time: time
    end_time: time
    specific_date: Optional[date] = None
    notes: Optional[str] = Field(default=None, max_length=255)
    is_available: bool = True
    max_appointments: Optional[int] = Field(default=None, ge=1)

class ScheduleBulkCreate(BaseModel):
    schedules: List[ScheduleCreate] = Field(min_length=1)

class ScheduleUpdate(BaseModel):
    day_of_week: Optional[int] = Field(default=None, ge=0, le=6)
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    specific_date: Optional[date] = None
    notes: Optional[str] = Field(default=None, max_length=255)
    is_available: Optional[bool] = None
    max_appointments: Optional[int] = Field(default=None, ge=1)

class ScheduleRejection(BaseModel):
    # Length is checked by the service so the failure stays typed
    rejection_note: Optional[str] = None

class ScheduleResponse(BaseModel):
    id: UUID
    doctor_id: UUID
    day_of_week: int
    specific_date: Optional[date]
    schedule_date: date
    start_time: time
    end_time: time
    is_available: bool
    max_appointments: int
    notes: Optional[str]
    is_approved: bool
    status: str
    rejection_note: Optional[str]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
