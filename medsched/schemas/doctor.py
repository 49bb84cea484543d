from pydantic import BaseModel
from typing import Optional, List
from uuid import UUID
from datetime import date, datetime, time

from medsched.schemas.schedule import ScheduleResponse

class DoctorBase(BaseModel):
    name: str
    specialty: Optional[str] = None

class DoctorCreate(DoctorBase):
    pass

class DoctorResponse(DoctorBase):
    id: UUID
    created_at: datetime

    class Config:
        from_attributes = True

class DoctorSchedulesResponse(BaseModel):
    doctor: DoctorResponse
    schedules: List[ScheduleResponse]

class Slot(BaseModel):
    schedule_id: UUID
    start_time: time
    end_time: time
    max_appointments: int

class DailySlots(BaseModel):
    date: date
    slots: List[Slot]

class WeeklySlotsResponse(BaseModel):
    doctor_id: UUID
    start_date: date
    end_date: date
    daily_slots: List[DailySlots]
