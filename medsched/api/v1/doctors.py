from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from medsched.api.deps import get_current_actor, get_doctor_service
from medsched.schemas.actor import Actor
from medsched.schemas.doctor import (
    DoctorCreate,
    DoctorResponse,
    DoctorSchedulesResponse,
    WeeklySlotsResponse,
)
from medsched.services.doctor_service import DoctorService

router = APIRouter()

@router.post("/", response_model=DoctorResponse)
async def create_doctor(
    doctor_data: DoctorCreate,
    actor: Actor = Depends(get_current_actor),
    service: DoctorService = Depends(get_doctor_service),
):
    return await service.create_doctor(doctor_data, actor)

@router.get("/", response_model=List[DoctorResponse])
async def read_doctors(
    actor: Actor = Depends(get_current_actor),
    service: DoctorService = Depends(get_doctor_service),
):
    return await service.get_doctors()

@router.get("/{doctor_id}/schedules", response_model=DoctorSchedulesResponse)
async def read_doctor_schedules(
    doctor_id: UUID,
    on_date: Optional[date] = Query(default=None, alias="date"),
    actor: Actor = Depends(get_current_actor),
    service: DoctorService = Depends(get_doctor_service),
):
    return await service.get_doctor_schedules(doctor_id, on_date=on_date)

@router.get("/{doctor_id}/slots", response_model=WeeklySlotsResponse)
async def read_doctor_slots(
    doctor_id: UUID,
    start_date: Optional[date] = None,
    actor: Actor = Depends(get_current_actor),
    service: DoctorService = Depends(get_doctor_service),
):
    return await service.get_doctor_slots(doctor_id, start_date or date.today())
