from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends

from medsched.api.deps import get_current_actor, get_schedule_service
from medsched.core.exceptions import PermissionDenied
from medsched.core.logger import logger
from medsched.db.models import ScheduleStatus
from medsched.schemas.actor import Actor
from medsched.schemas.schedule import (
    ScheduleBulkCreate,
    ScheduleCreate,
    ScheduleRejection,
    ScheduleResponse,
    ScheduleUpdate,
)
from medsched.services.schedule_service import ScheduleService

router = APIRouter()

@router.post("/", response_model=ScheduleResponse)
async def create_schedule(
    payload: ScheduleCreate,
    actor: Actor = Depends(get_current_actor),
    service: ScheduleService = Depends(get_schedule_service),
):
    schedule = await service.create_schedule(payload, actor)
    logger.info(f"Schedule {schedule.id} created for doctor {schedule.doctor_id} by {actor.role} {actor.id} ({schedule.status})")
    return schedule

@router.post("/bulk", response_model=List[ScheduleResponse])
async def create_schedules(
    payload: ScheduleBulkCreate,
    actor: Actor = Depends(get_current_actor),
    service: ScheduleService = Depends(get_schedule_service),
):
    schedules = await service.create_schedules(payload.schedules, actor)
    logger.info(f"{len(schedules)} schedules created by {actor.role} {actor.id}")
    return schedules

@router.get("/", response_model=List[ScheduleResponse])
async def read_schedules(
    doctor_id: Optional[UUID] = None,
    status: Optional[ScheduleStatus] = None,
    actor: Actor = Depends(get_current_actor),
    service: ScheduleService = Depends(get_schedule_service),
):
    return await service.list_schedules(actor, doctor_id=doctor_id, status=status)

@router.get("/{schedule_id}", response_model=ScheduleResponse)
async def read_schedule(
    schedule_id: UUID,
    actor: Actor = Depends(get_current_actor),
    service: ScheduleService = Depends(get_schedule_service),
):
    schedule = await service.get_schedule(schedule_id)
    # Doctors only see their own schedules here; the public view lives under /doctors
    if not actor.is_manager and not (actor.is_doctor and schedule.doctor_id == actor.id):
        raise PermissionDenied("Not allowed to view this schedule")
    return schedule

@router.patch("/{schedule_id}", response_model=ScheduleResponse)
async def update_schedule(
    schedule_id: UUID,
    payload: ScheduleUpdate,
    actor: Actor = Depends(get_current_actor),
    service: ScheduleService = Depends(get_schedule_service),
):
    schedule = await service.update_schedule(schedule_id, payload, actor)
    logger.info(f"Schedule {schedule.id} updated by {actor.role} {actor.id} ({schedule.status})")
    return schedule

@router.post("/{schedule_id}/approve", response_model=ScheduleResponse)
async def approve_schedule(
    schedule_id: UUID,
    actor: Actor = Depends(get_current_actor),
    service: ScheduleService = Depends(get_schedule_service),
):
    schedule = await service.approve(schedule_id, actor)
    logger.info(f"Schedule {schedule.id} approved by {actor.id}")
    return schedule

@router.post("/{schedule_id}/reject", response_model=ScheduleResponse)
async def reject_schedule(
    schedule_id: UUID,
    payload: ScheduleRejection,
    actor: Actor = Depends(get_current_actor),
    service: ScheduleService = Depends(get_schedule_service),
):
    schedule = await service.reject(schedule_id, payload.rejection_note, actor)
    logger.info(f"Schedule {schedule.id} rejected by {actor.id}")
    return schedule
