from datetime import date, time
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from medsched.core.config import settings
from medsched.core.exceptions import (
    InvalidRange,
    InvalidRejectionNote,
    NotFound,
    PermissionDenied,
    ScheduleConflict,
)
from medsched.core.utils import intervals_overlap, resolve_schedule_date, utcnow
from medsched.db.models import Doctor, Schedule, ScheduleStatus
from medsched.schemas.actor import Actor
from medsched.schemas.schedule import ScheduleCreate, ScheduleUpdate

REJECTION_NOTE_MAX_LENGTH = 255

# Fields an update may explicitly clear
NULLABLE_FIELDS = {"specific_date", "notes"}


class ScheduleService:
    """
    Doctor schedule lifecycle: create, edit, approve and reject availability
    windows without letting two live windows of one doctor overlap.

    Every write locks the owning doctor's row before the overlap check, so the
    check and the insert/update commit together and concurrent writers for the
    same doctor run one after the other.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _lock_doctor(self, doctor_id: UUID) -> Doctor:
        stmt = select(Doctor).where(Doctor.id == doctor_id).with_for_update()
        result = await self.session.execute(stmt)
        doctor = result.scalars().first()
        if not doctor:
            raise NotFound("Doctor", doctor_id)
        return doctor

    async def check_conflict(
        self,
        doctor_id: UUID,
        day_of_week: int,
        specific_date: Optional[date],
        start_time: time,
        end_time: time,
        exclude_schedule_id: Optional[UUID] = None,
    ) -> Optional[Schedule]:
        """Return the first live schedule in the same scope overlapping [start_time, end_time), if any."""
        stmt = select(Schedule).where(
            Schedule.doctor_id == doctor_id,
            Schedule.status != ScheduleStatus.REJECTED.value,
        )
        if specific_date is not None:
            stmt = stmt.where(Schedule.specific_date == specific_date)
        else:
            stmt = stmt.where(
                Schedule.specific_date.is_(None),
                Schedule.day_of_week == day_of_week,
            )
        if exclude_schedule_id is not None:
            stmt = stmt.where(Schedule.id != exclude_schedule_id)
        stmt = stmt.order_by(Schedule.start_time)

        result = await self.session.execute(stmt)
        for candidate in result.scalars().all():
            if intervals_overlap(start_time, end_time, candidate.start_time, candidate.end_time):
                return candidate
        return None

    def resolve_schedule_date(
        self, day_of_week: int, specific_date: Optional[date], today: Optional[date] = None
    ) -> date:
        return resolve_schedule_date(day_of_week, specific_date, today or date.today())

    async def get_schedule(self, schedule_id: UUID) -> Schedule:
        schedule = await self.session.get(Schedule, schedule_id)
        if not schedule:
            raise NotFound("Schedule", schedule_id)
        return schedule

    async def _get_locked_schedule(self, schedule_id: UUID) -> Schedule:
        # Re-read after locking so edits committed meanwhile are not merged over
        schedule = await self.get_schedule(schedule_id)
        await self._lock_doctor(schedule.doctor_id)
        await self.session.refresh(schedule)
        return schedule

    async def list_schedules(
        self,
        actor: Actor,
        doctor_id: Optional[UUID] = None,
        status: Optional[ScheduleStatus] = None,
    ) -> List[Schedule]:
        if actor.is_doctor:
            doctor_id = actor.id
        elif not actor.is_manager:
            raise PermissionDenied("Not allowed to manage schedules")

        stmt = select(Schedule)
        if doctor_id:
            stmt = stmt.where(Schedule.doctor_id == doctor_id)
        if status:
            stmt = stmt.where(Schedule.status == ScheduleStatus(status).value)
        stmt = stmt.order_by(Schedule.day_of_week, Schedule.start_time)

        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def _add_schedule(self, data: ScheduleCreate, actor: Actor, today: date) -> Schedule:
        if actor.is_doctor and data.doctor_id != actor.id:
            raise PermissionDenied("Doctors can only create their own schedules")
        if not (actor.is_manager or actor.is_doctor):
            raise PermissionDenied("Not allowed to create schedules")
        if data.end_time <= data.start_time:
            raise InvalidRange()

        await self._lock_doctor(data.doctor_id)
        conflict = await self.check_conflict(
            data.doctor_id, data.day_of_week, data.specific_date, data.start_time, data.end_time
        )
        if conflict:
            raise ScheduleConflict(conflict)

        # Staff-created schedules are approved on creation, doctor-created ones wait for staff
        status = ScheduleStatus.APPROVED if actor.is_manager else ScheduleStatus.PENDING
        schedule = Schedule(
            doctor_id=data.doctor_id,
            day_of_week=data.day_of_week,
            specific_date=data.specific_date,
            schedule_date=resolve_schedule_date(data.day_of_week, data.specific_date, today),
            start_time=data.start_time,
            end_time=data.end_time,
            is_available=data.is_available,
            max_appointments=data.max_appointments or settings.DEFAULT_MAX_APPOINTMENTS,
            notes=data.notes,
            is_approved=status is ScheduleStatus.APPROVED,
            status=status.value,
        )
        self.session.add(schedule)
        await self.session.flush()
        return schedule

    async def create_schedule(
        self, data: ScheduleCreate, actor: Actor, today: Optional[date] = None
    ) -> Schedule:
        schedule = await self._add_schedule(data, actor, today or date.today())
        await self.session.commit()
        await self.session.refresh(schedule)
        return schedule

    async def create_schedules(
        self, items: List[ScheduleCreate], actor: Actor, today: Optional[date] = None
    ) -> List[Schedule]:
        """Create several schedules atomically; they are also checked against each other."""
        today = today or date.today()
        new_schedules = []
        try:
            for data in items:
                new_schedules.append(await self._add_schedule(data, actor, today))
        except Exception:
            await self.session.rollback()
            raise

        await self.session.commit()
        for schedule in new_schedules:
            await self.session.refresh(schedule)
        return new_schedules

    async def update_schedule(
        self,
        schedule_id: UUID,
        schedule_update: ScheduleUpdate,
        actor: Actor,
        today: Optional[date] = None,
    ) -> Schedule:
        schedule = await self._get_locked_schedule(schedule_id)
        if actor.is_doctor and schedule.doctor_id != actor.id:
            raise PermissionDenied("Doctors can only edit their own schedules")
        if not (actor.is_manager or actor.is_doctor):
            raise PermissionDenied("Not allowed to edit schedules")

        update_data = {
            key: value
            for key, value in schedule_update.model_dump(exclude_unset=True).items()
            if value is not None or key in NULLABLE_FIELDS
        }
        day_of_week = update_data.get("day_of_week", schedule.day_of_week)
        specific_date = update_data.get("specific_date", schedule.specific_date)
        start_time = update_data.get("start_time", schedule.start_time)
        end_time = update_data.get("end_time", schedule.end_time)

        if end_time <= start_time:
            raise InvalidRange()

        conflict = await self.check_conflict(
            schedule.doctor_id,
            day_of_week,
            specific_date,
            start_time,
            end_time,
            exclude_schedule_id=schedule.id,
        )
        if conflict:
            raise ScheduleConflict(conflict)

        for key, value in update_data.items():
            setattr(schedule, key, value)
        schedule.schedule_date = resolve_schedule_date(day_of_week, specific_date, today or date.today())
        schedule.updated_at = utcnow()

        # A doctor's own edit has to be approved again
        if actor.is_doctor:
            schedule.is_approved = False
            schedule.status = ScheduleStatus.PENDING.value
            schedule.rejection_note = None

        self.session.add(schedule)
        await self.session.commit()
        await self.session.refresh(schedule)
        return schedule

    async def approve(self, schedule_id: UUID, actor: Actor) -> Schedule:
        if not actor.is_manager:
            raise PermissionDenied("Only clinic staff can approve schedules")
        schedule = await self._get_locked_schedule(schedule_id)

        conflict = await self.check_conflict(
            schedule.doctor_id,
            schedule.day_of_week,
            schedule.specific_date,
            schedule.start_time,
            schedule.end_time,
            exclude_schedule_id=schedule.id,
        )
        if conflict:
            raise ScheduleConflict(conflict)

        schedule.is_approved = True
        schedule.status = ScheduleStatus.APPROVED.value
        schedule.updated_at = utcnow()
        self.session.add(schedule)
        await self.session.commit()
        await self.session.refresh(schedule)
        return schedule

    async def reject(self, schedule_id: UUID, note: Optional[str], actor: Actor) -> Schedule:
        if not actor.is_manager:
            raise PermissionDenied("Only clinic staff can reject schedules")
        if not note or not note.strip() or len(note) > REJECTION_NOTE_MAX_LENGTH:
            raise InvalidRejectionNote()
        schedule = await self.get_schedule(schedule_id)

        schedule.is_approved = False
        schedule.status = ScheduleStatus.REJECTED.value
        schedule.rejection_note = note
        schedule.updated_at = utcnow()
        self.session.add(schedule)
        await self.session.commit()
        await self.session.refresh(schedule)
        return schedule
