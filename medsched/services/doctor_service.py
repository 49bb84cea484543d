from datetime import date, timedelta
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import and_, or_, select

from medsched.core.exceptions import NotFound, PermissionDenied
from medsched.core.utils import to_db_weekday
from medsched.db.models import Doctor, Schedule, ScheduleStatus
from medsched.schemas.actor import Actor
from medsched.schemas.doctor import (
    DailySlots,
    DoctorCreate,
    DoctorResponse,
    DoctorSchedulesResponse,
    Slot,
    WeeklySlotsResponse,
)
from medsched.schemas.schedule import ScheduleResponse

UPCOMING_DAYS = 7

class DoctorService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_doctor(self, doctor_data: DoctorCreate, actor: Actor) -> Doctor:
        if not actor.is_manager:
            raise PermissionDenied("Only clinic staff can register doctors")

        doctor = Doctor(**doctor_data.model_dump())
        self.session.add(doctor)
        await self.session.commit()
        await self.session.refresh(doctor)
        return doctor

    async def get_doctors(self) -> List[Doctor]:
        result = await self.session.execute(select(Doctor).order_by(Doctor.name))
        return result.scalars().all()

    async def get_doctor(self, doctor_id: UUID) -> Doctor:
        doctor = await self.session.get(Doctor, doctor_id)
        if not doctor:
            raise NotFound("Doctor", doctor_id)
        return doctor

    async def get_doctor_schedules(
        self, doctor_id: UUID, on_date: Optional[date] = None, today: Optional[date] = None
    ) -> DoctorSchedulesResponse:
        """
        A doctor together with their approved schedules.

        For ``on_date``: the windows set for that exact date plus the weekly
        windows falling on its weekday. Otherwise: all weekly windows plus the
        date-specific ones in the coming week.
        """
        doctor = await self.get_doctor(doctor_id)

        stmt = select(Schedule).where(
            Schedule.doctor_id == doctor_id,
            Schedule.is_approved == True,
        )
        if on_date:
            stmt = stmt.where(
                or_(
                    Schedule.specific_date == on_date,
                    and_(
                        Schedule.specific_date.is_(None),
                        Schedule.day_of_week == to_db_weekday(on_date),
                    ),
                )
            )
        else:
            start = today or date.today()
            stmt = stmt.where(
                or_(
                    Schedule.specific_date.is_(None),
                    Schedule.specific_date.between(start, start + timedelta(days=UPCOMING_DAYS)),
                )
            )
        stmt = stmt.order_by(Schedule.schedule_date, Schedule.start_time)

        result = await self.session.execute(stmt)
        return DoctorSchedulesResponse(
            doctor=DoctorResponse.model_validate(doctor),
            schedules=[ScheduleResponse.model_validate(s) for s in result.scalars().all()],
        )

    async def get_doctor_slots(self, doctor_id: UUID, start_date: date) -> WeeklySlotsResponse:
        await self.get_doctor(doctor_id)

        end_date = start_date + timedelta(days=UPCOMING_DAYS - 1)
        stmt = select(Schedule).where(
            Schedule.doctor_id == doctor_id,
            Schedule.status == ScheduleStatus.APPROVED.value,
            Schedule.is_available == True,
            or_(
                Schedule.specific_date.is_(None),
                Schedule.specific_date.between(start_date, end_date),
            ),
        ).order_by(Schedule.start_time)
        result = await self.session.execute(stmt)
        schedules = result.scalars().all()

        daily_slots_list = []
        for i in range(UPCOMING_DAYS):
            current_date = start_date + timedelta(days=i)
            db_day = to_db_weekday(current_date)

            slots = [
                Slot(
                    schedule_id=schedule.id,
                    start_time=schedule.start_time,
                    end_time=schedule.end_time,
                    max_appointments=schedule.max_appointments,
                )
                for schedule in schedules
                if schedule.specific_date == current_date
                or (schedule.specific_date is None and schedule.day_of_week == db_day)
            ]
            daily_slots_list.append(DailySlots(date=current_date, slots=slots))

        return WeeklySlotsResponse(
            doctor_id=doctor_id,
            start_date=start_date,
            end_date=end_date,
            daily_slots=daily_slots_list,
        )
