from datetime import date, time, timedelta
from uuid import uuid4

import pytest

from medsched.core.exceptions import NotFound, PermissionDenied
from medsched.schemas.actor import Actor
from medsched.schemas.doctor import DoctorCreate
from medsched.schemas.schedule import ScheduleCreate
from medsched.services.doctor_service import DoctorService
from medsched.services.schedule_service import ScheduleService

TODAY = date(2024, 6, 1)  # Saturday
MONDAY = 1


@pytest.fixture
def doctors(session) -> DoctorService:
    return DoctorService(session)


@pytest.fixture
def schedules(session) -> ScheduleService:
    return ScheduleService(session)


def window(doctor_id, start, end, day=MONDAY, specific_date=None) -> ScheduleCreate:
    return ScheduleCreate(
        doctor_id=doctor_id, day_of_week=day, start_time=start, end_time=end, specific_date=specific_date
    )


@pytest.mark.asyncio
async def test_upcoming_view_covers_the_next_seven_days(doctors, schedules, doctor, staff):
    await schedules.create_schedule(window(doctor.id, time(9), time(10)), staff, today=TODAY)
    for offset, hour in ((7, 11), (8, 12), (-1, 13)):
        await schedules.create_schedule(
            window(doctor.id, time(hour), time(hour + 1), specific_date=TODAY + timedelta(days=offset)),
            staff,
            today=TODAY,
        )

    view = await doctors.get_doctor_schedules(doctor.id, today=TODAY)

    assert view.doctor.id == doctor.id
    assert sorted((s.specific_date, s.start_time) for s in view.schedules if s.specific_date) == [
        (TODAY + timedelta(days=7), time(11))
    ]
    assert [s.start_time for s in view.schedules if s.specific_date is None] == [time(9)]


@pytest.mark.asyncio
async def test_upcoming_view_skips_pending_schedules(doctors, schedules, doctor, staff):
    own = Actor(id=doctor.id, role="doctor")
    await schedules.create_schedule(window(doctor.id, time(9), time(10)), own, today=TODAY)

    view = await doctors.get_doctor_schedules(doctor.id, today=TODAY)
    assert view.schedules == []


@pytest.mark.asyncio
async def test_date_view_matches_weekday_and_exact_date(doctors, schedules, doctor, staff):
    monday = date(2024, 6, 3)
    await schedules.create_schedule(window(doctor.id, time(9), time(10)), staff, today=TODAY)
    await schedules.create_schedule(window(doctor.id, time(9), time(10), day=2), staff, today=TODAY)
    await schedules.create_schedule(
        window(doctor.id, time(15), time(16), specific_date=monday), staff, today=TODAY
    )

    view = await doctors.get_doctor_schedules(doctor.id, on_date=monday)
    assert [(s.day_of_week, s.start_time) for s in view.schedules] == [(MONDAY, time(9)), (MONDAY, time(15))]


@pytest.mark.asyncio
async def test_schedules_of_unknown_doctor(doctors):
    with pytest.raises(NotFound):
        await doctors.get_doctor_schedules(uuid4(), today=TODAY)


@pytest.mark.asyncio
async def test_weekly_slots_skip_unavailable_windows(doctors, schedules, doctor, staff):
    await schedules.create_schedule(window(doctor.id, time(9), time(10)), staff, today=TODAY)
    closed = ScheduleCreate(
        doctor_id=doctor.id, day_of_week=MONDAY, start_time=time(11), end_time=time(12), is_available=False
    )
    await schedules.create_schedule(closed, staff, today=TODAY)

    week = await doctors.get_doctor_slots(doctor.id, TODAY)

    assert week.end_date == date(2024, 6, 7)
    by_date = {day.date: day.slots for day in week.daily_slots}
    assert [slot.start_time for slot in by_date[date(2024, 6, 3)]] == [time(9)]
    assert by_date[TODAY] == []


@pytest.mark.asyncio
async def test_register_doctor(doctors, staff):
    created = await doctors.create_doctor(DoctorCreate(name="Dr. Lena Okafor", specialty="Dermatology"), staff)
    assert [d.name for d in await doctors.get_doctors()] == ["Dr. Lena Okafor"]

    with pytest.raises(PermissionDenied):
        await doctors.create_doctor(DoctorCreate(name="Dr. Nobody"), Actor(id=created.id, role="patient"))
