from datetime import date, datetime, time, timedelta, timezone
from typing import Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_db_weekday(day: date) -> int:
    # Python date.weekday() is 0=Monday..6=Sunday, schedules use 0=Sunday..6=Saturday
    python_day = day.weekday()
    return 0 if python_day == 6 else python_day + 1


def intervals_overlap(start: time, end: time, other_start: time, other_end: time) -> bool:
    """Half-open [start, end) against [other_start, other_end); touching ends do not overlap."""
    return start < other_end and end > other_start


def resolve_schedule_date(day_of_week: int, specific_date: Optional[date], today: date) -> date:
    """
    Anchor date for a schedule.

    A date-specific schedule is anchored to its own date. A weekly schedule is
    anchored to today when the weekday matches, otherwise to the next date
    after today falling on ``day_of_week``.
    """
    if specific_date is not None:
        return specific_date
    days_ahead = (day_of_week - to_db_weekday(today)) % 7
    return today + timedelta(days=days_ahead)
