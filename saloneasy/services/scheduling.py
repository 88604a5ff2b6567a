"""
Slot arithmetic for salon bookings.

Slots are ``HH:MM`` labels produced from a salon's opening window for one
day. Nothing here touches the database: availability and the booking
conflict checks build on these functions.
"""
import re
from datetime import date, datetime, time, tzinfo
from typing import Any, Dict, Iterable, List, Optional, Union

from saloneasy.core.clock import salon_timezone
from saloneasy.core.errors import BadRequest, InvalidTimeSlot

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

_TIME_LABEL = re.compile(r"^(\d{1,2}):(\d{2})$")

TimeLike = Union[str, time]


def parse_time_label(label: TimeLike) -> time:
    """Parse ``H:MM``/``HH:MM`` into a time-of-day."""
    if isinstance(label, time):
        return label.replace(second=0, microsecond=0, tzinfo=None)
    match = _TIME_LABEL.match(str(label).strip())
    if match:
        hour, minute = int(match.group(1)), int(match.group(2))
        if hour < 24 and minute < 60:
            return time(hour, minute)
    raise InvalidTimeSlot(f"Invalid time '{label}'. Expected HH:MM")


def format_time_label(value: time) -> str:
    return f"{value.hour:02d}:{value.minute:02d}"


def normalize_time_label(label: TimeLike) -> str:
    """'9:00' -> '09:00'."""
    return format_time_label(parse_time_label(label))


def _minutes(value: TimeLike) -> int:
    parsed = parse_time_label(value)
    return parsed.hour * 60 + parsed.minute


def generate_time_slots(open_time: TimeLike, close_time: TimeLike, granularity_minutes: int) -> List[str]:
    """
    Enumerate slot labels from ``open_time`` while strictly before ``close_time``.

    The last slot is emitted even when its duration runs past closing time.
    Returns an empty list when ``open_time >= close_time``.
    """
    if granularity_minutes <= 0:
        raise BadRequest("Slot granularity must be a positive number of minutes")

    current = _minutes(open_time)
    end = _minutes(close_time)
    slots = []
    while current < end:
        slots.append(f"{current // 60:02d}:{current % 60:02d}")
        current += granularity_minutes
    return slots


def filter_available(candidate_slots: Iterable[str], occupied_times: Iterable[str]) -> List[str]:
    """Candidate slots minus occupied ones, in candidate order."""
    occupied = set(occupied_times)
    return [slot for slot in candidate_slots if slot not in occupied]


def weekday_key(day: date) -> str:
    return WEEKDAYS[day.weekday()]


def working_day_for(working_hours: Optional[Dict[str, Any]], day: date) -> Optional[Dict[str, Any]]:
    """
    The salon's ``{open, close, isOpen}`` entry for ``day``.

    None when the salon is closed that day or has no hours set.
    """
    entry = (working_hours or {}).get(weekday_key(day))
    if not entry or entry.get("isOpen") is False:
        return None
    if not entry.get("open") or not entry.get("close"):
        return None
    return entry


def to_storage_date(day: Union[date, datetime]) -> datetime:
    """Bookings store the calendar day as a midnight datetime."""
    if isinstance(day, datetime):
        day = day.date()
    return datetime.combine(day, time.min)


def slot_start(day: Union[date, datetime], label: TimeLike, tz: Optional[tzinfo] = None) -> datetime:
    if isinstance(day, datetime):
        day = day.date()
    return datetime.combine(day, parse_time_label(label), tzinfo=tz or salon_timezone())


def is_future_slot(
    day: Union[date, datetime],
    label: TimeLike,
    now: datetime,
    tz: Optional[tzinfo] = None,
) -> bool:
    """True only when the slot starts strictly after ``now``."""
    tz = tz or salon_timezone()
    if now.tzinfo is None:
        now = now.replace(tzinfo=tz)
    return slot_start(day, label, tz) > now
