"""Time-slot availability: enumerate bookable start times for one date."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Any

from .schedule import DaySchedule, ReservationSettings

HHMM_RE = re.compile(r"([01]\d|2[0-3]):([0-5]\d)")


class MalformedTimeFormat(ValueError):
    """A window boundary is not a zero-padded 24-hour HH:MM string."""

    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"Expected HH:MM (24-hour), got {value!r}")


@dataclass(frozen=True)
class Slot:
    """A bookable start time (value is what gets submitted, label is for display)."""
    value: str  # HH:MM
    label: str  # e.g. "5:00 PM"

    def to_dict(self) -> dict[str, str]:
        return {"value": self.value, "label": self.label}


def parse_hhmm(value: Any) -> time:
    """Parse 'HH:MM' into a time. Raises MalformedTimeFormat otherwise."""
    if not isinstance(value, str):
        raise MalformedTimeFormat(value)
    match = HHMM_RE.fullmatch(value)
    if not match:
        raise MalformedTimeFormat(value)
    return time(int(match.group(1)), int(match.group(2)))


def format_slot_label(t: time) -> str:
    """12-hour label without a leading zero, e.g. 17:00 -> '5:00 PM'."""
    hour = t.hour % 12 or 12
    suffix = "AM" if t.hour < 12 else "PM"
    return f"{hour}:{t.minute:02d} {suffix}"


def _at(target_date: date, t: time, now: datetime) -> datetime:
    # Candidates share now's tzinfo so aware and naive values never mix
    return datetime.combine(target_date, t, tzinfo=now.tzinfo)


def _instant(dt: datetime) -> datetime:
    # Aware values compare as UTC instants
    return dt.astimezone(timezone.utc) if dt.tzinfo is not None else dt


def compute_available_slots(
    target_date: date,
    day_schedule: DaySchedule | None,
    settings: ReservationSettings,
    now: datetime,
) -> list[Slot]:
    """
    Return the bookable slots for target_date.

    day_schedule is the entry for target_date's weekday (already resolved by the caller).
    Each window yields start, start + interval, ... while strictly before its end time;
    candidates earlier than now + minAdvanceReservationHours are dropped
    (compared as real instants when now is timezone-aware). Windows are
    concatenated in the order given and duplicate HH:MM values keep their first position.

    Raises MalformedTimeFormat if a window boundary is not HH:MM.
    """
    if day_schedule is None or not day_schedule.is_open or not day_schedule.time_slots:
        return []

    step = timedelta(minutes=settings.time_slot_interval_minutes)
    earliest_bookable = _instant(now) + timedelta(hours=settings.min_advance_reservation_hours)

    slots: list[Slot] = []
    seen: set[str] = set()
    for window in day_schedule.time_slots:
        start = _at(target_date, parse_hhmm(window.start_time), now)
        end = _at(target_date, parse_hhmm(window.end_time), now)

        candidate = start
        while candidate < end:
            if _instant(candidate) >= earliest_bookable:
                value = candidate.strftime("%H:%M")
                if value not in seen:
                    seen.add(value)
                    slots.append(Slot(value=value, label=format_slot_label(candidate.time())))
            candidate += step

    return slots


def slot_values(slots: list[Slot]) -> list[str]:
    """Just the HH:MM values, in order."""
    return [s.value for s in slots]
