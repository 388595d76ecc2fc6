"""Weekly open hours and reservation policy, as stored in the restaurant config document."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any


def _flag(value: Any, key: str) -> bool:
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ValueError(f"{key} must be a boolean, got {value!r}")
    return value


def _number(value: Any, key: str, integral: bool = False) -> float | int:
    """Decimal, int, float or numeric string to float (or int when integral). Raises ValueError."""
    if isinstance(value, bool):
        raise ValueError(f"{key} must be a number, got {value!r}")
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(f"{key} must be a number, got {value!r}") from None
    if not number.is_finite():
        raise ValueError(f"{key} must be a number, got {value!r}")
    if integral:
        if number != number.to_integral_value():
            raise ValueError(f"{key} must be a whole number, got {value!r}")
        return int(number)
    return float(number)


class DayOfWeek(str, Enum):
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @classmethod
    def for_date(cls, d: date) -> "DayOfWeek":
        # date.weekday(): 0 = Monday, 6 = Sunday
        return list(cls)[d.weekday()]


@dataclass
class TimeWindow:
    """One service period within a day (e.g. lunch 12:00–14:00)."""
    start_time: str  # HH:MM
    end_time: str  # HH:MM
    name: str = ""

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "TimeWindow":
        return cls(
            start_time=d.get("startTime") or "",
            end_time=d.get("endTime") or "",
            name=d.get("name") or "",
        )

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "startTime": self.start_time, "endTime": self.end_time}


@dataclass
class DaySchedule:
    """Open hours for one weekday. time_slots is ignored when is_open is False."""
    day_of_week: DayOfWeek
    is_open: bool = False
    time_slots: list[TimeWindow] = field(default_factory=list)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "DaySchedule":
        """Build from a stored day entry. Raises ValueError on an unknown dayOfWeek or a non-boolean isOpen."""
        windows = d.get("timeSlots") or []
        return cls(
            day_of_week=DayOfWeek(str(d.get("dayOfWeek", "")).lower()),
            is_open=_flag(d.get("isOpen"), "isOpen"),
            time_slots=[w if isinstance(w, TimeWindow) else TimeWindow.from_dict(w) for w in windows],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "dayOfWeek": self.day_of_week.value,
            "isOpen": self.is_open,
            "timeSlots": [w.to_dict() for w in self.time_slots],
        }


@dataclass
class ReservationSettings:
    """Booking policy. Only the interval and advance hours affect slot generation."""
    min_advance_reservation_hours: float = 1
    time_slot_interval_minutes: int = 30
    booking_lead_time_days: int = 30
    max_guests_per_booking: int = 8
    max_reservation_duration_hours: float = 2

    def __post_init__(self):
        if self.time_slot_interval_minutes <= 0:
            raise ValueError(f"timeSlotIntervalMinutes must be > 0, got {self.time_slot_interval_minutes}")
        if self.min_advance_reservation_hours < 0:
            raise ValueError(f"minAdvanceReservationHours must be >= 0, got {self.min_advance_reservation_hours}")
        if self.booking_lead_time_days <= 0:
            raise ValueError(f"bookingLeadTimeDays must be > 0, got {self.booking_lead_time_days}")
        if self.max_guests_per_booking < 1:
            raise ValueError(f"maxGuestsPerBooking must be >= 1, got {self.max_guests_per_booking}")

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "ReservationSettings":
        """
        Build from the stored settings fields (camelCase). Missing fields fall back to defaults.

        Numbers may arrive as Decimal (DynamoDB) or strings (form posts). Whole-number fields
        reject fractional values rather than truncating them.
        """
        defaults = cls()

        def num(key: str, default: float, integral: bool = False):
            value = d.get(key)
            if value is None or value == "":
                return default
            return _number(value, key, integral)

        return cls(
            min_advance_reservation_hours=num("minAdvanceReservationHours", defaults.min_advance_reservation_hours),
            time_slot_interval_minutes=num("timeSlotIntervalMinutes", defaults.time_slot_interval_minutes, integral=True),
            booking_lead_time_days=num("bookingLeadTimeDays", defaults.booking_lead_time_days, integral=True),
            max_guests_per_booking=num("maxGuestsPerBooking", defaults.max_guests_per_booking, integral=True),
            max_reservation_duration_hours=num(
                "maxReservationDurationHours", defaults.max_reservation_duration_hours
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "minAdvanceReservationHours": self.min_advance_reservation_hours,
            "timeSlotIntervalMinutes": self.time_slot_interval_minutes,
            "bookingLeadTimeDays": self.booking_lead_time_days,
            "maxGuestsPerBooking": self.max_guests_per_booking,
            "maxReservationDurationHours": self.max_reservation_duration_hours,
        }


def _open(day: DayOfWeek, start: str, end: str) -> DaySchedule:
    return DaySchedule(day_of_week=day, is_open=True, time_slots=[TimeWindow(start, end, "Dinner")])


# Used when a restaurant has not saved its own schedule yet
DEFAULT_SCHEDULE: list[DaySchedule] = [
    _open(DayOfWeek.MONDAY, "17:00", "22:00"),
    _open(DayOfWeek.TUESDAY, "17:00", "22:00"),
    _open(DayOfWeek.WEDNESDAY, "17:00", "22:00"),
    _open(DayOfWeek.THURSDAY, "17:00", "22:00"),
    _open(DayOfWeek.FRIDAY, "17:00", "23:00"),
    _open(DayOfWeek.SATURDAY, "12:00", "23:00"),
    DaySchedule(day_of_week=DayOfWeek.SUNDAY, is_open=False),
]


def parse_restaurant_schedule(raw: list[dict[str, Any]] | None) -> list[DaySchedule]:
    """Parse the stored schedule list. None or empty gives an empty schedule (closed every day)."""
    return [d if isinstance(d, DaySchedule) else DaySchedule.from_dict(d) for d in (raw or [])]


def day_schedule_for(schedule: list[DaySchedule], target_date: date) -> DaySchedule | None:
    """Return the entry for target_date's weekday, or None if the schedule has none."""
    day = DayOfWeek.for_date(target_date)
    for entry in schedule:
        if entry.day_of_week == day:
            return entry
    return None
