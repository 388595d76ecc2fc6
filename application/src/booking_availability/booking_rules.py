"""Bookable date range and guest booking-request validation."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any

from .availability import HHMM_RE, MalformedTimeFormat, compute_available_slots, slot_values
from .schedule import DaySchedule, ReservationSettings, day_schedule_for

NAME_MIN_LEN = 2
NAME_MAX_LEN = 100
NOTES_MAX_LEN = 200


def _text(value: Any) -> str:
    """Stripped string form of a payload field; None becomes empty."""
    return "" if value is None else str(value).strip()


@dataclass
class BookingRequest:
    """What a guest submits from the booking form."""
    guest_name: str
    party_size: int
    date: date | None
    time: str
    notes: str = ""

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "BookingRequest":
        """
        Build from a JSON/form payload (camelCase keys).

        An unparseable date becomes None and an unparseable party size becomes 0,
        so validate_booking_request can report them instead of raising here.
        """
        try:
            booking_date = date.fromisoformat(str(d.get("date") or ""))
        except ValueError:
            booking_date = None
        try:
            party_size = int(d.get("partySize") or 0)
        except (ValueError, TypeError):
            party_size = 0
        return cls(
            guest_name=_text(d.get("guestName")),
            party_size=party_size,
            date=booking_date,
            time=_text(d.get("time")),
            notes=_text(d.get("notes")),
        )


def booking_date_range(settings: ReservationSettings, today: date) -> tuple[date, date]:
    """First and last date a guest may pick (inclusive)."""
    return today, today + timedelta(days=settings.booking_lead_time_days)


def is_date_bookable(target_date: date, settings: ReservationSettings, today: date) -> bool:
    first, last = booking_date_range(settings, today)
    return first <= target_date <= last


def validate_booking_request(
    request: BookingRequest,
    schedule: list[DaySchedule],
    settings: ReservationSettings,
    now: datetime,
) -> list[str]:
    """
    Check a booking request against the policy and the slots available on its date.

    Returns a list of error messages; an empty list means the request is acceptable.
    """
    errors: list[str] = []

    if len(request.guest_name) < NAME_MIN_LEN:
        errors.append(f"Name must be at least {NAME_MIN_LEN} characters.")
    elif len(request.guest_name) > NAME_MAX_LEN:
        errors.append("Name too long.")

    if request.party_size < 1:
        errors.append("At least 1 guest.")
    elif request.party_size > settings.max_guests_per_booking:
        errors.append(f"Maximum {settings.max_guests_per_booking} guests allowed for online booking.")

    if len(request.notes) > NOTES_MAX_LEN:
        errors.append(f"Notes cannot exceed {NOTES_MAX_LEN} characters.")

    if request.date is None:
        errors.append("Please select a date.")
        return errors
    if not is_date_bookable(request.date, settings, now.date()):
        errors.append("Selected date is outside the booking window.")
        return errors

    if not HHMM_RE.fullmatch(request.time):
        errors.append("Invalid time format.")
        return errors

    try:
        available = slot_values(
            compute_available_slots(request.date, day_schedule_for(schedule, request.date), settings, now)
        )
    except MalformedTimeFormat as exc:
        print(f"[booking_rules] Bad schedule window for {request.date}: {exc}", file=sys.stderr)
        available = []

    if not available:
        errors.append("No available time slots for this date.")
    elif request.time not in available:
        errors.append(f"{request.time} is not an available time on {request.date.isoformat()}.")

    return errors
