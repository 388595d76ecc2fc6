"""FastAPI app: GET /api/availability (bookable time slots for a date) and POST /api/bookings/validate."""

from __future__ import annotations

import os
import sys
import traceback
from datetime import date, datetime
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

# Load .env when running locally (application/.env or repo root .env / .env.local)
_app_dir = Path(__file__).resolve().parent.parent.parent  # application/
_repo_root = _app_dir.parent
load_dotenv(_app_dir / ".env")
load_dotenv(_app_dir / ".env.local")
load_dotenv(_repo_root / ".env")
load_dotenv(_repo_root / ".env.local")

from fastapi import FastAPI, Query, Request, Response
from fastapi.responses import JSONResponse

from . import availability, booking_rules, restaurant_config, schedule

DEFAULT_TZ = "America/Los_Angeles"

app = FastAPI(title="Restaurant Reservation Availability", version="0.1.0")


def _tz() -> ZoneInfo:
    try:
        return ZoneInfo(os.environ.get("TIMEZONE", DEFAULT_TZ))
    except Exception:
        return ZoneInfo(DEFAULT_TZ)


def _now() -> datetime:
    """Current time in the restaurant's timezone."""
    return datetime.now(_tz())


def _load_config() -> tuple[schedule.ReservationSettings, list[schedule.DaySchedule]] | None:
    """Settings and schedule from the config store. None if either is missing or unreadable."""
    try:
        settings = restaurant_config.get_reservation_settings()
        day_schedules = restaurant_config.get_restaurant_schedule()
    except Exception:
        traceback.print_exc(file=sys.stderr)
        return None
    if settings is None or day_schedules is None:
        return None
    return settings, day_schedules


def _config_unavailable() -> Response:
    return JSONResponse(
        status_code=503,
        content={"detail": "Essential restaurant information (settings or schedule) could not be loaded."},
    )


@app.get("/api/availability")
async def get_availability(target_date: date = Query(..., alias="date")) -> Response:
    """Slots a guest can pick on the given date (YYYY-MM-DD)."""
    config = _load_config()
    if config is None:
        return _config_unavailable()
    settings, day_schedules = config

    now = _now()
    if not booking_rules.is_date_bookable(target_date, settings, now.date()):
        first, last = booking_rules.booking_date_range(settings, now.date())
        return JSONResponse(
            status_code=400,
            content={"detail": f"Date must be between {first.isoformat()} and {last.isoformat()}."},
        )

    day = schedule.day_schedule_for(day_schedules, target_date)
    try:
        slots = availability.compute_available_slots(target_date, day, settings, now)
    except availability.MalformedTimeFormat as exc:
        # Shown to the guest as "no available time slots"
        print(f"[main] Bad schedule window for {target_date.isoformat()}: {exc}", file=sys.stderr)
        slots = []

    return JSONResponse(
        content={
            "date": target_date.isoformat(),
            "day_of_week": schedule.DayOfWeek.for_date(target_date).value,
            "slots": [s.to_dict() for s in slots],
        }
    )


@app.post("/api/bookings/validate")
async def validate_booking(request: Request) -> Response:
    """Validate a guest booking request (JSON) before it is handed to booking creation."""
    try:
        payload: Any = await request.json()
    except ValueError:
        return JSONResponse(status_code=400, content={"detail": "Body must be JSON"})
    if not isinstance(payload, dict):
        return JSONResponse(status_code=400, content={"detail": "Body must be a JSON object"})

    config = _load_config()
    if config is None:
        return _config_unavailable()
    settings, day_schedules = config

    booking = booking_rules.BookingRequest.from_dict(payload)
    errors = booking_rules.validate_booking_request(booking, day_schedules, settings, _now())
    return JSONResponse(content={"valid": not errors, "errors": errors})


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
