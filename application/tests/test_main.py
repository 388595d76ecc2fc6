"""Unit tests for the HTTP app: config store and clock mocked."""

from __future__ import annotations

from datetime import datetime
from unittest.mock import patch
from zoneinfo import ZoneInfo

from fastapi.testclient import TestClient

from booking_availability.main import app
from booking_availability.schedule import DayOfWeek, DaySchedule, ReservationSettings, TimeWindow

client = TestClient(app)

NOW = datetime(2030, 1, 7, 18, 10, tzinfo=ZoneInfo("America/Los_Angeles"))  # Monday
SETTINGS = ReservationSettings(min_advance_reservation_hours=1, time_slot_interval_minutes=30, booking_lead_time_days=7)
SCHEDULE = [
    DaySchedule(DayOfWeek.MONDAY, True, [TimeWindow("17:00", "21:00")]),
    DaySchedule(DayOfWeek.TUESDAY, True, [TimeWindow("12:00", "14:00"), TimeWindow("18:00", "21:00")]),
    DaySchedule(DayOfWeek.WEDNESDAY, False, []),
    DaySchedule(DayOfWeek.THURSDAY, True, [TimeWindow("5:00", "21:00")]),
]


def test_health():
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


@patch("booking_availability.main._now", return_value=NOW)
@patch("booking_availability.restaurant_config.get_restaurant_schedule", return_value=SCHEDULE)
@patch("booking_availability.restaurant_config.get_reservation_settings", return_value=SETTINGS)
def test_availability_today(mock_settings, mock_schedule, mock_now):
    resp = client.get("/api/availability", params={"date": "2030-01-07"})
    assert resp.status_code == 200
    assert resp.json() == {
        "date": "2030-01-07",
        "day_of_week": "monday",
        "slots": [
            {"value": "19:30", "label": "7:30 PM"},
            {"value": "20:00", "label": "8:00 PM"},
            {"value": "20:30", "label": "8:30 PM"},
        ],
    }
    mock_settings.assert_called_once()
    mock_schedule.assert_called_once()


@patch("booking_availability.main._now", return_value=NOW)
@patch("booking_availability.restaurant_config.get_restaurant_schedule", return_value=SCHEDULE)
@patch("booking_availability.restaurant_config.get_reservation_settings", return_value=SETTINGS)
def test_availability_future_day_two_windows(mock_settings, mock_schedule, mock_now):
    resp = client.get("/api/availability", params={"date": "2030-01-08"})
    assert resp.status_code == 200
    values = [s["value"] for s in resp.json()["slots"]]
    assert values == ["12:00", "12:30", "13:00", "13:30", "18:00", "18:30", "19:00", "19:30", "20:00", "20:30"]


@patch("booking_availability.main._now", return_value=NOW)
@patch("booking_availability.restaurant_config.get_restaurant_schedule", return_value=SCHEDULE)
@patch("booking_availability.restaurant_config.get_reservation_settings", return_value=SETTINGS)
def test_availability_closed_and_unscheduled_days(mock_settings, mock_schedule, mock_now):
    resp = client.get("/api/availability", params={"date": "2030-01-09"})
    assert resp.status_code == 200
    assert resp.json()["slots"] == []
    resp = client.get("/api/availability", params={"date": "2030-01-11"})
    assert resp.status_code == 200
    assert resp.json()["day_of_week"] == "friday"
    assert resp.json()["slots"] == []


@patch("booking_availability.main._now", return_value=NOW)
@patch("booking_availability.restaurant_config.get_restaurant_schedule", return_value=SCHEDULE)
@patch("booking_availability.restaurant_config.get_reservation_settings", return_value=SETTINGS)
def test_availability_malformed_window_gives_no_slots(mock_settings, mock_schedule, mock_now):
    resp = client.get("/api/availability", params={"date": "2030-01-10"})
    assert resp.status_code == 200
    assert resp.json()["slots"] == []


@patch("booking_availability.main._now", return_value=NOW)
@patch("booking_availability.restaurant_config.get_restaurant_schedule", return_value=SCHEDULE)
@patch("booking_availability.restaurant_config.get_reservation_settings", return_value=SETTINGS)
def test_availability_outside_booking_window(mock_settings, mock_schedule, mock_now):
    resp = client.get("/api/availability", params={"date": "2030-01-06"})
    assert resp.status_code == 400
    assert resp.json() == {"detail": "Date must be between 2030-01-07 and 2030-01-14."}
    resp = client.get("/api/availability", params={"date": "2030-01-15"})
    assert resp.status_code == 400


def test_availability_bad_date_param():
    resp = client.get("/api/availability", params={"date": "soon"})
    assert resp.status_code == 422


@patch("booking_availability.restaurant_config.get_restaurant_schedule", return_value=None)
@patch("booking_availability.restaurant_config.get_reservation_settings", return_value=SETTINGS)
def test_availability_missing_config(mock_settings, mock_schedule):
    resp = client.get("/api/availability", params={"date": "2030-01-07"})
    assert resp.status_code == 503


@patch("booking_availability.restaurant_config.get_reservation_settings", side_effect=RuntimeError("boom"))
def test_availability_store_error(mock_settings):
    resp = client.get("/api/availability", params={"date": "2030-01-07"})
    assert resp.status_code == 503


@patch("booking_availability.main._now", return_value=NOW)
@patch("booking_availability.restaurant_config.get_restaurant_schedule", return_value=SCHEDULE)
@patch("booking_availability.restaurant_config.get_reservation_settings", return_value=SETTINGS)
def test_validate_booking(mock_settings, mock_schedule, mock_now):
    payload = {"guestName": "Ada", "partySize": 2, "date": "2030-01-07", "time": "20:00"}
    resp = client.post("/api/bookings/validate", json=payload)
    assert resp.status_code == 200
    assert resp.json() == {"valid": True, "errors": []}

    payload["time"] = "18:30"
    payload["partySize"] = 12
    resp = client.post("/api/bookings/validate", json=payload)
    assert resp.status_code == 200
    body = resp.json()
    assert body["valid"] is False
    assert body["errors"] == [
        "Maximum 8 guests allowed for online booking.",
        "18:30 is not an available time on 2030-01-07.",
    ]


def test_validate_booking_rejects_non_json():
    resp = client.post("/api/bookings/validate", content=b"guestName=Ada", headers={"Content-Type": "text/plain"})
    assert resp.status_code == 400
    resp = client.post("/api/bookings/validate", json=["not", "an", "object"])
    assert resp.status_code == 400


@patch("booking_availability.main._now", return_value=NOW)
@patch("booking_availability.restaurant_config.get_restaurant_schedule", return_value=SCHEDULE)
@patch("booking_availability.restaurant_config.get_reservation_settings", return_value=SETTINGS)
def test_validate_booking_non_string_fields(mock_settings, mock_schedule, mock_now):
    payload = {"guestName": 123, "partySize": 2, "date": "2030-01-07", "time": 19, "notes": ["window"]}
    resp = client.post("/api/bookings/validate", json=payload)
    assert resp.status_code == 200
    assert resp.json() == {"valid": False, "errors": ["Invalid time format."]}
