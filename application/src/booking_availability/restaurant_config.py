"""DynamoDB restaurant config store (read-only): reservation settings and weekly schedule."""

from __future__ import annotations

import os
import sys
from typing import Any

import boto3
from boto3.dynamodb.types import TypeDeserializer
from botocore.config import Config

from .schedule import DaySchedule, ReservationSettings, parse_restaurant_schedule

PK = "restaurant_id"
DEFAULT_RESTAURANT_ID = "main"

SETTINGS_FIELDS = (
    "minAdvanceReservationHours",
    "maxReservationDurationHours",
    "maxGuestsPerBooking",
    "timeSlotIntervalMinutes",
    "bookingLeadTimeDays",
)

_DESERIALIZER = TypeDeserializer()


def _client():
    endpoint = os.environ.get("DYNAMODB_ENDPOINT_URL")
    region = os.environ.get("AWS_REGION", "us-west-2")
    kwargs = {"region_name": region}
    if endpoint:
        kwargs["endpoint_url"] = endpoint
    return boto3.client("dynamodb", config=Config(retries={"mode": "standard", "max_attempts": 3}), **kwargs)


def _table_name() -> str:
    return os.environ.get("RESTAURANT_CONFIG_TABLE_NAME", "restaurant_config")


def _restaurant_id(restaurant_id: str | None) -> str:
    return restaurant_id or os.environ.get("RESTAURANT_ID", DEFAULT_RESTAURANT_ID)


def _from_ddb(attr: dict[str, Any]) -> Any:
    """Deserialize a DynamoDB attribute value to Python (numbers come back as Decimal)."""
    return _DESERIALIZER.deserialize(attr)


def _get_item(restaurant_id: str, projection: str, names: dict[str, str] | None = None) -> dict[str, Any] | None:
    """Fetch the projected attributes of the config item, deserialized. None if table or item is missing."""
    client = _client()
    table = _table_name()
    kwargs: dict[str, Any] = {
        "TableName": table,
        "Key": {PK: {"S": restaurant_id}},
        "ProjectionExpression": projection,
    }
    if names:
        kwargs["ExpressionAttributeNames"] = names
    try:
        resp = client.get_item(**kwargs)
    except client.exceptions.ResourceNotFoundException:
        print(f"[restaurant_config] Table {table} not found", file=sys.stderr)
        return None
    item = resp.get("Item")
    if not item:
        print(f"[restaurant_config] No config item for {PK}={restaurant_id} in {table}", file=sys.stderr)
        return None
    return {k: _from_ddb(v) for k, v in item.items()}


def get_reservation_settings(restaurant_id: str | None = None) -> ReservationSettings | None:
    """Return the restaurant's reservation settings, or None if nothing is stored."""
    rid = _restaurant_id(restaurant_id)
    item = _get_item(rid, ", ".join(SETTINGS_FIELDS))
    if item is None:
        return None
    return ReservationSettings.from_dict(item)


def get_restaurant_schedule(restaurant_id: str | None = None) -> list[DaySchedule] | None:
    """Return the weekly schedule (one entry per weekday), or None if no schedule is stored."""
    rid = _restaurant_id(restaurant_id)
    item = _get_item(rid, "schedule")
    if item is None:
        return None
    raw = item.get("schedule")
    if not raw:
        print(f"[restaurant_config] Config item for {PK}={rid} has no 'schedule' field", file=sys.stderr)
        return None
    return parse_restaurant_schedule(raw)
