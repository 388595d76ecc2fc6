#!/usr/bin/env python3
"""Create the DynamoDB restaurant config table (local or AWS). Pass --seed to store default settings and schedule."""

import os
import sys
from decimal import Decimal
from pathlib import Path

import boto3
from dotenv import load_dotenv

from booking_availability.schedule import DEFAULT_SCHEDULE, ReservationSettings

# Load .env from application/ or repo root so AWS_REGION etc. are set
_app_dir = Path(__file__).resolve().parent.parent
_repo_root = _app_dir.parent
load_dotenv(_app_dir / ".env")
load_dotenv(_repo_root / ".env")
load_dotenv(_repo_root / ".env.local")

TABLE_NAME = os.environ.get("RESTAURANT_CONFIG_TABLE_NAME", "restaurant_config")
RESTAURANT_ID = os.environ.get("RESTAURANT_ID", "main")


def _connection_kwargs() -> dict:
    endpoint = os.environ.get("DYNAMODB_ENDPOINT_URL")
    region = os.environ.get("AWS_REGION", "us-west-2")
    kwargs = {"region_name": region}
    if endpoint:
        kwargs["endpoint_url"] = endpoint
    return kwargs


def seed_defaults() -> None:
    """Write default reservation settings and weekly schedule for RESTAURANT_ID (overwrites)."""
    table = boto3.resource("dynamodb", **_connection_kwargs()).Table(TABLE_NAME)
    item = {"restaurant_id": RESTAURANT_ID}
    for key, value in ReservationSettings().to_dict().items():
        item[key] = Decimal(str(value))
    item["schedule"] = [day.to_dict() for day in DEFAULT_SCHEDULE]
    table.put_item(Item=item)
    print(f"Seeded default config for restaurant_id={RESTAURANT_ID}")


def main():
    client = boto3.client("dynamodb", **_connection_kwargs())
    try:
        client.create_table(
            TableName=TABLE_NAME,
            KeySchema=[{"AttributeName": "restaurant_id", "KeyType": "HASH"}],
            AttributeDefinitions=[{"AttributeName": "restaurant_id", "AttributeType": "S"}],
            BillingMode="PAY_PER_REQUEST",
        )
        client.get_waiter("table_exists").wait(TableName=TABLE_NAME)
        print(f"Created table: {TABLE_NAME}")
    except client.exceptions.ResourceInUseException:
        print(f"Table {TABLE_NAME} already exists.", file=sys.stderr)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if "--seed" in sys.argv[1:]:
        seed_defaults()


if __name__ == "__main__":
    main()
