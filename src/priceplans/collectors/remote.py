"""Remote readings service collector.

Fetches a meter's readings from a JSON readings endpoint:

    GET {base_url}/readings/read/{meter_id}

    {
        "smartMeterId": "smart-meter-0",
        "electricityReadings": [
            {"time": "2026-01-29T10:00:00+00:00", "reading": 0.503},
            ...
        ]
    }

A bare list of reading objects is also accepted.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any

import httpx

from ..errors import RemoteReadingsError, UnknownMeterError
from ..models import ElectricityReading
from ..readings import store_readings

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


def parse_readings(payload: Any) -> list[ElectricityReading]:
    """Turn a readings response body into ElectricityReading objects."""
    if isinstance(payload, dict):
        items = payload.get("electricityReadings") or []
    elif isinstance(payload, list):
        items = payload
    else:
        raise RemoteReadingsError(f"Unexpected readings payload: {type(payload).__name__}")

    readings = []
    for item in items:
        try:
            readings.append(
                ElectricityReading(
                    timestamp=datetime.fromisoformat(item["time"]),
                    reading_kw=float(item["reading"]),
                )
            )
        except (KeyError, TypeError, ValueError) as e:
            raise RemoteReadingsError(f"Invalid reading in response: {item!r}") from e
    return readings


def fetch_readings(
    meter_id: str,
    base_url: str,
    client: httpx.Client | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> list[ElectricityReading]:
    """Fetch all readings for a meter from the remote service."""
    url = f"{base_url.rstrip('/')}/readings/read/{meter_id}"

    owns_client = client is None
    client = client or httpx.Client(timeout=timeout)
    try:
        response = client.get(url)
        if response.status_code == 404:
            raise UnknownMeterError(meter_id)
        response.raise_for_status()
        payload = response.json()
    except httpx.HTTPStatusError as e:
        raise RemoteReadingsError(
            f"HTTP error from readings service: {e.response.status_code} - {e.response.reason_phrase}"
        ) from e
    except httpx.HTTPError as e:
        raise RemoteReadingsError(f"Network error connecting to readings service: {e}") from e
    except ValueError as e:
        raise RemoteReadingsError(f"Readings service returned invalid JSON: {e}") from e
    finally:
        if owns_client:
            client.close()

    readings = parse_readings(payload)
    logger.info("Fetched %d readings for %s from %s", len(readings), meter_id, url)
    return readings


def fetch_and_import(
    meter_id: str,
    base_url: str,
    db_path: Path | None = None,
    client: httpx.Client | None = None,
) -> dict:
    """Fetch a meter's readings and store them.

    Returns dict with 'imported' and 'skipped' counts.
    """
    readings = fetch_readings(meter_id, base_url, client=client)
    if not readings:
        return {"imported": 0, "skipped": 0}
    return store_readings(meter_id, readings, db_path)
