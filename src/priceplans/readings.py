"""Meter reading store backed by SQLite."""

import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence

from .db import get_connection
from .errors import InvalidReadingsError, UnknownMeterError
from .models import ElectricityReading

logger = logging.getLogger(__name__)


def as_utc(reading: ElectricityReading) -> ElectricityReading:
    """Attach UTC to a reading with a naive timestamp; aware ones are left alone."""
    if reading.timestamp.tzinfo is not None:
        return reading
    return ElectricityReading(timestamp=reading.timestamp.replace(tzinfo=timezone.utc), reading_kw=reading.reading_kw)


def store_readings(
    meter_id: str, readings: Sequence[ElectricityReading], db_path: Path | None = None
) -> dict:
    """Append readings for a meter.

    Readings already stored for the same meter and timestamp are skipped.

    Returns dict with 'imported' and 'skipped' counts.
    """
    if not meter_id or not meter_id.strip():
        raise InvalidReadingsError("A smart meter ID is required")
    if not readings:
        raise InvalidReadingsError(f"No readings supplied for meter {meter_id}")

    imported = 0
    skipped = 0
    # Naive timestamps are taken as UTC so a meter never mixes naive and aware values
    readings = [as_utc(r) for r in readings]

    with get_connection(db_path) as conn:
        for reading in readings:
            try:
                conn.execute(
                    """INSERT INTO meter_readings (meter_id, timestamp, reading_kw)
                       VALUES (?, ?, ?)""",
                    (meter_id, reading.timestamp.isoformat(), reading.reading_kw),
                )
                imported += 1
            except sqlite3.IntegrityError:
                skipped += 1

        conn.commit()

    logger.info("Stored %d readings for %s (%d duplicates skipped)", imported, meter_id, skipped)
    return {"imported": imported, "skipped": skipped}


def get_readings(meter_id: str, db_path: Path | None = None) -> list[ElectricityReading]:
    """All readings recorded for a meter, oldest first.

    Raises:
        UnknownMeterError: nothing is stored for the meter.
    """
    with get_connection(db_path) as conn:
        rows = conn.execute(
            """SELECT timestamp, reading_kw FROM meter_readings
               WHERE meter_id = ?
               ORDER BY timestamp""",
            (meter_id,),
        ).fetchall()

    if not rows:
        raise UnknownMeterError(meter_id)

    return [
        as_utc(ElectricityReading(timestamp=datetime.fromisoformat(row["timestamp"]), reading_kw=row["reading_kw"]))
        for row in rows
    ]


def list_meters(db_path: Path | None = None) -> list[str]:
    """Meter IDs that have at least one reading."""
    with get_connection(db_path) as conn:
        rows = conn.execute("SELECT DISTINCT meter_id FROM meter_readings ORDER BY meter_id").fetchall()
    return [row["meter_id"] for row in rows]
