"""Average power estimation from irregular meter readings."""

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Sequence

from .errors import InsufficientDataError, InvalidReadingsError
from .models import ConsumptionSummary, ElectricityReading

SECONDS_PER_HOUR = Decimal(3600)


def sort_readings(readings: Sequence[ElectricityReading]) -> list[ElectricityReading]:
    """Return a new list of readings ordered by timestamp (stable)."""
    try:
        return sorted(readings, key=lambda r: r.timestamp)
    except TypeError as e:
        raise InvalidReadingsError(f"Readings mix timezone-aware and naive timestamps ({e})") from e


def to_decimal(value: float) -> Decimal:
    """Convert a float to Decimal via its repr, avoiding binary noise."""
    return Decimal(str(value))


def to_seconds(delta: timedelta) -> Decimal:
    """Exact length of a timedelta in seconds."""
    return Decimal(delta.days * 86400 + delta.seconds) + Decimal(delta.microseconds) / Decimal(1_000_000)


def hours_between(start: datetime, end: datetime) -> Decimal:
    """Elapsed hours between two datetimes."""
    return to_seconds(end - start) / SECONDS_PER_HOUR


def summarize_consumption(readings: Sequence[ElectricityReading]) -> ConsumptionSummary:
    """Summarize a reading series as an average power over its span.

    Each consecutive pair of readings (after sorting by timestamp)
    contributes the mean of its two endpoint readings. The result is the
    arithmetic mean of those pairwise means, not a time-weighted integral,
    so unequal intervals all count the same.

    Raises:
        InsufficientDataError: fewer than 2 readings were supplied.
    """
    if len(readings) < 2:
        raise InsufficientDataError(len(readings))

    ordered = sort_readings(readings)

    elapsed_hours = Decimal(0)
    power_reading_sum = Decimal(0)
    for previous, current in zip(ordered, ordered[1:]):
        elapsed_hours += hours_between(previous.timestamp, current.timestamp)
        power_reading_sum += (to_decimal(previous.reading_kw) + to_decimal(current.reading_kw)) / 2

    interval_count = len(ordered) - 1
    return ConsumptionSummary(
        average_power_kw=power_reading_sum / interval_count,
        elapsed_hours=elapsed_hours,
        interval_count=interval_count,
    )


def average_power(readings: Sequence[ElectricityReading]) -> Decimal:
    """Average power in kW implied by a reading series."""
    return summarize_consumption(readings).average_power_kw
