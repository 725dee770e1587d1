"""Random reading generation for demo meters."""

import random
from datetime import datetime, timedelta, timezone

from .models import ElectricityReading

READING_INTERVAL_SECONDS = 10


def generate_readings(
    count: int,
    end: datetime | None = None,
    interval_seconds: int = READING_INTERVAL_SECONDS,
    rng: random.Random | None = None,
) -> list[ElectricityReading]:
    """Generate `count` readings of 0-1 kW, one every `interval_seconds` up to `end`.

    Returned oldest first.
    """
    end = end or datetime.now(timezone.utc).replace(microsecond=0)
    rng = rng or random.Random()

    readings = [
        ElectricityReading(
            timestamp=end - timedelta(seconds=i * interval_seconds),
            reading_kw=round(rng.random(), 4),
        )
        for i in range(count)
    ]
    return sorted(readings, key=lambda r: r.timestamp)
