"""CSV reading importer.

CSV format: timestamp, reading_kw
Timestamps are ISO 8601; readings are instantaneous power in kW.
"""

import csv
from datetime import datetime
from pathlib import Path

from ..errors import InvalidReadingsError
from ..models import ElectricityReading
from ..readings import store_readings


def parse_csv(csv_path: Path) -> list[ElectricityReading]:
    """Parse a readings CSV file."""
    readings = []
    with open(csv_path, newline="") as f:
        reader = csv.DictReader(f)
        for line_no, row in enumerate(reader, start=2):
            try:
                readings.append(
                    ElectricityReading(
                        timestamp=datetime.fromisoformat(row["timestamp"].strip()),
                        reading_kw=float(row["reading_kw"]),
                    )
                )
            except (KeyError, ValueError, AttributeError) as e:
                raise InvalidReadingsError(f"{csv_path}:{line_no}: invalid reading ({e})") from e
    return readings


def import_from_csv(meter_id: str, csv_path: Path, db_path: Path | None = None) -> dict:
    """Import a meter's readings from a CSV file.

    Returns dict with 'imported' and 'skipped' counts.
    """
    readings = parse_csv(csv_path)
    return store_readings(meter_id, readings, db_path)
