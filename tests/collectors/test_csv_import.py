"""Tests for the CSV readings importer."""

from datetime import datetime, timezone

import pytest

from priceplans import readings
from priceplans.collectors import csv_import
from priceplans.errors import InvalidReadingsError


def test_import_from_csv(tmp_path, db_path):
    csv_path = tmp_path / "readings.csv"
    csv_path.write_text(
        "timestamp,reading_kw\n"
        "2026-01-05T01:00:00,10\n"
        "2026-01-05T00:00:00,5\n"
        "2026-01-05T02:00:00,15.5\n"
    )

    result = csv_import.import_from_csv("smart-meter-0", csv_path, db_path)
    assert result == {"imported": 3, "skipped": 0}

    stored = readings.get_readings("smart-meter-0", db_path)
    assert stored[0].timestamp == datetime(2026, 1, 5, 0, 0, tzinfo=timezone.utc)
    assert stored[-1].reading_kw == 15.5


def test_bad_row_reports_line(tmp_path):
    csv_path = tmp_path / "readings.csv"
    csv_path.write_text("timestamp,reading_kw\n2026-01-05T00:00:00,5\n2026-01-05T01:00:00,lots\n")

    with pytest.raises(InvalidReadingsError, match=":3:"):
        csv_import.parse_csv(csv_path)


def test_negative_reading_rejected(tmp_path):
    csv_path = tmp_path / "readings.csv"
    csv_path.write_text("timestamp,reading_kw\n2026-01-05T00:00:00,-1\n")

    with pytest.raises(InvalidReadingsError, match="non-negative"):
        csv_import.parse_csv(csv_path)


def test_nan_reading_rejected(tmp_path):
    csv_path = tmp_path / "readings.csv"
    csv_path.write_text("timestamp,reading_kw\n2026-01-05T00:00:00,nan\n")

    with pytest.raises(InvalidReadingsError, match="finite"):
        csv_import.parse_csv(csv_path)
