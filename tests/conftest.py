from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from priceplans import db
from priceplans.models import DayOfWeek, ElectricityReading, PeakTimeMultiplier, PricePlan


def _make_readings(start: datetime, values: list[float], step: timedelta = timedelta(hours=1)):
    """Readings at `start`, `start + step`, ... with the given kW values."""
    return [ElectricityReading(start + i * step, value) for i, value in enumerate(values)]


def _make_plan(supplier: str, unit_rate, **multipliers) -> PricePlan:
    """Plan with optional day multipliers, e.g. make_plan("A", 2, monday=2)."""
    return PricePlan(
        supplier=supplier,
        unit_rate=Decimal(str(unit_rate)),
        peak_time_multipliers=tuple(
            PeakTimeMultiplier(DayOfWeek.parse(day), Decimal(str(m))) for day, m in multipliers.items()
        ),
    )


@pytest.fixture
def monday():
    # 2026-01-05 is a Monday
    return datetime(2026, 1, 5)


@pytest.fixture
def make_readings():
    return _make_readings


@pytest.fixture
def make_plan():
    return _make_plan


@pytest.fixture
def example_readings(monday):
    """5, 10 and 15 kW an hour apart on a Monday: 10 kW average over 2 hours."""
    return _make_readings(monday, [5.0, 10.0, 15.0])


@pytest.fixture
def db_path(tmp_path):
    path = tmp_path / "readings.db"
    db.init_db(path)
    return path
