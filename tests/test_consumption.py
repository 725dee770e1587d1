from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from priceplans.consumption import average_power, hours_between, summarize_consumption
from priceplans.errors import InsufficientDataError, InvalidReadingsError
from priceplans.models import ElectricityReading


def test_average_of_pairwise_means(example_readings):
    """mean(7.5, 12.5) = 10 kW over 2 hours."""
    summary = summarize_consumption(example_readings)
    assert summary.average_power_kw == Decimal(10)
    assert summary.elapsed_hours == Decimal(2)
    assert summary.interval_count == 2


def test_unequal_intervals_are_not_time_weighted(monday):
    """A 1h and a 2h interval count equally: mean(5, 10), not (5*1 + 10*2) / 3."""
    readings = [
        ElectricityReading(monday, 0.0),
        ElectricityReading(monday + timedelta(hours=1), 10.0),
        ElectricityReading(monday + timedelta(hours=3), 10.0),
    ]
    assert average_power(readings) == Decimal("7.5")


def test_unsorted_readings_are_sorted(example_readings):
    shuffled = [example_readings[2], example_readings[0], example_readings[1]]
    assert average_power(shuffled) == average_power(example_readings)


def test_input_order_is_not_modified(example_readings):
    reversed_readings = list(reversed(example_readings))
    before = list(reversed_readings)
    summarize_consumption(reversed_readings)
    assert reversed_readings == before


@pytest.mark.parametrize("count", [0, 1])
def test_fewer_than_two_readings_rejected(monday, count):
    readings = [ElectricityReading(monday, 1.0)] * count
    with pytest.raises(InsufficientDataError) as exc_info:
        average_power(readings)
    assert exc_info.value.reading_count == count


def test_hours_between_handles_seconds():
    start = datetime(2026, 1, 5, 0, 0, 0)
    assert hours_between(start, start + timedelta(minutes=90)) == Decimal("1.5")
    assert hours_between(start, start + timedelta(days=1)) == Decimal(24)


def test_negative_reading_rejected(monday):
    with pytest.raises(ValueError, match="non-negative"):
        ElectricityReading(monday, -0.5)


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_reading_rejected(monday, value):
    with pytest.raises(ValueError, match="finite"):
        ElectricityReading(monday, value)


def test_mixed_naive_and_aware_timestamps_rejected(monday):
    readings = [
        ElectricityReading(monday, 1.0),
        ElectricityReading(monday.replace(hour=1, tzinfo=timezone.utc), 2.0),
    ]
    with pytest.raises(InvalidReadingsError, match="timezone"):
        summarize_consumption(readings)
