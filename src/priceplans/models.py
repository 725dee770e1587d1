"""Data models for meter readings and price plans."""

import math
from dataclasses import dataclass, field
from datetime import datetime, time, timedelta
from decimal import Decimal
from enum import IntEnum


class DayOfWeek(IntEnum):
    """Day of the week, numbered like datetime.weekday()."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @classmethod
    def parse(cls, value: "str | int | DayOfWeek") -> "DayOfWeek":
        """Accept 'saturday', 'Sat', 5 or DayOfWeek.SATURDAY."""
        if isinstance(value, int):
            return cls(value)
        name = str(value).strip().upper()
        for day in cls:
            if day.name == name or day.name[:3] == name:
                return day
        raise ValueError(f"Unknown day of week: {value!r}")


@dataclass(frozen=True)
class ElectricityReading:
    """A single instantaneous power sample from a smart meter."""

    timestamp: datetime
    reading_kw: float

    def __post_init__(self):
        if not math.isfinite(self.reading_kw):
            raise ValueError(f"Reading must be a finite number, got {self.reading_kw} kW at {self.timestamp}")
        if self.reading_kw < 0:
            raise ValueError(f"Reading must be non-negative, got {self.reading_kw} kW at {self.timestamp}")


@dataclass(frozen=True)
class PeakTimeMultiplier:
    """Rate multiplier applied to usage falling on one day of the week."""

    day_of_week: DayOfWeek
    multiplier: Decimal

    def overlap(self, start: datetime, end: datetime) -> timedelta:
        """Return how much of the interval [start, end) falls on this rule's day."""
        total = timedelta(0)
        if end <= start:
            return total

        day = start.date()
        while True:
            day_start = datetime.combine(day, time.min, tzinfo=start.tzinfo)
            if day_start >= end:
                break
            if day.weekday() == self.day_of_week:
                day_end = day_start + timedelta(days=1)
                total += min(end, day_end) - max(start, day_start)
            day += timedelta(days=1)
        return total


@dataclass(frozen=True)
class PricePlan:
    """A supplier's price plan: base unit rate plus optional peak multipliers."""

    supplier: str
    unit_rate: Decimal  # currency per kWh
    peak_time_multipliers: tuple[PeakTimeMultiplier, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class CostEstimate:
    """Projected cost of a meter's usage under one price plan."""

    supplier: str
    cost: Decimal


@dataclass(frozen=True)
class ConsumptionSummary:
    """Average power over a reading series and the span it covers."""

    average_power_kw: Decimal
    elapsed_hours: Decimal
    interval_count: int
