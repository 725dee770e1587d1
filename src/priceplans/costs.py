"""Cost calculation for a reading series under a price plan."""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

from .consumption import hours_between, sort_readings, summarize_consumption, to_seconds
from .errors import InsufficientDataError, InvalidPlanError
from .models import CostEstimate, ElectricityReading, PricePlan

logger = logging.getLogger(__name__)

# Minor currency unit (pence/cents)
COST_PRECISION = Decimal("0.01")


def validate_plan(plan: PricePlan) -> None:
    """Raise InvalidPlanError unless the plan's rates are usable."""
    if plan.unit_rate <= 0:
        raise InvalidPlanError(plan.supplier, f"unit rate must be positive, got {plan.unit_rate}")

    seen_days = set()
    for rule in plan.peak_time_multipliers:
        if rule.multiplier <= 0:
            raise InvalidPlanError(
                plan.supplier,
                f"multiplier for {rule.day_of_week.name.title()} must be positive, got {rule.multiplier}",
            )
        if rule.day_of_week in seen_days:
            raise InvalidPlanError(
                plan.supplier, f"more than one multiplier for {rule.day_of_week.name.title()}"
            )
        seen_days.add(rule.day_of_week)


def span_hours(readings: Sequence[ElectricityReading]) -> Decimal:
    """Hours between the earliest and latest reading.

    Raises InsufficientDataError when the readings cover no elapsed time.
    """
    if len(readings) < 2:
        raise InsufficientDataError(len(readings))
    ordered = sort_readings(readings)
    hours = hours_between(ordered[0].timestamp, ordered[-1].timestamp)
    if hours == 0:
        raise InsufficientDataError(len(readings), detail="Readings cover no elapsed time")
    return hours


def blended_rate(ordered: Sequence[ElectricityReading], plan: PricePlan) -> Decimal:
    """Unit rate averaged over the series, weighted by time spent in each peak window.

    Every interval between consecutive readings is matched against the
    plan's multiplier rules. Time inside a rule's window is charged at
    unit_rate * multiplier, the rest at unit_rate. Power is not split by day:
    the series' overall average power is multiplied by this time-weighted rate.
    """
    if not plan.peak_time_multipliers:
        return plan.unit_rate

    weighted = Decimal(0)
    total_seconds = Decimal(0)
    for previous, current in zip(ordered, ordered[1:]):
        seconds = to_seconds(current.timestamp - previous.timestamp)
        peak_seconds = Decimal(0)
        for rule in plan.peak_time_multipliers:
            overlap = to_seconds(rule.overlap(previous.timestamp, current.timestamp))
            if overlap:
                peak_seconds += overlap
                weighted += overlap * plan.unit_rate * rule.multiplier
        weighted += (seconds - peak_seconds) * plan.unit_rate
        total_seconds += seconds

    return weighted / total_seconds


def calculate_cost(readings: Sequence[ElectricityReading], plan: PricePlan) -> Decimal:
    """Exact (unrounded) cost of a reading series under a plan.

    cost = average power (kW) * time span (h) * blended rate (per kWh)

    Raises:
        InsufficientDataError: fewer than 2 readings, or no elapsed time.
        InvalidPlanError: non-positive rate or multiplier, or duplicate day rules.
    """
    summary = summarize_consumption(readings)
    ordered = sort_readings(readings)
    time_span_hours = span_hours(ordered)
    validate_plan(plan)

    rate = blended_rate(ordered, plan)
    cost = summary.average_power_kw * time_span_hours * rate
    logger.debug(
        "%s: %.4f kW over %.4f h at %s/kWh = %s",
        plan.supplier,
        summary.average_power_kw,
        time_span_hours,
        rate,
        cost,
    )
    return cost


def round_cost(cost: Decimal) -> Decimal:
    """Round a cost to the currency's minor unit."""
    return cost.quantize(COST_PRECISION, rounding=ROUND_HALF_UP)


def estimate_cost(readings: Sequence[ElectricityReading], plan: PricePlan) -> CostEstimate:
    """Cost estimate for one plan, rounded to the minor unit."""
    return CostEstimate(supplier=plan.supplier, cost=round_cost(calculate_cost(readings, plan)))
