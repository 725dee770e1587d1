"""Rank a meter's projected cost across every plan in the catalogue."""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Callable, Sequence

from .costs import calculate_cost, round_cost, span_hours
from .errors import InsufficientDataError, InvalidPlanError, UnknownMeterError, UnknownPlanError
from .models import CostEstimate, ElectricityReading, PricePlan

logger = logging.getLogger(__name__)

ReadingsLookup = Callable[[str], Sequence[ElectricityReading]]
CatalogueLookup = Callable[[], Sequence[PricePlan]]
AccountLookup = Callable[[str], str]


@dataclass
class ExcludedPlan:
    """A plan left out of a comparison, and why."""

    supplier: str
    reason: str


@dataclass
class PlanComparison:
    """Cost estimates for one meter, cheapest first."""

    meter_id: str
    estimates: list[CostEstimate]
    excluded: list[ExcludedPlan] = field(default_factory=list)

    def as_dict(self) -> dict[str, Decimal]:
        """Ordered supplier -> cost mapping."""
        return {estimate.supplier: estimate.cost for estimate in self.estimates}


class PlanComparator:
    """Compare price plans for a meter.

    The collaborators are plain callables so any store can be plugged in:

        comparator = PlanComparator(
            get_readings=lambda meter_id: store[meter_id],
            get_catalogue=lambda: plans,
            get_supplier_for_account=directory.get_supplier_for_account,
        )
    """

    def __init__(
        self,
        get_readings: ReadingsLookup,
        get_catalogue: CatalogueLookup,
        get_supplier_for_account: AccountLookup,
    ):
        self.get_readings = get_readings
        self.get_catalogue = get_catalogue
        self.get_supplier_for_account = get_supplier_for_account

    def _readings_for(self, meter_id: str) -> list[ElectricityReading]:
        readings = list(self.get_readings(meter_id))
        if not readings:
            raise UnknownMeterError(meter_id)
        # Too few readings fails the whole request, not each plan
        try:
            span_hours(readings)
        except InsufficientDataError as e:
            raise InsufficientDataError(e.reading_count, meter_id, str(e)) from e
        return readings

    def compare_all_plans(self, meter_id: str) -> PlanComparison:
        """Estimate every catalogue plan for a meter, cheapest first.

        Ties keep catalogue order. Plans that fail validation are
        reported in `excluded` instead of aborting the comparison.
        """
        readings = self._readings_for(meter_id)

        costed: list[tuple[Decimal, PricePlan]] = []
        excluded = []
        for plan in self.get_catalogue():
            try:
                costed.append((calculate_cost(readings, plan), plan))
            except InvalidPlanError as e:
                logger.warning("Excluding %s from comparison for %s: %s", plan.supplier, meter_id, e.reason)
                excluded.append(ExcludedPlan(supplier=plan.supplier, reason=e.reason))

        # sorted() is stable, so equal costs stay in catalogue order
        ranked = sorted(costed, key=lambda item: item[0])
        estimates = [CostEstimate(supplier=plan.supplier, cost=round_cost(cost)) for cost, plan in ranked]
        logger.debug("Compared %d plans for %s (%d excluded)", len(estimates), meter_id, len(excluded))
        return PlanComparison(meter_id=meter_id, estimates=estimates, excluded=excluded)

    def current_plan_cost(self, meter_id: str) -> CostEstimate:
        """Cost of a meter's usage under the plan its account is on."""
        supplier = self.get_supplier_for_account(meter_id)
        readings = self._readings_for(meter_id)

        for plan in self.get_catalogue():
            if plan.supplier == supplier:
                return CostEstimate(supplier=supplier, cost=round_cost(calculate_cost(readings, plan)))

        raise UnknownPlanError(supplier, meter_id)

    def recommend_cheapest(self, meter_id: str, limit: int | None = None) -> list[CostEstimate]:
        """The cheapest plans for a meter, optionally only the first `limit`."""
        if limit is not None and limit < 1:
            raise ValueError(f"limit must be at least 1, got {limit}")

        estimates = self.compare_all_plans(meter_id).estimates
        return estimates if limit is None else estimates[:limit]
