"""Price plan catalogue loading."""

import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path

import yaml

from .errors import CatalogueError
from .models import DayOfWeek, PeakTimeMultiplier, PricePlan

logger = logging.getLogger(__name__)


def parse_decimal(value, field_name: str) -> Decimal:
    """Parse a YAML number or string into a Decimal."""
    try:
        return Decimal(str(value))
    except (InvalidOperation, TypeError) as e:
        raise ValueError(f"Invalid {field_name}: {value!r}") from e


def parse_price_plan(data: dict) -> PricePlan:
    """Build a PricePlan from one `price_plans` entry."""
    multipliers = tuple(
        PeakTimeMultiplier(
            day_of_week=DayOfWeek.parse(m["day"]),
            multiplier=parse_decimal(m["multiplier"], "multiplier"),
        )
        for m in data.get("peak_time_multipliers") or []
    )
    return PricePlan(
        supplier=data["supplier"],
        unit_rate=parse_decimal(data["unit_rate"], "unit_rate"),
        peak_time_multipliers=multipliers,
    )


def load_config(config_path: Path) -> dict:
    """Read the catalogue YAML file."""
    with open(config_path) as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise CatalogueError(config_path, f"not valid YAML ({e})") from e
    if not isinstance(data, dict):
        raise CatalogueError(config_path, "expected a mapping at the top level")
    return data


def load_price_plans(data: dict, source: str = "price_plans") -> tuple[PricePlan, ...]:
    """Parse the `price_plans` section, keeping catalogue order.

    Plans are not validated here: a plan with a bad rate stays in the
    catalogue and is excluded when compared.

    Raises:
        CatalogueError: an entry is missing a field or has an unparseable value.
    """
    plans = []
    for index, entry in enumerate(data.get("price_plans") or []):
        try:
            plans.append(parse_price_plan(entry))
        except KeyError as e:
            raise CatalogueError(source, f"price_plans entry {index} is missing {e}") from e
        except (TypeError, ValueError, AttributeError) as e:
            raise CatalogueError(source, f"price_plans entry {index}: {e}") from e
    plans = tuple(plans)
    logger.debug("Loaded %d price plan(s)", len(plans))
    return plans


def load_price_plans_from_yaml(config_path: Path) -> tuple[PricePlan, ...]:
    """Load price plan definitions from a YAML config file."""
    return load_price_plans(load_config(config_path), source=str(config_path))


class PlanCatalogue:
    """Price plans loaded once and shared read-only."""

    def __init__(self, plans: tuple[PricePlan, ...]):
        self._plans = tuple(plans)

    @classmethod
    def from_yaml(cls, config_path: Path) -> "PlanCatalogue":
        return cls(load_price_plans_from_yaml(config_path))

    def get_catalogue(self) -> tuple[PricePlan, ...]:
        return self._plans

    def get_plan(self, supplier: str) -> PricePlan | None:
        for plan in self._plans:
            if plan.supplier == supplier:
                return plan
        return None

    def __len__(self) -> int:
        return len(self._plans)
