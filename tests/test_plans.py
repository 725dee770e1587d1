from decimal import Decimal
from pathlib import Path

import pytest

from priceplans.accounts import AccountDirectory
from priceplans.errors import CatalogueError, UnknownAccountError
from priceplans.models import DayOfWeek
from priceplans.plans import PlanCatalogue, load_price_plans_from_yaml

REPO_CONFIG = Path(__file__).parent.parent / "config" / "price_plans.yaml"

CONFIG_YAML = """
price_plans:
  - supplier: Flat Co
    unit_rate: 0.25
  - supplier: Weekday Peak
    unit_rate: "0.20"
    peak_time_multipliers:
      - day: monday
        multiplier: 1.5
      - day: Fri
        multiplier: 2

accounts:
  smart-meter-0: Flat Co
  smart-meter-1: Weekday Peak
"""


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "price_plans.yaml"
    path.write_text(CONFIG_YAML)
    return path


def test_load_price_plans(config_path):
    plans = load_price_plans_from_yaml(config_path)

    assert [p.supplier for p in plans] == ["Flat Co", "Weekday Peak"]
    assert plans[0].unit_rate == Decimal("0.25")
    assert plans[0].peak_time_multipliers == ()

    peak = plans[1]
    assert peak.unit_rate == Decimal("0.20")
    assert [(m.day_of_week, m.multiplier) for m in peak.peak_time_multipliers] == [
        (DayOfWeek.MONDAY, Decimal("1.5")),
        (DayOfWeek.FRIDAY, Decimal("2")),
    ]


def test_catalogue_lookup(config_path):
    catalogue = PlanCatalogue.from_yaml(config_path)
    assert len(catalogue) == 2
    assert catalogue.get_plan("Weekday Peak").unit_rate == Decimal("0.20")
    assert catalogue.get_plan("Nobody") is None


def test_invalid_number_rejected(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("price_plans:\n  - supplier: X\n    unit_rate: cheap\n")
    with pytest.raises(ValueError, match="unit_rate"):
        load_price_plans_from_yaml(path)


@pytest.mark.parametrize("entry, message", [
    ("  - unit_rate: 1\n", "missing 'supplier'"),
    ("  - supplier: X\n", "missing 'unit_rate'"),
    ("  - supplier: X\n    unit_rate: 1\n    peak_time_multipliers:\n      - {day: funday, multiplier: 2}\n", "funday"),
])
def test_malformed_entry_raises_catalogue_error(tmp_path, entry, message):
    path = tmp_path / "bad.yaml"
    path.write_text("price_plans:\n" + entry)
    with pytest.raises(CatalogueError, match=message) as exc_info:
        PlanCatalogue.from_yaml(path)
    assert exc_info.value.config_path == str(path)


def test_unparseable_yaml_raises_catalogue_error(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("price_plans: [\n")
    with pytest.raises(CatalogueError, match="not valid YAML"):
        AccountDirectory.from_yaml(path)


def test_account_directory(config_path):
    directory = AccountDirectory.from_yaml(config_path)
    assert directory.get_supplier_for_account("smart-meter-1") == "Weekday Peak"
    assert directory.meter_ids() == ["smart-meter-0", "smart-meter-1"]

    with pytest.raises(UnknownAccountError, match="smart-meter-7"):
        directory.get_supplier_for_account("smart-meter-7")


@pytest.mark.parametrize("value, expected", [
    ("saturday", DayOfWeek.SATURDAY),
    ("SUN", DayOfWeek.SUNDAY),
    (2, DayOfWeek.WEDNESDAY),
    (DayOfWeek.THURSDAY, DayOfWeek.THURSDAY),
])
def test_parse_day_of_week(value, expected):
    assert DayOfWeek.parse(value) == expected


def test_parse_day_of_week_rejects_unknown():
    with pytest.raises(ValueError, match="Funday"):
        DayOfWeek.parse("Funday")


def test_shipped_config_loads():
    """Every account in the shipped config points at a plan in its catalogue."""
    catalogue = PlanCatalogue.from_yaml(REPO_CONFIG)
    directory = AccountDirectory.from_yaml(REPO_CONFIG)

    for meter_id in directory.meter_ids():
        assert catalogue.get_plan(directory.get_supplier_for_account(meter_id)) is not None
