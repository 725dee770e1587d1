"""Command-line interface for smart-meter price plan comparison."""

import json
import logging
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import db, readings
from .accounts import AccountDirectory
from .collectors import csv_import, remote
from .comparator import PlanComparator
from .config import load_settings
from .errors import PricingError
from .generator import generate_readings
from .plans import PlanCatalogue

console = Console()

SEED_READING_COUNT = 20


def setup_logging(level: str) -> None:
    """Route the package logger through rich."""
    logger = logging.getLogger("priceplans")
    logger.handlers.clear()
    logger.addHandler(RichHandler(console=Console(stderr=True), show_path=False))
    logger.setLevel(level)


def fail(message: str) -> None:
    console.print(f"[red]Error: {message}[/red]")
    raise SystemExit(1)


def require_config(ctx) -> Path:
    config_path = ctx.obj["config_path"]
    if config_path is None:
        fail("No price plan config found. Pass --config or set PRICEPLANS_CONFIG")
    return config_path


def build_comparator(ctx) -> PlanComparator:
    """Wire the reading store, catalogue and account directory together."""
    config_path = require_config(ctx)
    try:
        catalogue = PlanCatalogue.from_yaml(config_path)
        directory = AccountDirectory.from_yaml(config_path)
    except PricingError as e:
        fail(str(e))
    db_path = ctx.obj["db_path"]
    return PlanComparator(
        get_readings=lambda meter_id: readings.get_readings(meter_id, db_path),
        get_catalogue=catalogue.get_catalogue,
        get_supplier_for_account=directory.get_supplier_for_account,
    )


def format_cost(cost) -> str:
    return f"{cost:,.2f}"


@click.group()
@click.option("--db-path", type=click.Path(), help="Path to SQLite database")
@click.option("--config", "config_path", type=click.Path(exists=True), help="Path to price_plans.yaml")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(ctx, db_path, config_path, verbose):
    """Smart-meter price plans - estimate and compare electricity costs."""
    settings = load_settings()
    setup_logging("DEBUG" if verbose else settings.log_level)

    ctx.ensure_object(dict)
    ctx.obj["db_path"] = Path(db_path) if db_path else settings.db_path
    ctx.obj["config_path"] = Path(config_path) if config_path else settings.config_path
    ctx.obj["readings_url"] = settings.readings_url
    ctx.obj["db_path"].parent.mkdir(parents=True, exist_ok=True)


# Database commands
@cli.group()
def database():
    """Database management commands."""
    pass


@database.command("init")
@click.option("--seed/--no-seed", default=False, help="Generate demo readings for every account meter")
@click.pass_context
def db_init(ctx, seed):
    """Initialize the database schema."""
    db.init_db(ctx.obj["db_path"])
    console.print("[green]Database initialized successfully[/green]")

    if seed:
        try:
            directory = AccountDirectory.from_yaml(require_config(ctx))
        except PricingError as e:
            fail(str(e))
        for meter_id in directory.meter_ids():
            result = readings.store_readings(
                meter_id, generate_readings(SEED_READING_COUNT), ctx.obj["db_path"]
            )
            console.print(f"[green]Seeded {result['imported']} readings for {meter_id}[/green]")


@database.command("stats")
@click.pass_context
def db_stats(ctx):
    """Show database statistics."""
    stats = db.get_stats(ctx.obj["db_path"])

    table = Table(title="Database Statistics")
    table.add_column("Category", style="cyan")
    table.add_column("Count", justify="right")
    table.add_column("Range")

    rdg = stats["meter_readings"]
    table.add_row(
        "Meter readings",
        str(rdg["count"]),
        f"{rdg['earliest'] or 'N/A'} → {rdg['latest'] or 'N/A'}",
    )

    for meter_id, count in stats["readings_by_meter"].items():
        table.add_row(f"  └ {meter_id}", str(count), "")

    console.print(table)


# Reading commands
@cli.group("readings")
def readings_cmd():
    """Store and inspect meter readings."""
    pass


@readings_cmd.command("import")
@click.option("--meter", "meter_id", required=True, help="Smart meter ID")
@click.option("--csv", "csv_path", type=click.Path(exists=True), required=True, help="CSV with timestamp,reading_kw")
@click.pass_context
def readings_import(ctx, meter_id, csv_path):
    """Import a meter's readings from CSV."""
    try:
        result = csv_import.import_from_csv(meter_id, Path(csv_path), ctx.obj["db_path"])
    except PricingError as e:
        fail(str(e))

    console.print(f"[green]Imported {result['imported']} readings[/green]")
    if result["skipped"]:
        console.print(f"[yellow]Skipped {result['skipped']} duplicates[/yellow]")


@readings_cmd.command("fetch")
@click.option("--meter", "meter_id", required=True, help="Smart meter ID")
@click.option("--url", help="Readings service base URL (or set PRICEPLANS_READINGS_URL)")
@click.pass_context
def readings_fetch(ctx, meter_id, url):
    """Fetch a meter's readings from a remote readings service."""
    base_url = url or ctx.obj["readings_url"]
    console.print(f"[cyan]Fetching readings for {meter_id} from {base_url}...[/cyan]")
    try:
        result = remote.fetch_and_import(meter_id, base_url, ctx.obj["db_path"])
    except PricingError as e:
        fail(str(e))

    console.print(f"[green]Imported {result['imported']} readings[/green]")
    if result["skipped"]:
        console.print(f"[yellow]Skipped {result['skipped']} duplicates[/yellow]")


@readings_cmd.command("generate")
@click.option("--meter", "meter_id", required=True, help="Smart meter ID")
@click.option("--count", default=SEED_READING_COUNT, type=click.IntRange(min=1), help="Number of readings")
@click.pass_context
def readings_generate(ctx, meter_id, count):
    """Generate random demo readings for a meter."""
    try:
        result = readings.store_readings(meter_id, generate_readings(count), ctx.obj["db_path"])
    except PricingError as e:
        fail(str(e))
    console.print(f"[green]Generated {result['imported']} readings for {meter_id}[/green]")


@readings_cmd.command("show")
@click.argument("meter_id")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def readings_show(ctx, meter_id, as_json):
    """List the readings stored for a meter."""
    try:
        meter_readings = readings.get_readings(meter_id, ctx.obj["db_path"])
    except PricingError as e:
        fail(str(e))

    if as_json:
        data = [{"time": r.timestamp.isoformat(), "reading": r.reading_kw} for r in meter_readings]
        click.echo(json.dumps({"smartMeterId": meter_id, "electricityReadings": data}, indent=2))
        return

    table = Table(title=f"Readings for {meter_id}")
    table.add_column("Timestamp", style="cyan")
    table.add_column("Reading (kW)", justify="right")
    for r in meter_readings:
        table.add_row(r.timestamp.isoformat(), f"{r.reading_kw:.4f}")
    console.print(table)


# Plan commands
@cli.group()
def plans():
    """Price plan catalogue commands."""
    pass


@plans.command("list")
@click.pass_context
def plans_list(ctx):
    """Show the price plan catalogue."""
    try:
        catalogue = PlanCatalogue.from_yaml(require_config(ctx))
    except PricingError as e:
        fail(str(e))

    table = Table(title="Price Plans")
    table.add_column("Supplier", style="cyan")
    table.add_column("Unit rate", justify="right")
    table.add_column("Peak multipliers")

    for plan in catalogue.get_catalogue():
        multipliers = ", ".join(
            f"{m.day_of_week.name.title()[:3]} ×{m.multiplier}" for m in plan.peak_time_multipliers
        )
        table.add_row(plan.supplier, str(plan.unit_rate), multipliers or "-")

    console.print(table)


# Comparison commands
@cli.command()
@click.argument("meter_id")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def compare(ctx, meter_id, as_json):
    """Compare every price plan for a meter, cheapest first."""
    comparator = build_comparator(ctx)
    try:
        result = comparator.compare_all_plans(meter_id)
    except PricingError as e:
        fail(str(e))

    if as_json:
        data = {
            "smartMeterId": meter_id,
            "pricePlanComparisons": {s: float(c) for s, c in result.as_dict().items()},
            "excluded": [{"supplier": x.supplier, "reason": x.reason} for x in result.excluded],
        }
        click.echo(json.dumps(data, indent=2))
        return

    table = Table(title=f"Price plans for {meter_id}")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Supplier", style="cyan")
    table.add_column("Cost", justify="right")
    for rank, estimate in enumerate(result.estimates, start=1):
        table.add_row(str(rank), estimate.supplier, format_cost(estimate.cost))
    console.print(table)

    for excluded in result.excluded:
        console.print(f"[yellow]Excluded {excluded.supplier}: {excluded.reason}[/yellow]")


@cli.command()
@click.argument("meter_id")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def current(ctx, meter_id, as_json):
    """Cost of a meter's usage on its current plan."""
    comparator = build_comparator(ctx)
    try:
        estimate = comparator.current_plan_cost(meter_id)
    except PricingError as e:
        fail(str(e))

    if as_json:
        click.echo(json.dumps({"smartMeterId": meter_id, "supplier": estimate.supplier, "cost": float(estimate.cost)}, indent=2))
        return

    console.print(f"[cyan]{meter_id}[/cyan] on {estimate.supplier}: {format_cost(estimate.cost)}")


@cli.command()
@click.argument("meter_id")
@click.option("--limit", type=click.IntRange(min=1), help="Only show the N cheapest plans")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def recommend(ctx, meter_id, limit, as_json):
    """Recommend the cheapest price plans for a meter."""
    comparator = build_comparator(ctx)
    try:
        estimates = comparator.recommend_cheapest(meter_id, limit)
    except PricingError as e:
        fail(str(e))

    if as_json:
        click.echo(json.dumps([{e.supplier: float(e.cost)} for e in estimates], indent=2))
        return

    if not estimates:
        console.print("[yellow]No price plans could be priced[/yellow]")
        return

    for rank, estimate in enumerate(estimates, start=1):
        console.print(f"{rank}. [cyan]{estimate.supplier}[/cyan] {format_cost(estimate.cost)}")


if __name__ == "__main__":
    cli()
