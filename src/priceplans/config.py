"""Runtime settings from environment variables and .env files.

Variables:
    PRICEPLANS_DB_PATH       SQLite database of meter readings
    PRICEPLANS_CONFIG        price plan / account YAML file
    PRICEPLANS_READINGS_URL  base URL of a remote readings service
    PRICEPLANS_LOG_LEVEL     logging level for the CLI (default: WARNING)
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_DB_PATH = Path.home() / ".local" / "share" / "priceplans" / "readings.db"
DEFAULT_READINGS_URL = "http://localhost:5000"
DEFAULT_LOG_LEVEL = "WARNING"


def config_candidates() -> list[Path]:
    """Places to look for price_plans.yaml, in order."""
    return [
        Path.cwd() / "config" / "price_plans.yaml",
        Path(__file__).parent.parent.parent / "config" / "price_plans.yaml",
        Path.home() / ".config" / "priceplans" / "price_plans.yaml",
    ]


def find_config_path() -> Path:
    """Find the price plan config file."""
    for path in config_candidates():
        if path.exists():
            return path
    raise FileNotFoundError("Could not find config/price_plans.yaml (set PRICEPLANS_CONFIG)")


@dataclass
class Settings:
    """Resolved runtime settings."""

    db_path: Path
    config_path: Path | None
    readings_url: str
    log_level: str


def load_settings() -> Settings:
    """Build settings from the environment, reading .env first."""
    load_dotenv()

    config = os.environ.get("PRICEPLANS_CONFIG")
    if config:
        config_path = Path(config)
    else:
        try:
            config_path = find_config_path()
        except FileNotFoundError:
            config_path = None

    return Settings(
        db_path=Path(os.environ.get("PRICEPLANS_DB_PATH", DEFAULT_DB_PATH)),
        config_path=config_path,
        readings_url=os.environ.get("PRICEPLANS_READINGS_URL", DEFAULT_READINGS_URL),
        log_level=os.environ.get("PRICEPLANS_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
    )
