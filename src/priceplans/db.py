"""Database connection and schema management."""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from .config import DEFAULT_DB_PATH

SCHEMA = """
-- Instantaneous power samples per smart meter
CREATE TABLE IF NOT EXISTS meter_readings (
    id INTEGER PRIMARY KEY,
    meter_id TEXT NOT NULL,
    timestamp TEXT NOT NULL,
    reading_kw REAL NOT NULL CHECK (reading_kw >= 0),
    created_at TEXT DEFAULT CURRENT_TIMESTAMP,
    UNIQUE(meter_id, timestamp)
);

CREATE INDEX IF NOT EXISTS idx_readings_meter ON meter_readings(meter_id, timestamp);
"""


def get_db_path() -> Path:
    """Get the default database path, creating parent directories if needed."""
    db_path = Path(DEFAULT_DB_PATH)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return db_path


@contextmanager
def get_connection(db_path: Path | None = None) -> Iterator[sqlite3.Connection]:
    """Get a database connection with row factory enabled."""
    path = db_path or get_db_path()
    conn = sqlite3.connect(path)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()


def init_db(db_path: Path | None = None) -> None:
    """Initialize the database schema."""
    with get_connection(db_path) as conn:
        conn.executescript(SCHEMA)
        conn.commit()


def get_stats(db_path: Path | None = None) -> dict:
    """Get database statistics."""
    with get_connection(db_path) as conn:
        stats = {}

        row = conn.execute(
            "SELECT COUNT(*) as count, MIN(timestamp) as earliest, MAX(timestamp) as latest FROM meter_readings"
        ).fetchone()
        stats["meter_readings"] = {
            "count": row["count"],
            "earliest": row["earliest"],
            "latest": row["latest"],
        }

        # By meter
        rows = conn.execute(
            "SELECT meter_id, COUNT(*) as count FROM meter_readings GROUP BY meter_id ORDER BY meter_id"
        ).fetchall()
        stats["readings_by_meter"] = {row["meter_id"]: row["count"] for row in rows}

        return stats
