"""
SQLite database initialization and connection management.

Single responsibility: own the connection and create tables.
All actual queries live in Repository.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

# Default DB lives at the repo root
DEFAULT_DB_PATH = Path(__file__).resolve().parent.parent.parent / "study_tracker.db"

SCHEMA_SQL = """
-- Sessions ------------------------------------------------------------------
CREATE TABLE IF NOT EXISTS sessions (
    id          TEXT    PRIMARY KEY,
    subject     TEXT    NOT NULL,
    duration    INTEGER NOT NULL CHECK (duration >= 1),
    date        TEXT    NOT NULL,
    notes       TEXT
);

-- Goals ---------------------------------------------------------------------
CREATE TABLE IF NOT EXISTS goals (
    id           TEXT    PRIMARY KEY,
    type         TEXT    NOT NULL,
    target_hours INTEGER NOT NULL CHECK (target_hours >= 1),
    title        TEXT    NOT NULL,
    start_date   TEXT    NOT NULL,
    end_date     TEXT    NOT NULL
);

-- Indexes for common queries -------------------------------------------------
CREATE INDEX IF NOT EXISTS idx_sessions_date    ON sessions(date);
CREATE INDEX IF NOT EXISTS idx_goals_end_date   ON goals(end_date);
"""


class Database:
    """Thin wrapper around a SQLite connection."""

    def __init__(self, db_path: Optional[Path] = None) -> None:
        self.db_path = db_path or DEFAULT_DB_PATH
        self.conn: Optional[sqlite3.Connection] = None

    # -- lifecycle -----------------------------------------------------------

    def connect(self) -> sqlite3.Connection:
        """Open (or return existing) connection and ensure schema exists."""
        if self.conn is not None:
            return self.conn
        logger.info("Connecting to SQLite at %s", self.db_path)
        self.conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA journal_mode=WAL")
        self._create_tables()
        return self.conn

    def close(self) -> None:
        if self.conn:
            self.conn.close()
            self.conn = None
            logger.info("Database connection closed.")

    # -- internal ------------------------------------------------------------

    def _create_tables(self) -> None:
        assert self.conn is not None
        self.conn.executescript(SCHEMA_SQL)
        self.conn.commit()
        logger.info("Database schema ensured.")


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   Opens the SQLite file and makes sure the sessions and goals tables exist.
#
# Key pieces:
#   - SCHEMA_SQL: two tables, ids are UUID hex strings (not autoincrement)
#     so the in-memory store and the SQLite store hand out the same kind of
#     identifier. CHECK constraints back up the validation layer.
#   - Database class: one connection, WAL mode, dict-like rows.
#
# Data flow:
#   App start → Database.connect() → tables created → Repository uses conn
#
# Interviewer-friendly talking points:
#   1. Dates are stored as ISO-8601 text. It sorts lexically for naive
#      local timestamps and round-trips through datetime.fromisoformat().
#   2. CREATE IF NOT EXISTS is safe to run on every launch; we have no
#      migration tool because the schema is two tables.
