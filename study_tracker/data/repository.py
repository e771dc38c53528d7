"""
Repository — the single place where SQL lives.

Every other module talks to a repository, never to raw SQL. Two backends
share the same method names:

  - Repository:        SQLite, used by the desktop app
  - MemoryRepository:  plain dicts, used by tests and the "memory" storage
                       setting

Neither is a module-level singleton; the caller constructs one and hands
it to StudyService.
"""

from __future__ import annotations

import csv
import io
import logging
import sqlite3
import threading
import uuid
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from .models import Goal, Session
from .validation import GoalInput, SessionInput, naive_local

logger = logging.getLogger(__name__)

CSV_HEADERS = ["id", "subject", "duration", "date", "notes"]

# helper: parse ISO datetime strings from SQLite (rows written with an offset
# come back as naive local time, like everything else in the store)
_parse_dt = lambda s: naive_local(datetime.fromisoformat(s)) if s else None


def _new_id() -> str:
    return uuid.uuid4().hex


def sessions_to_csv(sessions: Iterable[Session]) -> str:
    """Render sessions as CSV text (header row first)."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    rows = 0
    for s in sessions:
        writer.writerow([s.id, s.subject, s.duration, s.date.isoformat(), s.notes or ""])
        rows += 1
    return buf.getvalue() if rows else ""


class Repository:
    """Data-access layer wrapping a sqlite3 connection."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    # ── Sessions ────────────────────────────────────────────────────────────

    def create_session(self, data: SessionInput) -> Session:
        session = Session(
            id=_new_id(), subject=data.subject, duration=data.duration,
            date=data.date, notes=data.notes,
        )
        self.conn.execute(
            "INSERT INTO sessions (id, subject, duration, date, notes) VALUES (?, ?, ?, ?, ?)",
            (session.id, session.subject, session.duration,
             session.date.isoformat(), session.notes),
        )
        self.conn.commit()
        logger.info("Created session %s (%s, %d min)",
                    session.id, session.subject, session.duration)
        return session

    def get_session(self, session_id: str) -> Optional[Session]:
        row = self.conn.execute(
            "SELECT * FROM sessions WHERE id = ?", (session_id,)
        ).fetchone()
        return self._row_to_session(row) if row else None

    def list_sessions(self) -> List[Session]:
        """All sessions, newest first."""
        rows = self.conn.execute(
            "SELECT * FROM sessions ORDER BY date DESC, rowid ASC"
        ).fetchall()
        return [self._row_to_session(r) for r in rows]

    def get_recent_sessions(self, limit: int = 5) -> List[Session]:
        rows = self.conn.execute(
            "SELECT * FROM sessions ORDER BY date DESC, rowid ASC LIMIT ?",
            (limit,),
        ).fetchall()
        return [self._row_to_session(r) for r in rows]

    def count_sessions(self) -> int:
        row = self.conn.execute("SELECT COUNT(*) FROM sessions").fetchone()
        return row[0]

    # ── Goals ───────────────────────────────────────────────────────────────

    def create_goal(self, data: GoalInput) -> Goal:
        goal = Goal(
            id=_new_id(), type=data.type, target_hours=data.target_hours,
            title=data.title, start_date=data.start_date, end_date=data.end_date,
        )
        self.conn.execute(
            "INSERT INTO goals (id, type, target_hours, title, start_date, end_date) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            (goal.id, goal.type, goal.target_hours, goal.title,
             goal.start_date.isoformat(), goal.end_date.isoformat()),
        )
        self.conn.commit()
        logger.info("Created %s goal %s (%s, %dh)",
                    goal.type, goal.id, goal.title, goal.target_hours)
        return goal

    def get_goal(self, goal_id: str) -> Optional[Goal]:
        row = self.conn.execute(
            "SELECT * FROM goals WHERE id = ?", (goal_id,)
        ).fetchone()
        return self._row_to_goal(row) if row else None

    def list_goals(self) -> List[Goal]:
        """All goals, latest start date first."""
        rows = self.conn.execute(
            "SELECT * FROM goals ORDER BY start_date DESC, rowid ASC"
        ).fetchall()
        return [self._row_to_goal(r) for r in rows]

    def list_active_goals(self, now: datetime) -> List[Goal]:
        """Goals whose window has not closed yet, soonest deadline first."""
        goals = [g for g in self.list_goals() if g.end_date >= now]
        return sorted(goals, key=lambda g: g.end_date)

    # ── Data export ─────────────────────────────────────────────────────────

    def export_sessions_csv(self) -> str:
        """Return all sessions, oldest first, as CSV text."""
        return sessions_to_csv(reversed(self.list_sessions()))

    # ── Row mappers ─────────────────────────────────────────────────────────

    @staticmethod
    def _row_to_session(row: sqlite3.Row) -> Session:
        return Session(
            id=row["id"], subject=row["subject"],
            duration=row["duration"],
            date=_parse_dt(row["date"]),
            notes=row["notes"],
        )

    @staticmethod
    def _row_to_goal(row: sqlite3.Row) -> Goal:
        return Goal(
            id=row["id"], type=row["type"],
            target_hours=row["target_hours"],
            title=row["title"],
            start_date=_parse_dt(row["start_date"]),
            end_date=_parse_dt(row["end_date"]),
        )


class MemoryRepository:
    """In-process store with the same interface as Repository."""

    def __init__(self) -> None:
        self._sessions: Dict[str, Session] = {}
        self._goals: Dict[str, Goal] = {}
        self._lock = threading.Lock()

    # ── Sessions ────────────────────────────────────────────────────────────

    def create_session(self, data: SessionInput) -> Session:
        session = Session(
            id=_new_id(), subject=data.subject, duration=data.duration,
            date=data.date, notes=data.notes,
        )
        with self._lock:
            self._sessions[session.id] = session
        logger.info("Created session %s (%s, %d min)",
                    session.id, session.subject, session.duration)
        return session

    def get_session(self, session_id: str) -> Optional[Session]:
        with self._lock:
            return self._sessions.get(session_id)

    def list_sessions(self) -> List[Session]:
        with self._lock:
            sessions = list(self._sessions.values())
        # sort is stable: equal dates keep insertion order
        return sorted(sessions, key=lambda s: s.date, reverse=True)

    def get_recent_sessions(self, limit: int = 5) -> List[Session]:
        return self.list_sessions()[:limit]

    def count_sessions(self) -> int:
        with self._lock:
            return len(self._sessions)

    # ── Goals ───────────────────────────────────────────────────────────────

    def create_goal(self, data: GoalInput) -> Goal:
        goal = Goal(
            id=_new_id(), type=data.type, target_hours=data.target_hours,
            title=data.title, start_date=data.start_date, end_date=data.end_date,
        )
        with self._lock:
            self._goals[goal.id] = goal
        logger.info("Created %s goal %s (%s, %dh)",
                    goal.type, goal.id, goal.title, goal.target_hours)
        return goal

    def get_goal(self, goal_id: str) -> Optional[Goal]:
        with self._lock:
            return self._goals.get(goal_id)

    def list_goals(self) -> List[Goal]:
        with self._lock:
            goals = list(self._goals.values())
        return sorted(goals, key=lambda g: g.start_date, reverse=True)

    def list_active_goals(self, now: datetime) -> List[Goal]:
        goals = [g for g in self.list_goals() if g.end_date >= now]
        return sorted(goals, key=lambda g: g.end_date)

    # ── Data export ─────────────────────────────────────────────────────────

    def export_sessions_csv(self) -> str:
        return sessions_to_csv(reversed(self.list_sessions()))


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   The Repository is the ONLY place raw SQL queries live. Services call
#   repo.create_session() / repo.list_sessions() instead of writing SQL.
#   MemoryRepository offers the same methods backed by two dicts.
#
# Key methods:
#   - create_* take an already-validated SessionInput / GoalInput and
#     assign a fresh UUID. Ids are never reused.
#   - list_sessions(): newest first. The engines re-sort whatever they
#     need, so order here only matters for display.
#   - list_active_goals(now): "now" is passed in, not read from the clock,
#     so tests can pin it.
#   - export_sessions_csv(): data portability.
#
# Data flow:
#   StudyService → repo.method() → SQL / dict → dataclass model
#
# Interviewer-friendly talking points:
#   1. Two backends, one shape: swapping SQLite for memory (or Postgres
#      later) never touches the engines or the UI.
#   2. No global store: each caller constructs its own, so every test
#      starts from a clean one.
#   3. The memory store holds a lock around its dicts so two threads
#      logging sessions at once can't interleave a list with a write.
