"""
Study Service — the seam between the UI and everything underneath.

Validates create requests, forwards them to the injected repository, and
feeds repository snapshots plus the current time into the statistics and
insights engines.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, List, Optional, Tuple

from study_tracker.data.database import Database
from study_tracker.data.models import Goal, GoalProgress, Insights, Session, StudyStats
from study_tracker.data.repository import MemoryRepository, Repository
from study_tracker.data.validation import validate_goal, validate_session
from study_tracker.services.insights import compute_insights, session_length_histogram
from study_tracker.services.statistics import compute_all_goal_progress, compute_statistics

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class StorageError(RuntimeError):
    """A repository operation failed. Details are in the log."""


class StudyService:
    """
    Application-level operations on sessions and goals.

    The repository and the clock are both injected, so tests can use a
    MemoryRepository and a fixed "now".
    """

    def __init__(self, repo, clock: Clock = datetime.now,
                 recent_limit: int = 5, histogram_bins: int = 10) -> None:
        self.repo = repo
        self.clock = clock
        self.recent_limit = recent_limit
        self.histogram_bins = histogram_bins

    # ── Create ──────────────────────────────────────────────────────────────

    def log_session(self, subject: Any, duration: Any, date: Any,
                    notes: Any = None) -> Session:
        """Validate and store a session. Raises ValidationError on bad input."""
        data = validate_session(subject, duration, date, notes)
        return self._call("create session", self.repo.create_session, data)

    def create_goal(self, type: Any, target_hours: Any, title: Any,
                    start_date: Any, end_date: Any) -> Goal:
        """Validate and store a goal. Raises ValidationError on bad input."""
        data = validate_goal(type, target_hours, title, start_date, end_date)
        return self._call("create goal", self.repo.create_goal, data)

    # ── Read ────────────────────────────────────────────────────────────────

    def list_sessions(self) -> List[Session]:
        return self._call("fetch sessions", self.repo.list_sessions)

    def recent_sessions(self, limit: Optional[int] = None) -> List[Session]:
        return self._call("fetch recent sessions", self.repo.get_recent_sessions,
                          self.recent_limit if limit is None else limit)

    def get_session(self, session_id: str) -> Optional[Session]:
        return self._call("fetch session", self.repo.get_session, session_id)

    def list_goals(self) -> List[Goal]:
        return self._call("fetch goals", self.repo.list_goals)

    def active_goals(self) -> List[Goal]:
        return self._call("fetch active goals", self.repo.list_active_goals, self.clock())

    def get_goal(self, goal_id: str) -> Optional[Goal]:
        return self._call("fetch goal", self.repo.get_goal, goal_id)

    def export_csv(self) -> str:
        return self._call("export sessions", self.repo.export_sessions_csv)

    # ── Derived ─────────────────────────────────────────────────────────────

    def get_statistics(self) -> StudyStats:
        sessions, goals = self._snapshot()
        stats = compute_statistics(sessions, goals, self.clock())
        logger.info(
            "Statistics: %.1fh total, streak %d (best %d), %d this week, %d goals met",
            stats.total_hours, stats.current_streak, stats.longest_streak,
            stats.sessions_this_week, stats.goals_completed,
        )
        return stats

    def get_insights(self) -> Insights:
        sessions = self.list_sessions()
        insights = compute_insights(sessions, self.clock())
        logger.debug("Insights computed over %d sessions", len(sessions))
        return insights

    def get_goal_progress(self) -> List[GoalProgress]:
        sessions, goals = self._snapshot()
        return compute_all_goal_progress(goals, sessions)

    def get_active_goal_progress(self) -> List[GoalProgress]:
        """Progress of open goals, soonest deadline first."""
        sessions = self.list_sessions()
        return compute_all_goal_progress(self.active_goals(), sessions)

    def get_length_histogram(self) -> Tuple[List[int], List[float]]:
        return session_length_histogram(self.list_sessions(), self.histogram_bins)

    # ── Helpers ─────────────────────────────────────────────────────────────

    def _snapshot(self) -> Tuple[List[Session], List[Goal]]:
        return self.list_sessions(), self.list_goals()

    @staticmethod
    def _call(action: str, fn: Callable, *args):
        try:
            return fn(*args)
        except sqlite3.Error as exc:
            logger.exception("Failed to %s", action)
            raise StorageError(f"Failed to {action}") from exc


def build_repository(config: dict) -> Tuple[Any, Optional[Database]]:
    """Create the repository named by config["storage"].

    Returns (repo, db); db is None for the memory backend and must be
    closed by the caller otherwise.
    """
    storage = config.get("storage", "sqlite")
    if storage == "memory":
        logger.info("Using in-memory storage; data is lost on exit.")
        return MemoryRepository(), None
    if storage != "sqlite":
        logger.warning("Unknown storage %r, falling back to sqlite.", storage)
    db = Database(Path(config["db_path"]) if config.get("db_path") else None)
    db.connect()
    return Repository(db.conn), db


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   The one object the UI talks to. It validates, stores, and computes.
#
# Key classes:
#   - StudyService: thin orchestration. No math lives here; it fetches a
#     snapshot and hands it to compute_statistics() / compute_insights().
#   - StorageError: any sqlite3.Error becomes this after being logged, so
#     the UI can show "couldn't save" without importing sqlite3.
#   - build_repository(): picks SQLite or memory from settings.json.
#
# Data flow:
#   SessionDialog → service.log_session() → validate_session() →
#   repo.create_session() → Session
#   Dashboard refresh → service.get_statistics() → repo.list_*() →
#   compute_statistics(sessions, goals, clock()) → StudyStats
#
# Interviewer-friendly talking points:
#   1. Dependency injection of both repo and clock. Tests pass a fixed
#      clock and a MemoryRepository; no mocking needed.
#   2. Each statistics call takes ONE snapshot of sessions and goals. If a
#      session lands between the two reads that's fine: stats are advisory.
#   3. ValidationError passes straight through; only storage failures are
#      wrapped, because those are the ones the user can't fix.
