"""Unit tests for the data layer (database, repositories, validation, config)."""

import sqlite3
import pydantic
import pytest
from datetime import datetime, timedelta

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from study_tracker.config import DEFAULT_CONFIG, load_config, save_config
from study_tracker.data.database import SCHEMA_SQL, Database
from study_tracker.data.models import GoalType
from study_tracker.data.repository import MemoryRepository, Repository
from study_tracker.data.validation import (
    GoalInput, SessionInput, ValidationError, validate_goal, validate_session,
)

NOW = datetime(2024, 5, 15, 12, 0)


def _sqlite_repo() -> Repository:
    conn = sqlite3.connect(":memory:")
    conn.row_factory = sqlite3.Row
    conn.executescript(SCHEMA_SQL)
    conn.commit()
    return Repository(conn)


@pytest.fixture(params=["sqlite", "memory"])
def repo(request):
    """Both store backends; every test below must pass on each."""
    if request.param == "sqlite":
        return _sqlite_repo()
    return MemoryRepository()


def _session(subject="Math", duration=30, date=NOW, notes=None) -> SessionInput:
    return SessionInput(subject=subject, duration=duration, date=date, notes=notes)


def _goal(title="Weekly", start=NOW - timedelta(days=2), end=NOW + timedelta(days=5),
          target=5) -> GoalInput:
    return GoalInput(type=GoalType.WEEKLY, target_hours=target, title=title,
                     start_date=start, end_date=end)


class TestSessions:
    def test_create_session(self, repo):
        s = repo.create_session(_session(notes="chapter 3"))
        assert s.id
        assert s.subject == "Math"
        assert s.duration == 30
        assert s.date == NOW
        assert s.notes == "chapter 3"

    def test_ids_are_unique(self, repo):
        ids = {repo.create_session(_session()).id for _ in range(5)}
        assert len(ids) == 5

    def test_get_session(self, repo):
        s = repo.create_session(_session())
        loaded = repo.get_session(s.id)
        assert loaded == s
        assert repo.get_session("missing") is None

    def test_list_sessions_newest_first(self, repo):
        repo.create_session(_session(subject="Old", date=NOW - timedelta(days=2)))
        repo.create_session(_session(subject="New", date=NOW))
        repo.create_session(_session(subject="Mid", date=NOW - timedelta(days=1)))
        assert [s.subject for s in repo.list_sessions()] == ["New", "Mid", "Old"]

    def test_recent_sessions_limit(self, repo):
        for i in range(7):
            repo.create_session(_session(date=NOW - timedelta(hours=i)))
        recent = repo.get_recent_sessions(5)
        assert len(recent) == 5
        assert recent[0].date == NOW

    def test_count_sessions(self, repo):
        assert repo.count_sessions() == 0
        repo.create_session(_session())
        repo.create_session(_session())
        assert repo.count_sessions() == 2


class TestGoals:
    def test_create_and_get_goal(self, repo):
        g = repo.create_goal(_goal())
        assert g.id
        assert repo.get_goal(g.id) == g
        assert repo.get_goal("missing") is None

    def test_list_goals_latest_start_first(self, repo):
        repo.create_goal(_goal(title="A", start=NOW - timedelta(days=10)))
        repo.create_goal(_goal(title="B", start=NOW - timedelta(days=1)))
        assert [g.title for g in repo.list_goals()] == ["B", "A"]

    def test_active_goals(self, repo):
        repo.create_goal(_goal(title="Expired", end=NOW - timedelta(days=1)))
        repo.create_goal(_goal(title="Later", end=NOW + timedelta(days=10)))
        repo.create_goal(_goal(title="Soon", end=NOW + timedelta(days=1)))
        repo.create_goal(_goal(title="Ends now", end=NOW))
        titles = [g.title for g in repo.list_active_goals(NOW)]
        assert titles == ["Ends now", "Soon", "Later"]


def _local(iso: str) -> datetime:
    return datetime.fromisoformat(iso).astimezone().replace(tzinfo=None)


class TestOffsetDates:
    def test_offset_session_stored_as_local(self, repo):
        s = repo.create_session(_session(date="2024-05-15T09:00:00+00:00"))
        assert s.date.tzinfo is None
        assert s.date == _local("2024-05-15T09:00:00+00:00")
        assert repo.get_session(s.id).date == s.date

    def test_offset_and_naive_sessions_sort_together(self, repo):
        offset = repo.create_session(_session(subject="Offset", date="2024-05-15T09:00:00+00:00"))
        naive = repo.create_session(_session(subject="Naive", date=NOW - timedelta(hours=1)))
        expected = sorted([offset, naive], key=lambda s: s.date, reverse=True)
        assert [s.id for s in repo.list_sessions()] == [s.id for s in expected]

    def test_offset_goal_compares_with_naive_now(self, repo):
        g = repo.create_goal(GoalInput(
            type="weekly", target_hours=1, title="g",
            start_date="2024-05-14T00:00:00+00:00", end_date="2024-05-20T00:00:00+00:00",
        ))
        assert g.end_date.tzinfo is None
        assert repo.list_active_goals(NOW) == [g]


class TestExport:
    def test_empty_export(self, repo):
        assert repo.export_sessions_csv() == ""

    def test_export_oldest_first(self, repo):
        repo.create_session(_session(subject="Second", date=NOW))
        repo.create_session(_session(subject="First, really", date=NOW - timedelta(days=1)))
        lines = repo.export_sessions_csv().strip().split("\n")
        assert lines[0] == "id,subject,duration,date,notes"
        assert len(lines) == 3
        assert '"First, really"' in lines[1]
        assert "Second" in lines[2]


class TestDatabase:
    def test_connect_creates_schema(self, tmp_path):
        db = Database(db_path=tmp_path / "test.db")
        conn = db.connect()
        assert db.connect() is conn
        tables = {r[0] for r in conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table'"
        )}
        assert {"sessions", "goals"} <= tables
        db.close()
        assert db.conn is None

    def test_duration_check_constraint(self):
        repo = _sqlite_repo()
        with pytest.raises(sqlite3.IntegrityError):
            repo.create_session(SessionInput.model_construct(
                subject="Math", duration=0, date=NOW, notes=None))

    def test_offset_rows_read_back_naive(self):
        repo = _sqlite_repo()
        repo.conn.execute(
            "INSERT INTO sessions (id, subject, duration, date) VALUES (?, ?, ?, ?)",
            ("imported", "Math", 30, "2024-05-15T09:00:00+00:00"),
        )
        assert repo.get_session("imported").date == _local("2024-05-15T09:00:00+00:00")


class TestValidation:
    def test_valid_session(self):
        data = validate_session("  Physics ", "45", "2024-05-15T09:30:00", "")
        assert data.subject == "Physics"
        assert data.duration == 45
        assert data.date == datetime(2024, 5, 15, 9, 30)
        assert data.notes is None

    def test_session_reports_every_bad_field(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_session("", 0, "not a date")
        err = exc_info.value
        assert err.fields == ["subject", "duration", "date"]
        assert "Duration must be at least 1 minute" in str(err)

    def test_session_rejects_fractional_and_bool_duration(self):
        with pytest.raises(ValidationError):
            validate_session("Math", 1.5, NOW)
        with pytest.raises(ValidationError):
            validate_session("Math", True, NOW)

    def test_valid_goal(self):
        data = validate_goal("monthly", 20, "Exam prep", NOW, NOW + timedelta(days=30))
        assert data.type == GoalType.MONTHLY
        assert data.target_hours == 20

    def test_goal_errors(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_goal("yearly", 0, " ", None, "2024-06-01T00:00:00")
        assert exc_info.value.fields == ["type", "targetHours", "title", "startDate"]

    def test_validation_error_is_value_error(self):
        with pytest.raises(ValueError):
            validate_session(None, 10, NOW)

    def test_offset_dates_become_naive_local(self):
        data = validate_session("Math", 30, "2024-05-15T09:00:00+00:00")
        assert data.date.tzinfo is None
        assert data.date == _local("2024-05-15T09:00:00+00:00")
        goal = validate_goal("daily", 1, "g", "2024-05-15T00:00:00+02:00",
                             "2024-05-15T23:00:00+02:00")
        assert goal.start_date == _local("2024-05-15T00:00:00+02:00")
        assert goal.end_date.tzinfo is None

    def test_goal_messages_and_bool_target(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_goal("weekly", True, "Title", NOW, NOW)
        assert exc_info.value.fields == ["targetHours"]
        with pytest.raises(ValidationError) as exc_info:
            validate_goal("weekly", 0, "Title", NOW, "someday")
        assert exc_info.value.fields == ["targetHours", "endDate"]
        assert "Target must be at least 1 hour" in str(exc_info.value)
        assert '"endDate": Invalid date' in str(exc_info.value)

    def test_unknown_field_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            SessionInput(subject="Math", duration=10, date=NOW, mood="great")


class TestConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        cfg = load_config(tmp_path / "nope.json")
        assert cfg == DEFAULT_CONFIG

    def test_partial_file_is_merged(self, tmp_path):
        path = tmp_path / "settings.json"
        save_config({"storage": "memory", "histogram_bins": 4}, path)
        cfg = load_config(path)
        assert cfg["storage"] == "memory"
        assert cfg["histogram_bins"] == 4
        assert cfg["recent_sessions_limit"] == DEFAULT_CONFIG["recent_sessions_limit"]

    def test_bad_json_gives_defaults(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("{not json", encoding="utf-8")
        assert load_config(path) == DEFAULT_CONFIG
