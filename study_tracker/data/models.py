"""
Data models for StudyTracker.

Plain dataclasses for the two stored records (Session, Goal) and for the
derived structures the statistics and insights engines hand to the UI.
Stored records are frozen: once created they are never edited.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


class GoalType:
    """Goal classification. Does not affect completion math."""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    ALL = (DAILY, WEEKLY, MONTHLY)


@dataclass(frozen=True)
class Session:
    """One logged study event."""
    id: str
    subject: str
    duration: int               # minutes, >= 1
    date: datetime
    notes: Optional[str] = None


@dataclass(frozen=True)
class Goal:
    """A target number of study hours inside a date window."""
    id: str
    type: str                   # GoalType.*
    target_hours: int
    title: str
    start_date: datetime
    end_date: datetime


# ── Derived (computed on demand, never persisted) ───────────────────────────

@dataclass
class StudyStats:
    total_hours: float = 0.0
    current_streak: int = 0
    longest_streak: int = 0
    sessions_this_week: int = 0
    goals_completed: int = 0

    def to_dict(self) -> dict:
        return {
            "totalHours": self.total_hours,
            "currentStreak": self.current_streak,
            "longestStreak": self.longest_streak,
            "sessionsThisWeek": self.sessions_this_week,
            "goalsCompleted": self.goals_completed,
        }


@dataclass
class SubjectStats:
    subject: str
    total_hours: float
    session_count: int
    average_session_length: float  # minutes, unrounded

    def to_dict(self) -> dict:
        return {
            "subject": self.subject,
            "totalHours": self.total_hours,
            "sessionCount": self.session_count,
            "averageSessionLength": self.average_session_length,
        }


@dataclass
class TimePattern:
    hour: int                   # 0-23
    session_count: int

    def to_dict(self) -> dict:
        return {"hour": self.hour, "sessionCount": self.session_count}


@dataclass
class Insights:
    most_studied_subject: str = ""
    most_productive_hour: int = 0
    average_session_length: int = 0  # minutes, rounded half-up
    study_patterns: List[TimePattern] = field(default_factory=list)
    subject_breakdown: List[SubjectStats] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "mostStudiedSubject": self.most_studied_subject,
            "mostProductiveHour": self.most_productive_hour,
            "averageSessionLength": self.average_session_length,
            "studyPatterns": [p.to_dict() for p in self.study_patterns],
            "subjectBreakdown": [s.to_dict() for s in self.subject_breakdown],
        }


@dataclass
class GoalProgress:
    """How far a goal's window has been filled with study time."""
    goal_id: str
    title: str
    target_hours: int
    hours_logged: float
    percent: float              # clamped to 0-100
    completed: bool

    def to_dict(self) -> dict:
        return {
            "goalId": self.goal_id,
            "title": self.title,
            "targetHours": self.target_hours,
            "hoursLogged": self.hours_logged,
            "percent": self.percent,
            "completed": self.completed,
        }


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   Defines every object that moves between layers. Session and Goal are the
#   only things we store; everything else is derived from them on request.
#
# Key classes and why they exist:
#   - Session / Goal: frozen dataclasses. There is no edit operation, so
#     making them immutable means an engine can never corrupt a record it
#     was handed.
#   - StudyStats / Insights / SubjectStats / TimePattern: the outputs of the
#     two engines. They are rebuilt on every call, never cached or saved.
#   - GoalProgress: per-goal "how close am I" numbers for progress bars.
#
# Data flow:
#   Dialog → validation → Repository.create_*() → Session/Goal
#   Repository.list_*() → engines → StudyStats / Insights → widgets
#
# Interviewer-friendly talking points:
#   1. to_dict() emits camelCase keys so a web front end could consume the
#      exact same payload shape as the JS version of this app.
#   2. GoalType is a constants class rather than an Enum so the value that
#      goes into SQLite is a plain string with no conversion step.
#   3. Derived structures have defaults so "no data" is just StudyStats().
