"""
Input validation for create requests.

SessionInput / GoalInput are pydantic request models. Bad input is reported
as a ValidationError listing every failing field under its camelCase wire
name; the engines never see it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Literal, Optional

import pydantic
from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)

# python attribute → wire name used in error reports
_WIRE_NAMES = {
    "target_hours": "targetHours",
    "start_date": "startDate",
    "end_date": "endDate",
}

_REQUIRED = {
    "subject": "Subject is required",
    "title": "Title is required",
}


@dataclass
class FieldError:
    field: str
    message: str


class ValidationError(ValueError):
    """Raised when a create request fails one or more field checks."""

    def __init__(self, errors: List[FieldError]) -> None:
        self.errors = errors
        details = "; ".join(f'"{e.field}": {e.message}' for e in errors)
        super().__init__(f"Validation error: {details}")

    @property
    def fields(self) -> List[str]:
        return [e.field for e in self.errors]


def naive_local(value: datetime) -> datetime:
    # stored and compared as naive local time
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


class _Request(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        str_strip_whitespace=True,
    )


class SessionInput(_Request):
    """A validated, not-yet-stored session."""

    subject: str = Field(min_length=1)
    duration: int = Field(ge=1)
    date: datetime
    notes: Optional[str] = None

    @field_validator("duration", mode="before")
    @classmethod
    def _no_bool(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("bool is not a duration")
        return value

    @field_validator("date")
    @classmethod
    def _naive_date(cls, value: datetime) -> datetime:
        return naive_local(value)

    @field_validator("notes")
    @classmethod
    def _blank_notes(cls, value: Optional[str]) -> Optional[str]:
        return value or None


class GoalInput(_Request):
    """A validated, not-yet-stored goal."""

    type: Literal["daily", "weekly", "monthly"]
    target_hours: int = Field(ge=1)
    title: str = Field(min_length=1)
    start_date: datetime
    end_date: datetime

    @field_validator("target_hours", mode="before")
    @classmethod
    def _no_bool(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("bool is not a number of hours")
        return value

    @field_validator("start_date", "end_date")
    @classmethod
    def _naive_dates(cls, value: datetime) -> datetime:
        return naive_local(value)


def validate_session(
    subject: Any, duration: Any, date: Any, notes: Any = None
) -> SessionInput:
    try:
        return SessionInput(subject=subject, duration=duration, date=date, notes=notes)
    except pydantic.ValidationError as exc:
        raise _to_field_errors("session", exc) from exc


def validate_goal(
    type: Any, target_hours: Any, title: Any, start_date: Any, end_date: Any
) -> GoalInput:
    try:
        return GoalInput(
            type=type, target_hours=target_hours, title=title,
            start_date=start_date, end_date=end_date,
        )
    except pydantic.ValidationError as exc:
        raise _to_field_errors("goal", exc) from exc


def _to_field_errors(kind: str, exc: pydantic.ValidationError) -> ValidationError:
    errors: List[FieldError] = []
    seen = set()
    for err in exc.errors():
        attr = str(err["loc"][0]) if err["loc"] else "__root__"
        if attr in seen:
            continue
        seen.add(attr)
        errors.append(FieldError(_WIRE_NAMES.get(attr, attr), _message(attr, err)))
    logger.debug("Rejected %s input: %s", kind, [e.field for e in errors])
    return ValidationError(errors)


def _message(attr: str, err: dict) -> str:
    kind = err["type"]
    if attr in _REQUIRED:
        return _REQUIRED[attr]
    if attr == "duration":
        if kind == "greater_than_equal":
            return "Duration must be at least 1 minute"
        return "Duration must be a whole number of minutes"
    if attr == "target_hours":
        if kind == "greater_than_equal":
            return "Target must be at least 1 hour"
        return "Target hours must be a whole number"
    if attr == "type":
        return "Goal type must be one of daily, weekly, monthly"
    if attr in ("date", "start_date", "end_date"):
        return "Invalid date"
    if attr == "notes":
        return "Notes must be text"
    return err["msg"]


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   Turns raw form values into typed SessionInput / GoalInput models, or
#   raises one ValidationError that lists every bad field at once.
#
# Key points:
#   - pydantic does the coercion: "45" becomes 45, an ISO string becomes a
#     datetime, 1.5 minutes and True are rejected.
#   - Dates with a UTC offset are converted to naive local time on the way
#     in, so both stores only ever hold naive values and can sort them.
#   - pydantic's own error list is mapped onto FieldError so callers never
#     import pydantic; ValidationError subclasses ValueError.
#
# Interviewer-friendly talking points:
#   1. Validation lives in front of the store, not inside the engines. The
#      engines are pure math and trust their input.
#   2. Field names in errors use the camelCase wire names (targetHours) so
#      a front end can map them straight onto form controls.
