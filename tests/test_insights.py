"""Unit tests for the insights engine."""

import random
import pytest
from datetime import datetime, timedelta
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from study_tracker.data.models import Insights, Session
from study_tracker.services.insights import (
    compute_insights, round_half_up, session_length_histogram,
)

NOW = datetime(2024, 5, 15, 12, 0)

_counter = iter(range(1, 10_000))


def _s(subject: str, duration: int, hour: int = 10, days_ago: int = 0) -> Session:
    date = NOW.replace(hour=hour, minute=15) - timedelta(days=days_ago)
    return Session(id=f"s{next(_counter)}", subject=subject, duration=duration, date=date)


class TestEmpty:
    def test_empty_insights(self):
        insights = compute_insights([], NOW)
        assert insights == Insights()
        assert insights.most_studied_subject == ""
        assert insights.most_productive_hour == 0
        assert insights.average_session_length == 0
        assert insights.study_patterns == []
        assert insights.subject_breakdown == []

    def test_now_is_optional(self):
        assert compute_insights([]) == Insights()


class TestSubjects:
    def test_math_and_art(self):
        insights = compute_insights([_s("Math", 90), _s("Art", 30)], NOW)
        assert insights.most_studied_subject == "Math"
        assert insights.average_session_length == 60

        math, art = insights.subject_breakdown
        assert math.subject == "Math"
        assert math.total_hours == 1.5
        assert math.session_count == 1
        assert math.average_session_length == 90.0
        assert art.subject == "Art"
        assert art.total_hours == 0.5

    def test_subject_average_not_rounded(self):
        insights = compute_insights([_s("Bio", 10), _s("Bio", 15)], NOW)
        [bio] = insights.subject_breakdown
        assert bio.average_session_length == 12.5
        assert bio.session_count == 2
        # top-level average is rounded half up
        assert insights.average_session_length == 13

    def test_subject_by_minutes_not_count(self):
        sessions = [_s("Art", 10), _s("Art", 10), _s("Art", 10), _s("Math", 45)]
        assert compute_insights(sessions, NOW).most_studied_subject == "Math"

    def test_any_nonempty_subject_accepted(self):
        insights = compute_insights([_s("Ancient Greek (self-study)", 20)], NOW)
        assert insights.most_studied_subject == "Ancient Greek (self-study)"

    def test_breakdown_sorted_by_hours(self):
        sessions = [_s("A", 10), _s("B", 50), _s("C", 30), _s("A", 5)]
        order = [st.subject for st in compute_insights(sessions, NOW).subject_breakdown]
        assert order == ["B", "C", "A"]

    def test_tie_goes_to_first_encountered(self):
        assert compute_insights([_s("Art", 60), _s("Math", 60)], NOW).most_studied_subject == "Art"
        assert compute_insights([_s("Math", 60), _s("Art", 60)], NOW).most_studied_subject == "Math"


class TestHours:
    def test_productive_hour_counts_sessions(self):
        sessions = [_s("Math", 300, hour=21), _s("Math", 10, hour=8), _s("Art", 10, hour=8)]
        assert compute_insights(sessions, NOW).most_productive_hour == 8

    def test_study_patterns_ascending(self):
        sessions = [_s("M", 10, hour=22), _s("M", 10, hour=6), _s("M", 10, hour=14),
                    _s("M", 10, hour=6)]
        patterns = compute_insights(sessions, NOW).study_patterns
        assert [(p.hour, p.session_count) for p in patterns] == [(6, 2), (14, 1), (22, 1)]

    def test_hour_tie_goes_to_first_encountered(self):
        early_first = [_s("M", 10, hour=8), _s("M", 10, hour=21)]
        late_first = [_s("M", 10, hour=21), _s("M", 10, hour=8)]
        assert compute_insights(early_first, NOW).most_productive_hour == 8
        assert compute_insights(late_first, NOW).most_productive_hour == 21

    def test_midnight_hour(self):
        insights = compute_insights([_s("M", 10, hour=0)], NOW)
        assert insights.most_productive_hour == 0
        assert insights.study_patterns[0].hour == 0


class TestDeterminism:
    def _sessions(self):
        return [
            _s("Math", 50, hour=9, days_ago=0),
            _s("Physics", 35, hour=14, days_ago=1),
            _s("Math", 20, hour=9, days_ago=2),
            _s("History", 40, hour=20, days_ago=3),
            _s("Physics", 25, hour=9, days_ago=4),
        ]

    def test_idempotent(self):
        sessions = self._sessions()
        assert compute_insights(sessions, NOW) == compute_insights(sessions, NOW)

    def test_permutation_invariant_without_ties(self):
        sessions = self._sessions()
        expected = compute_insights(sessions, NOW).to_dict()
        rng = random.Random(42)
        for _ in range(5):
            shuffled = sessions[:]
            rng.shuffle(shuffled)
            assert compute_insights(shuffled, NOW).to_dict() == expected

    def test_input_not_mutated(self):
        sessions = self._sessions()
        before = list(sessions)
        compute_insights(sessions, NOW)
        assert sessions == before


class TestHelpers:
    @pytest.mark.parametrize("value, expected", [
        (60.0, 60), (62.5, 63), (1.5, 2), (2.4999, 2), (0.5, 1),
    ])
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected

    def test_histogram(self):
        sessions = [_s("M", d) for d in (10, 20, 25, 30, 90, 90)]
        counts, edges = session_length_histogram(sessions, bins=4)
        assert sum(counts) == 6
        assert len(edges) == len(counts) + 1
        assert edges[0] == 10.0
        assert edges[-1] == 90.0

    def test_histogram_empty(self):
        assert session_length_histogram([]) == ([], [])

    def test_to_dict_uses_wire_names(self):
        data = compute_insights([_s("Math", 30, hour=7)], NOW).to_dict()
        assert set(data) == {
            "mostStudiedSubject", "mostProductiveHour", "averageSessionLength",
            "studyPatterns", "subjectBreakdown",
        }
        assert data["studyPatterns"] == [{"hour": 7, "sessionCount": 1}]
        assert data["subjectBreakdown"][0]["sessionCount"] == 1
