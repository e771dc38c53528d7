"""
Insights tab — favorite subject, peak hour, typical session, and charts.
"""

from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import Qt, Slot
from PySide6.QtWidgets import QHBoxLayout, QScrollArea, QVBoxLayout, QWidget

from study_tracker.services.study_service import StudyService
from study_tracker.ui import plot_backend
from study_tracker.ui.dashboard_widget import (
    ChartSlot, MetricCard, SectionHeader, format_minutes,
)

logger = logging.getLogger(__name__)


def format_hour(hour: int) -> str:
    """13 -> '1 PM'."""
    suffix = "AM" if hour < 12 else "PM"
    h12 = hour % 12 or 12
    return f"{h12} {suffix}"


class InsightsWidget(QWidget):
    def __init__(self, service: StudyService, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.service = service
        self._setup_ui()

    def _setup_ui(self) -> None:
        outer = QVBoxLayout(self)
        outer.setContentsMargins(0, 0, 0, 0)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)

        content = QWidget()
        cl = QVBoxLayout(content)
        cl.setContentsMargins(24, 16, 24, 24)
        cl.setSpacing(10)

        cl.addWidget(SectionHeader("highlights"))
        row = QHBoxLayout()
        row.setSpacing(8)
        self.card_subject = MetricCard("most studied subject", "#a3be8c",
            "Subject with the most total minutes.")
        self.card_hour = MetricCard("most productive hour", "#88c0d0",
            "Hour of day in which you start the most sessions.")
        self.card_avg = MetricCard("average session", "#ebcb8b",
            "Mean session length across all subjects.")
        for c in (self.card_subject, self.card_hour, self.card_avg):
            row.addWidget(c)
        cl.addLayout(row)

        cl.addWidget(SectionHeader("patterns"))
        self.chart_trend = ChartSlot()
        cl.addWidget(self.chart_trend)

        charts = QHBoxLayout()
        charts.setSpacing(10)
        self.chart_hours = ChartSlot()
        self.chart_subjects = ChartSlot()
        charts.addWidget(self.chart_hours)
        charts.addWidget(self.chart_subjects)
        cl.addLayout(charts)

        self.chart_lengths = ChartSlot()
        cl.addWidget(self.chart_lengths)

        cl.addStretch()
        scroll.setWidget(content)
        outer.addWidget(scroll)

    @Slot()
    def refresh_data(self) -> None:
        insights = self.service.get_insights()
        has_data = bool(insights.subject_breakdown)

        self.card_subject.set_text(insights.most_studied_subject)
        self.card_hour.set_text(format_hour(insights.most_productive_hour) if has_data else "")
        self.card_avg.set_text(
            format_minutes(insights.average_session_length) if has_data else ""
        )

        sessions = self.service.list_sessions()
        counts, edges = self.service.get_length_histogram()
        self.chart_trend.set_chart(
            plot_backend.plot_daily_minutes(sessions, self.service.clock()))
        self.chart_hours.set_chart(plot_backend.plot_study_patterns(insights.study_patterns))
        self.chart_subjects.set_chart(
            plot_backend.plot_subject_hours(insights.subject_breakdown))
        self.chart_lengths.set_chart(plot_backend.plot_length_histogram(counts, edges))

        logger.info("Insights refreshed: %d subjects", len(insights.subject_breakdown))
