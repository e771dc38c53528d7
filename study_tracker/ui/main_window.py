"""
Main Window — the central hub of StudyTracker.

Contains:
  - Dashboard tab (stats, recent sessions, active goals)
  - Sessions tab (full history + "Log Session")
  - Goals tab (all goals with progress + "New Goal")
  - Insights tab (patterns and charts)
"""

from __future__ import annotations

import logging
from pathlib import Path

from PySide6.QtCore import Qt, Slot
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QAbstractItemView, QFileDialog, QHBoxLayout, QHeaderView, QLabel,
    QMainWindow, QMessageBox, QPushButton, QTableWidget, QTableWidgetItem,
    QTabWidget, QVBoxLayout, QWidget,
)

from study_tracker.services.study_service import StorageError, StudyService, build_repository
from study_tracker.ui.dashboard_widget import DashboardWidget, format_minutes
from study_tracker.ui.dialogs import GoalDialog, SessionDialog
from study_tracker.ui.insights_widget import InsightsWidget

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """The main application window."""

    def __init__(self, config: dict) -> None:
        super().__init__()
        self.config = config
        self.setWindowTitle("StudyTracker")
        self.setMinimumSize(900, 650)
        self.resize(1100, 780)

        # ── Initialize core systems ─────────────────────────────────────
        self.repo, self.db = build_repository(config)
        self.service = StudyService(
            self.repo,
            recent_limit=config.get("recent_sessions_limit", 5),
            histogram_bins=config.get("histogram_bins", 10),
        )

        self._build_ui()
        self._refresh_current_tab()

    # ── UI Construction ─────────────────────────────────────────────────

    def _build_ui(self) -> None:
        central = QWidget()
        self.setCentralWidget(central)
        main_layout = QVBoxLayout(central)
        main_layout.setContentsMargins(0, 0, 0, 0)

        self.tabs = QTabWidget()
        main_layout.addWidget(self.tabs)

        self.dashboard = DashboardWidget(self.service)
        self.tabs.addTab(self.dashboard, "Dashboard")

        self.sessions_tab = self._build_sessions_tab()
        self.tabs.addTab(self.sessions_tab, "Sessions")

        self.goals_tab = self._build_goals_tab()
        self.tabs.addTab(self.goals_tab, "Goals")

        self.insights = InsightsWidget(self.service)
        self.tabs.addTab(self.insights, "Insights")

        self.tabs.currentChanged.connect(self._on_tab_changed)

    def _build_sessions_tab(self) -> QWidget:
        widget = QWidget()
        layout = QVBoxLayout(widget)
        layout.setContentsMargins(24, 20, 24, 24)

        header = QHBoxLayout()
        title = QLabel("Study Sessions")
        title.setObjectName("title")
        header.addWidget(title)
        header.addStretch()
        btn_export = QPushButton("Export CSV")
        btn_export.clicked.connect(self._on_export_csv)
        header.addWidget(btn_export)
        btn_log = QPushButton("Log Session")
        btn_log.setObjectName("primary")
        btn_log.clicked.connect(self._on_log_session)
        header.addWidget(btn_log)
        layout.addLayout(header)

        self.sessions_table = _make_table(["Date", "Subject", "Duration", "Notes"])
        layout.addWidget(self.sessions_table)
        return widget

    def _build_goals_tab(self) -> QWidget:
        widget = QWidget()
        layout = QVBoxLayout(widget)
        layout.setContentsMargins(24, 20, 24, 24)

        header = QHBoxLayout()
        title = QLabel("Study Goals")
        title.setObjectName("title")
        header.addWidget(title)
        header.addStretch()
        btn_new = QPushButton("New Goal")
        btn_new.setObjectName("primary")
        btn_new.clicked.connect(self._on_new_goal)
        header.addWidget(btn_new)
        layout.addLayout(header)

        columns = ["Title", "Type", "Window", "Target", "Logged", "Progress"]
        layout.addWidget(_subtitle("Active"))
        self.active_goals_table = _make_table(columns)
        layout.addWidget(self.active_goals_table)
        layout.addWidget(_subtitle("Ended"))
        self.past_goals_table = _make_table(columns)
        layout.addWidget(self.past_goals_table)
        return widget

    # ── Refresh ─────────────────────────────────────────────────────────

    def _refresh_current_tab(self) -> None:
        try:
            current = self.tabs.currentWidget()
            if current is self.dashboard:
                self.dashboard.refresh_data()
            elif current is self.sessions_tab:
                self._refresh_sessions()
            elif current is self.goals_tab:
                self._refresh_goals()
            elif current is self.insights:
                self.insights.refresh_data()
        except StorageError as exc:
            QMessageBox.critical(self, "Storage error", str(exc))

    def _refresh_sessions(self) -> None:
        sessions = self.service.list_sessions()
        table = self.sessions_table
        table.setRowCount(len(sessions))
        for row, s in enumerate(sessions):
            _set_row(table, row, [
                s.date.strftime("%Y-%m-%d %H:%M"),
                s.subject,
                format_minutes(s.duration),
                s.notes or "",
            ])

    def _refresh_goals(self) -> None:
        goals = {g.id: g for g in self.service.list_goals()}
        active = self.service.get_active_goal_progress()
        active_ids = {p.goal_id for p in active}
        ended = [p for p in self.service.get_goal_progress() if p.goal_id not in active_ids]
        self._fill_goal_table(self.active_goals_table, active, goals)
        self._fill_goal_table(self.past_goals_table, ended, goals)

    @staticmethod
    def _fill_goal_table(table: QTableWidget, progress, goals) -> None:
        table.setRowCount(len(progress))
        for row, p in enumerate(progress):
            goal = goals[p.goal_id]
            window = (f"{goal.start_date.strftime('%b %d')} – "
                      f"{goal.end_date.strftime('%b %d, %Y')}")
            _set_row(table, row, [
                goal.title,
                goal.type.capitalize(),
                window,
                f"{goal.target_hours} h",
                f"{p.hours_logged:.1f} h",
                "✓ complete" if p.completed else f"{p.percent:.0f}%",
            ])

    # ── Actions ─────────────────────────────────────────────────────────

    @Slot()
    def _on_log_session(self) -> None:
        dialog = SessionDialog(self.service, self.config.get("subjects", []), self)
        if dialog.exec() and dialog.created:
            logger.info("Logged session %s", dialog.created.id)
            self._refresh_current_tab()

    @Slot()
    def _on_new_goal(self) -> None:
        dialog = GoalDialog(self.service, self)
        if dialog.exec() and dialog.created:
            logger.info("Created goal %s", dialog.created.id)
            self._refresh_current_tab()

    @Slot()
    def _on_export_csv(self) -> None:
        path, _ = QFileDialog.getSaveFileName(
            self, "Export sessions", "study_sessions.csv", "CSV files (*.csv)"
        )
        if not path:
            return
        try:
            text = self.service.export_csv()
            Path(path).write_text(text, encoding="utf-8")
        except (StorageError, OSError) as exc:
            QMessageBox.critical(self, "Export failed", str(exc))
            return
        logger.info("Exported sessions to %s", path)

    @Slot(int)
    def _on_tab_changed(self, index: int) -> None:
        self._refresh_current_tab()

    def closeEvent(self, event: QCloseEvent) -> None:
        if self.db is not None:
            self.db.close()
        event.accept()


def _make_table(headers) -> QTableWidget:
    table = QTableWidget(0, len(headers))
    table.setHorizontalHeaderLabels(headers)
    table.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
    table.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
    table.setAlternatingRowColors(True)
    table.verticalHeader().setVisible(False)
    table.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeMode.Stretch)
    return table


def _subtitle(text: str) -> QLabel:
    label = QLabel(text)
    label.setObjectName("subtitle")
    return label


def _set_row(table: QTableWidget, row: int, values) -> None:
    for col, value in enumerate(values):
        item = QTableWidgetItem(value)
        item.setFlags(item.flags() & ~Qt.ItemFlag.ItemIsEditable)
        table.setItem(row, col, item)


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   Composes the app: settings → repository → StudyService → tabs.
#
# Key classes:
#   - MainWindow: owns the repository (and closes the SQLite connection on
#     exit) and refreshes whichever tab becomes visible.
#
# Data flow:
#   "Log Session" → SessionDialog → service.log_session() → repo →
#   dialog closes → current tab refreshes → engines recompute
#
# Interviewer-friendly talking points:
#   1. Composition root: this is the only place that decides SQLite vs.
#      memory. Everything below gets the store handed to it.
#   2. Lazy refresh: only the visible tab recomputes, so switching to the
#      sessions list doesn't pay for chart rendering.
