"""
Form dialogs for logging a session and creating a goal.

Both dialogs hand raw form values to StudyService and show the returned
ValidationError / StorageError text instead of validating on their own.
"""

from __future__ import annotations

import logging
from datetime import datetime, time, timedelta
from typing import List, Optional

from PySide6.QtCore import QDate, QDateTime, Slot
from PySide6.QtWidgets import (
    QComboBox, QDateEdit, QDateTimeEdit, QDialog, QDialogButtonBox,
    QFormLayout, QLineEdit, QMessageBox, QPlainTextEdit, QSpinBox,
)

from study_tracker.data.models import Goal, GoalType, Session
from study_tracker.data.validation import ValidationError
from study_tracker.services.study_service import StorageError, StudyService

logger = logging.getLogger(__name__)


class SessionDialog(QDialog):
    """'Log Study Session' form."""

    def __init__(self, service: StudyService, subjects: List[str], parent=None) -> None:
        super().__init__(parent)
        self.service = service
        self.created: Optional[Session] = None
        self.setWindowTitle("Log Study Session")
        self.setMinimumWidth(400)
        self._build_ui(subjects)

    def _build_ui(self, subjects: List[str]) -> None:
        layout = QFormLayout(self)

        # Subject: known subjects first, free text allowed
        self.subject_combo = QComboBox()
        self.subject_combo.setEditable(True)
        known = {s.subject for s in self.service.list_sessions()}
        for name in sorted(known | set(subjects)):
            self.subject_combo.addItem(name)
        self.subject_combo.setCurrentText("")
        self.subject_combo.lineEdit().setPlaceholderText("Select or type a subject...")
        layout.addRow("Subject:", self.subject_combo)

        self.duration_spin = QSpinBox()
        self.duration_spin.setRange(1, 24 * 60)
        self.duration_spin.setValue(45)
        self.duration_spin.setSuffix(" min")
        layout.addRow("Duration:", self.duration_spin)

        now = QDateTime.currentDateTime()
        self.date_edit = QDateTimeEdit(now)
        self.date_edit.setCalendarPopup(True)
        self.date_edit.setDisplayFormat("yyyy-MM-dd HH:mm")
        self.date_edit.setMaximumDateTime(now)
        layout.addRow("When:", self.date_edit)

        self.notes_edit = QPlainTextEdit()
        self.notes_edit.setPlaceholderText("Optional notes...")
        self.notes_edit.setFixedHeight(80)
        layout.addRow("Notes:", self.notes_edit)

        buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Save | QDialogButtonBox.StandardButton.Cancel
        )
        buttons.accepted.connect(self._on_accept)
        buttons.rejected.connect(self.reject)
        layout.addRow(buttons)

    @Slot()
    def _on_accept(self) -> None:
        notes = self.notes_edit.toPlainText().strip() or None
        try:
            self.created = self.service.log_session(
                subject=self.subject_combo.currentText(),
                duration=self.duration_spin.value(),
                date=self.date_edit.dateTime().toPython(),
                notes=notes,
            )
        except ValidationError as exc:
            QMessageBox.warning(self, "Check the form", str(exc))
            return
        except StorageError as exc:
            QMessageBox.critical(self, "Could not save", str(exc))
            return
        self.accept()


class GoalDialog(QDialog):
    """'New Goal' form. Picking a type pre-fills a matching window."""

    _TYPE_LABELS = {
        GoalType.DAILY: "Daily",
        GoalType.WEEKLY: "Weekly",
        GoalType.MONTHLY: "Monthly",
    }

    def __init__(self, service: StudyService, parent=None) -> None:
        super().__init__(parent)
        self.service = service
        self.created: Optional[Goal] = None
        self.setWindowTitle("New Goal")
        self.setMinimumWidth(400)
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QFormLayout(self)

        self.title_input = QLineEdit()
        self.title_input.setPlaceholderText("e.g. Finish calculus review")
        layout.addRow("Title:", self.title_input)

        self.type_combo = QComboBox()
        for value in GoalType.ALL:
            self.type_combo.addItem(self._TYPE_LABELS[value], value)
        self.type_combo.setCurrentIndex(1)
        self.type_combo.currentIndexChanged.connect(self._on_type_changed)
        layout.addRow("Type:", self.type_combo)

        self.hours_spin = QSpinBox()
        self.hours_spin.setRange(1, 1000)
        self.hours_spin.setValue(10)
        self.hours_spin.setSuffix(" h")
        layout.addRow("Target:", self.hours_spin)

        self.start_edit = QDateEdit(QDate.currentDate())
        self.start_edit.setCalendarPopup(True)
        layout.addRow("Start:", self.start_edit)

        self.end_edit = QDateEdit()
        self.end_edit.setCalendarPopup(True)
        layout.addRow("End:", self.end_edit)
        self._on_type_changed()

        buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Save | QDialogButtonBox.StandardButton.Cancel
        )
        buttons.accepted.connect(self._on_accept)
        buttons.rejected.connect(self.reject)
        layout.addRow(buttons)

    @Slot()
    def _on_type_changed(self) -> None:
        start = self.start_edit.date().toPython()
        span = {
            GoalType.DAILY: timedelta(days=0),
            GoalType.WEEKLY: timedelta(days=6),
            GoalType.MONTHLY: timedelta(days=29),
        }[self.type_combo.currentData()]
        self.end_edit.setDate(start + span)

    @Slot()
    def _on_accept(self) -> None:
        start = datetime.combine(self.start_edit.date().toPython(), time.min)
        end = datetime.combine(self.end_edit.date().toPython(), time.max)
        if end < start:
            QMessageBox.warning(self, "Check the form", "End date is before the start date.")
            return
        try:
            self.created = self.service.create_goal(
                type=self.type_combo.currentData(),
                target_hours=self.hours_spin.value(),
                title=self.title_input.text(),
                start_date=start,
                end_date=end,
            )
        except ValidationError as exc:
            QMessageBox.warning(self, "Check the form", str(exc))
            return
        except StorageError as exc:
            QMessageBox.critical(self, "Could not save", str(exc))
            return
        self.accept()
