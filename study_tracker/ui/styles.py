"""
Dark mode stylesheet for the entire application.
Nord-inspired palette.
"""

DARK_STYLESHEET = """
/* ── Base ────────────────────────────────────────────────────────── */
QWidget {
    background-color: #2e3440;
    color: #eceff4;
    font-family: "Segoe UI", "Inter", sans-serif;
    font-size: 13px;
}

/* ── Buttons ─────────────────────────────────────────────────────── */
QPushButton {
    background-color: #3b4252;
    color: #eceff4;
    border: 1px solid #4c566a;
    border-radius: 6px;
    padding: 7px 16px;
    font-weight: 600;
}

QPushButton:hover {
    background-color: #434c5e;
    border-color: #88c0d0;
}

QPushButton#primary {
    background-color: #88c0d0;
    color: #2e3440;
    border: none;
}

QPushButton#primary:hover {
    background-color: #8fbcbb;
}

/* ── Inputs ──────────────────────────────────────────────────────── */
QLineEdit, QPlainTextEdit, QComboBox, QSpinBox, QDateTimeEdit, QDateEdit {
    background-color: #3b4252;
    color: #eceff4;
    border: 1px solid #4c566a;
    border-radius: 6px;
    padding: 5px 8px;
    selection-background-color: #88c0d0;
    selection-color: #2e3440;
}

QLineEdit:focus, QPlainTextEdit:focus, QComboBox:focus,
QSpinBox:focus, QDateTimeEdit:focus, QDateEdit:focus {
    border-color: #88c0d0;
}

QComboBox QAbstractItemView {
    background-color: #3b4252;
    border: 1px solid #4c566a;
    selection-background-color: #434c5e;
}

/* ── Labels ──────────────────────────────────────────────────────── */
QLabel {
    background: transparent;
}

QLabel#title {
    font-size: 20px;
    font-weight: 700;
    color: #88c0d0;
}

QLabel#subtitle {
    font-size: 13px;
    color: #d8dee9;
}

/* ── Tables ──────────────────────────────────────────────────────── */
QTableWidget {
    background-color: #3b4252;
    alternate-background-color: #353c4a;
    gridline-color: #434c5e;
    border: 1px solid #4c566a;
    border-radius: 6px;
}

QHeaderView::section {
    background-color: #2e3440;
    color: #d8dee9;
    padding: 6px;
    border: none;
    border-bottom: 1px solid #4c566a;
    font-weight: 600;
}

/* ── Tab Widget ──────────────────────────────────────────────────── */
QTabWidget::pane {
    border: 1px solid #3b4252;
    border-radius: 6px;
}

QTabBar::tab {
    background-color: #272c36;
    color: #d8dee9;
    padding: 9px 20px;
    margin-right: 2px;
    border-top-left-radius: 6px;
    border-top-right-radius: 6px;
    font-weight: 600;
}

QTabBar::tab:selected {
    background-color: #2e3440;
    color: #88c0d0;
    border-bottom: 2px solid #88c0d0;
}

/* ── Scroll Area ─────────────────────────────────────────────────── */
QScrollArea {
    border: none;
}

QScrollBar:vertical {
    background-color: #272c36;
    width: 8px;
}

QScrollBar::handle:vertical {
    background-color: #4c566a;
    border-radius: 4px;
    min-height: 20px;
}

/* ── Progress Bar ────────────────────────────────────────────────── */
QProgressBar {
    background-color: #3b4252;
    border-radius: 4px;
    text-align: center;
    height: 14px;
}

QProgressBar::chunk {
    background-color: #a3be8c;
    border-radius: 4px;
}

/* ── Tooltip ─────────────────────────────────────────────────────── */
QToolTip {
    background-color: #3b4252;
    color: #eceff4;
    border: 1px solid #4c566a;
    padding: 4px 8px;
}
"""
