"""
StudyTracker — study sessions, goals, streaks and insights.
Entry point for the application.
"""

import logging
import sys
from pathlib import Path

# Ensure study_tracker is importable when run from another directory
sys.path.insert(0, str(Path(__file__).resolve().parent))

from PySide6.QtWidgets import QApplication

from study_tracker.config import load_config
from study_tracker.ui.main_window import MainWindow
from study_tracker.ui.styles import DARK_STYLESHEET


def setup_logging(config: dict) -> None:
    logging.basicConfig(
        level=getattr(logging, str(config.get("log_level", "INFO")).upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(config.get("log_file", "study_tracker.log"), encoding="utf-8"),
        ],
    )


def main() -> None:
    config = load_config()
    setup_logging(config)
    logger = logging.getLogger(__name__)
    logger.info("Starting StudyTracker (storage=%s)...", config.get("storage"))

    app = QApplication(sys.argv)
    app.setApplicationName("StudyTracker")
    app.setOrganizationName("StudyTracker")
    app.setStyleSheet(DARK_STYLESHEET)

    window = MainWindow(config)
    window.show()

    logger.info("Application started.")
    sys.exit(app.exec())


if __name__ == "__main__":
    main()


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   Loads settings, sets up logging, creates the Qt application, applies
#   the dark theme and opens MainWindow.
#
# Key points:
#   - Settings are loaded BEFORE logging so the log level and file name
#     can come from config/settings.json.
#   - app.exec(): starts the Qt event loop; the program lives inside it
#     until the window closes.
#
# Interviewer-friendly talking points:
#   1. Logging to both console and file: console for development, file
#      for debugging user-reported issues.
#   2. The window receives config, not a repository, so the choice of
#      storage backend stays a one-line settings change.
