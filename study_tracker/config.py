"""
Application settings, persisted as JSON in config/settings.json.

Missing keys fall back to DEFAULT_CONFIG; an unreadable file falls back
entirely.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

ROOT_DIR = Path(__file__).resolve().parent.parent
CONFIG_PATH = ROOT_DIR / "config" / "settings.json"

DEFAULT_CONFIG = {
    "storage": "sqlite",            # "sqlite" | "memory"
    "db_path": str(ROOT_DIR / "study_tracker.db"),
    "recent_sessions_limit": 5,
    "histogram_bins": 10,
    "log_file": "study_tracker.log",
    "log_level": "INFO",
    "subjects": [
        "Mathematics", "Physics", "Chemistry", "Biology",
        "Computer Science", "History", "Literature", "Languages",
    ],
}


def load_config(path: Optional[Path] = None) -> dict:
    path = path or CONFIG_PATH
    if path.exists():
        try:
            with open(path, encoding="utf-8") as f:
                cfg = json.load(f)
            if not isinstance(cfg, dict):
                raise ValueError("top-level JSON value must be an object")
            merged = DEFAULT_CONFIG.copy()
            merged.update(cfg)
            return merged
        except (json.JSONDecodeError, ValueError) as exc:
            logger.warning("Bad settings file %s (%s), using defaults.", path, exc)
    return DEFAULT_CONFIG.copy()


def save_config(config: dict, path: Optional[Path] = None) -> None:
    path = path or CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config, f, indent=2)
