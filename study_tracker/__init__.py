"""StudyTracker — study session logging with streaks, goals and insights."""

__version__ = "0.1.0"
