from .database import Database
from .models import Goal, GoalProgress, GoalType, Insights, Session, StudyStats
from .repository import MemoryRepository, Repository
from .validation import ValidationError

__all__ = [
    "Database", "Goal", "GoalProgress", "GoalType", "Insights", "Session",
    "StudyStats", "MemoryRepository", "Repository", "ValidationError",
]
