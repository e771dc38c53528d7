from .insights import compute_insights
from .statistics import compute_statistics
from .study_service import StorageError, StudyService, build_repository

__all__ = [
    "compute_insights", "compute_statistics",
    "StorageError", "StudyService", "build_repository",
]
