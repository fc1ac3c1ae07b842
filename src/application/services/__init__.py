"""Application services for workout logs and their set videos."""

from src.application.services.set_videos import SetVideoService
from src.application.services.storage import WorkoutLogStorageService
from src.application.services.workout_logs import WorkoutLogService

__all__ = [
    "SetVideoService",
    "WorkoutLogService",
    "WorkoutLogStorageService",
]
