"""Domain models."""

from src.domain.models.user import User, user_owns
from src.domain.models.workout_log import (
    LoggedExercise,
    LoggedSet,
    SetVideo,
    VideoFileExtension,
    VideoMetadata,
    WorkoutLog,
    set_video_key,
)

__all__ = [
    # Workout log
    "WorkoutLog",
    "LoggedExercise",
    "LoggedSet",
    "SetVideo",
    "VideoFileExtension",
    "VideoMetadata",
    "set_video_key",
    # User
    "User",
    "user_owns",
]
