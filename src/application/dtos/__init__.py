"""Data Transfer Objects for application layer."""

from src.application.dtos.workout_log import (
    SetVideoDeletedResponse,
    SetVideoStream,
    SetVideoUpload,
    WorkoutLogHeader,
)

__all__ = [
    "SetVideoDeletedResponse",
    "SetVideoStream",
    "SetVideoUpload",
    "WorkoutLogHeader",
]
