"""Application layer - use cases and orchestration.

This layer contains:
- Services: Workout log and set video orchestration
- DTOs: Data transfer objects for API boundaries
"""

from src.application.dtos import (
    SetVideoDeletedResponse,
    SetVideoStream,
    SetVideoUpload,
    WorkoutLogHeader,
)
from src.application.services import (
    SetVideoService,
    WorkoutLogService,
    WorkoutLogStorageService,
)

__all__ = [
    # DTOs
    "SetVideoDeletedResponse",
    "SetVideoStream",
    "SetVideoUpload",
    "WorkoutLogHeader",
    # Services
    "SetVideoService",
    "WorkoutLogService",
    "WorkoutLogStorageService",
]
