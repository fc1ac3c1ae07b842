"""Domain layer - business models and logic."""

from src.domain.exceptions import (
    AuthenticationException,
    DomainException,
    InvalidByteRangeException,
    InvalidSetVideoFilenameException,
    InvalidSetVideoUploadException,
    SetNotFoundException,
    UnsupportedVideoExtensionException,
    WorkoutLogNotFoundException,
    WorkoutLogValidationException,
)
from src.domain.models import (
    LoggedExercise,
    LoggedSet,
    SetVideo,
    User,
    VideoFileExtension,
    VideoMetadata,
    WorkoutLog,
    set_video_key,
    user_owns,
)
from src.domain.value_objects import ByteRange, SetVideoFilename

__all__ = [
    # Exceptions
    "DomainException",
    "AuthenticationException",
    "WorkoutLogNotFoundException",
    "WorkoutLogValidationException",
    "SetNotFoundException",
    "InvalidSetVideoFilenameException",
    "UnsupportedVideoExtensionException",
    "InvalidSetVideoUploadException",
    "InvalidByteRangeException",
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
    # Value Objects
    "ByteRange",
    "SetVideoFilename",
]
