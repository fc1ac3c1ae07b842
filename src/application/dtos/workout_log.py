"""DTOs for workout log and set video operations."""

from collections.abc import AsyncIterator
from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel, Field

from src.domain.models.base import CamelModel
from src.domain.models.workout_log import WorkoutLog
from src.domain.value_objects.byte_range import ByteRange


class WorkoutLogHeader(CamelModel):
    """Summary of a workout log for listings."""

    id: str = Field(description="Workout log ID")
    name: str = Field(description="Workout log name")
    created_at: datetime = Field(description="When the log was created")
    exercise_count: int = Field(ge=0, description="Number of exercises")
    set_count: int = Field(ge=0, description="Number of sets across exercises")
    video_count: int = Field(ge=0, description="Number of sets with a form video")

    @classmethod
    def from_workout_log(cls, workout_log: WorkoutLog) -> "WorkoutLogHeader":
        """Summarize a workout log."""
        return cls(
            id=workout_log.id,
            name=workout_log.name,
            created_at=workout_log.created_at,
            exercise_count=len(workout_log.exercises),
            set_count=workout_log.set_count,
            video_count=workout_log.video_count,
        )


class SetVideoDeletedResponse(CamelModel):
    """Identifies the set whose video was deleted."""

    set_id: str
    exercise_id: str


class SetVideoUpload(BaseModel):
    """One uploaded file of a set video batch."""

    filename: str | None = Field(description="Original filename sent by the client")
    content: bytes = Field(description="Raw file bytes")

    @property
    def size(self) -> int:
        """Byte length of the file."""
        return len(self.content)


@dataclass
class SetVideoStream:
    """An opened set video ready to be piped to a response."""

    body: AsyncIterator[bytes]
    content_type: str
    total_size: int
    display_filename: str
    byte_range: ByteRange | None = None

    @property
    def status_code(self) -> int:
        """206 for range requests, 200 for the full object."""
        return 206 if self.byte_range is not None else 200

    @property
    def content_length(self) -> int:
        """Number of bytes the body will produce."""
        if self.byte_range is not None:
            return self.byte_range.length
        return self.total_size
