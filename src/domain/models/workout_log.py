"""Workout log aggregate and embedded set-video metadata."""

from datetime import UTC, datetime
from enum import Enum
from typing import Any, NamedTuple, Self
from uuid import uuid4

from pydantic import Field, field_validator

from src.domain.exceptions import SetNotFoundException
from src.domain.models.base import CamelModel

# Exercise and set ids are embedded in blob keys and upload filenames,
# so they may not contain "." or "/".
ID_PATTERN = r"^[A-Za-z0-9_-]+$"

# Fields assigned by the server, never taken from a creation payload
_SERVER_MANAGED_FIELDS = frozenset(
    {"id", "_id", "createdAt", "created_at", "updatedAt", "updated_at"}
)


def _new_id() -> str:
    return str(uuid4())


class VideoFileExtension(str, Enum):
    """Video container formats accepted as set evidence."""

    MP4 = "mp4"
    MOV = "mov"
    WEBM = "webm"
    M4V = "m4v"
    AVI = "avi"
    MKV = "mkv"

    @property
    def mime_type(self) -> str:
        """MIME type served for this extension."""
        return _MIME_TYPES[self]


_MIME_TYPES: dict[VideoFileExtension, str] = {
    VideoFileExtension.MP4: "video/mp4",
    VideoFileExtension.MOV: "video/quicktime",
    VideoFileExtension.WEBM: "video/webm",
    VideoFileExtension.M4V: "video/x-m4v",
    VideoFileExtension.AVI: "video/x-msvideo",
    VideoFileExtension.MKV: "video/x-matroska",
}


class VideoMetadata(CamelModel):
    """Form video recorded for a single set.

    Present on a set if and only if the matching blob exists.
    """

    size: int = Field(gt=0, description="Size of the stored video in bytes")
    extension: VideoFileExtension = Field(description="Stored file extension")


class LoggedSet(CamelModel):
    """A single performed set."""

    id: str = Field(default_factory=_new_id, pattern=ID_PATTERN)
    reps: int | None = Field(default=None, ge=0)
    weight: float | None = Field(default=None, ge=0)
    rpe: float | None = Field(default=None, ge=0, le=10)
    notes: str = ""
    form_video: VideoMetadata | None = None


class LoggedExercise(CamelModel):
    """An exercise performed within a workout log."""

    id: str = Field(default_factory=_new_id, pattern=ID_PATTERN)
    name: str = Field(min_length=1)
    sets: list[LoggedSet] = Field(default_factory=list)

    @field_validator("sets")
    @classmethod
    def validate_unique_set_ids(cls, v: list[LoggedSet]) -> list[LoggedSet]:
        """Set ids must be unique within their exercise."""
        ids = [s.id for s in v]
        if len(ids) != len(set(ids)):
            raise ValueError("Set ids must be unique within an exercise")
        return v


class SetVideo(NamedTuple):
    """A set carrying a form video, addressed within its log."""

    exercise_id: str
    set_id: str
    video: VideoMetadata


def set_video_key(
    owner_id: str,
    workout_log_id: str,
    exercise_id: str,
    set_id: str,
    extension: VideoFileExtension,
) -> str:
    """Build the blob key of a set video.

    The layout ``{owner}/{log}/{exercise}.{set}.{extension}`` is shared with
    objects already in storage and must not change.
    """
    return f"{owner_id}/{workout_log_id}/{exercise_id}.{set_id}.{extension.value}"


class WorkoutLog(CamelModel):
    """Aggregate root for a logged workout.

    Owns its exercises, their sets and every set's video metadata; the whole
    tree is persisted as one document. Mutations return new instances and
    leave persistence to the caller.
    """

    id: str = Field(default_factory=_new_id)
    name: str = Field(min_length=1, description="Display name of the workout")
    notes: str = ""
    exercises: list[LoggedExercise] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @field_validator("exercises")
    @classmethod
    def validate_unique_exercise_ids(
        cls, v: list[LoggedExercise]
    ) -> list[LoggedExercise]:
        """Exercise ids must be unique within the log."""
        ids = [e.id for e in v]
        if len(ids) != len(set(ids)):
            raise ValueError("Exercise ids must be unique within a workout log")
        return v

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> Self:
        """Build a new log from a client payload.

        Server-managed fields are ignored and any client supplied form video
        metadata is dropped, since no blob backs it yet.

        Raises:
            pydantic.ValidationError: If the payload is invalid.
        """
        data = {k: v for k, v in payload.items() if k not in _SERVER_MANAGED_FIELDS}
        log = cls.model_validate(data)
        for exercise in log.exercises:
            for logged_set in exercise.sets:
                logged_set.form_video = None
        return log

    # =========================================================================
    # Lookup
    # =========================================================================

    def find_exercise(self, exercise_id: str) -> LoggedExercise | None:
        """Find an exercise by id."""
        for exercise in self.exercises:
            if exercise.id == exercise_id:
                return exercise
        return None

    def find_set(self, exercise_id: str, set_id: str) -> LoggedSet | None:
        """Find a set by exercise and set id.

        Returns None when either id is absent.
        """
        exercise = self.find_exercise(exercise_id)
        if exercise is None:
            return None
        for logged_set in exercise.sets:
            if logged_set.id == set_id:
                return logged_set
        return None

    def set_videos(self) -> list[SetVideo]:
        """List every set that carries a form video."""
        return [
            SetVideo(exercise.id, logged_set.id, logged_set.form_video)
            for exercise in self.exercises
            for logged_set in exercise.sets
            if logged_set.form_video is not None
        ]

    def video_key(
        self,
        owner_id: str,
        exercise_id: str,
        set_id: str,
        extension: VideoFileExtension,
    ) -> str:
        """Blob key of a set video in this log."""
        return set_video_key(owner_id, self.id, exercise_id, set_id, extension)

    def set_video_display_filename(self, exercise_id: str, set_id: str) -> str:
        """Human-friendly attachment name for a set video.

        Raises:
            SetNotFoundException: If the set does not exist or has no video.
        """
        exercise = self.find_exercise(exercise_id)
        if exercise is not None:
            for position, logged_set in enumerate(exercise.sets, start=1):
                if logged_set.id == set_id and logged_set.form_video is not None:
                    extension = logged_set.form_video.extension.value
                    return f"{self.name} - {exercise.name} - Set {position}.{extension}"
        raise SetNotFoundException(exercise_id, set_id)

    @property
    def set_count(self) -> int:
        """Total number of sets across all exercises."""
        return sum(len(exercise.sets) for exercise in self.exercises)

    @property
    def video_count(self) -> int:
        """Number of sets carrying a form video."""
        return len(self.set_videos())

    # =========================================================================
    # Mutations
    # =========================================================================

    def with_set_video(
        self,
        exercise_id: str,
        set_id: str,
        video: VideoMetadata,
    ) -> Self:
        """Create a new instance with a form video recorded on a set.

        Raises:
            SetNotFoundException: If the set does not exist.
        """
        return self._replace_set_video(exercise_id, set_id, video)

    def without_set_video(self, exercise_id: str, set_id: str) -> Self:
        """Create a new instance with a set's form video cleared.

        Raises:
            SetNotFoundException: If the set does not exist.
        """
        return self._replace_set_video(exercise_id, set_id, None)

    def _replace_set_video(
        self,
        exercise_id: str,
        set_id: str,
        video: VideoMetadata | None,
    ) -> Self:
        updated = self.model_copy(deep=True, update={"updated_at": datetime.now(UTC)})
        logged_set = updated.find_set(exercise_id, set_id)
        if logged_set is None:
            raise SetNotFoundException(exercise_id, set_id)
        logged_set.form_video = video
        return updated
