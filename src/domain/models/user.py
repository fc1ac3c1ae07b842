"""User entity as seen by the workout log core."""

from typing import Any

from pydantic import Field, field_validator

from src.domain.models.base import CamelModel


class User(CamelModel):
    """Account owning workout logs.

    Accounts are created by the authentication flows; this service only reads
    them and maintains the ``workoutLogs`` back-reference list, most recent
    first.
    """

    id: str
    email: str = ""
    workout_logs: list[str] = Field(default_factory=list)

    @field_validator("workout_logs", mode="before")
    @classmethod
    def coerce_log_ids(cls, v: Any) -> Any:
        """Accept ObjectId references written by older clients."""
        if isinstance(v, list):
            return [str(item) for item in v]
        return v


def user_owns(user: User, workout_log_id: str) -> bool:
    """Check whether a workout log is referenced by the user."""
    return workout_log_id in user.workout_logs
