"""Workout log service: create, read and delete logs for a user."""

from typing import Any

from pydantic import ValidationError

from src.application.dtos.workout_log import WorkoutLogHeader
from src.application.services.set_videos import SetVideoService
from src.application.services.storage import WorkoutLogStorageService
from src.commons.telemetry import get_logger
from src.domain.exceptions import (
    WorkoutLogNotFoundException,
    WorkoutLogValidationException,
)
from src.domain.models.user import User, user_owns
from src.domain.models.workout_log import WorkoutLog


class WorkoutLogService:
    """Orchestrates workout log lifecycles for their owners."""

    def __init__(
        self,
        storage: WorkoutLogStorageService,
        set_videos: SetVideoService,
    ) -> None:
        self._storage = storage
        self._set_videos = set_videos
        self._logger = get_logger(__name__)

    async def create(self, user: User, payload: Any) -> WorkoutLog:
        """Create a workout log and reference it from its owner.

        Raises:
            WorkoutLogValidationException: If the payload is invalid.
        """
        if not isinstance(payload, dict):
            raise WorkoutLogValidationException(
                "body", "Workout log must be a JSON object"
            )
        try:
            workout_log = WorkoutLog.from_payload(payload)
        except ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first["loc"]) or "body"
            raise WorkoutLogValidationException(field, first["msg"]) from e

        await self._storage.save_workout_log(workout_log)
        await self._storage.add_log_reference(user.id, workout_log.id)

        self._logger.info(
            "Workout log created",
            extra={"workout_log_id": workout_log.id, "user_id": user.id},
        )
        return workout_log

    async def list_headers(self, user: User) -> list[WorkoutLogHeader]:
        """Summaries of the user's logs, most recent first."""
        workout_logs = await self._storage.get_workout_logs(user.workout_logs)
        return [WorkoutLogHeader.from_workout_log(log) for log in workout_logs]

    async def get_owned(self, user: User, workout_log_id: str) -> WorkoutLog:
        """Get a workout log the user owns.

        Raises:
            WorkoutLogNotFoundException: If the log is missing or belongs to
                someone else.
        """
        if not user_owns(user, workout_log_id):
            raise WorkoutLogNotFoundException(workout_log_id)
        return await self.get(workout_log_id)

    async def get(self, workout_log_id: str) -> WorkoutLog:
        """Get a workout log by ID, regardless of owner.

        Raises:
            WorkoutLogNotFoundException: If the log does not exist.
        """
        workout_log = await self._storage.get_workout_log(workout_log_id)
        if workout_log is None:
            raise WorkoutLogNotFoundException(workout_log_id)
        return workout_log

    async def delete(self, user: User, workout_log: WorkoutLog) -> str:
        """Delete a workout log with its videos and owner reference.

        Blobs go first so a failure never leaves videos without a log
        pointing at them.

        Returns:
            ID of the deleted log.

        Raises:
            BlobStorageError: If the videos could not be deleted. Nothing
                else is changed in that case.
        """
        removed = await self._set_videos.delete_all_set_videos(workout_log, user.id)
        await self._storage.delete_workout_log(workout_log.id)
        await self._storage.remove_log_reference(user.id, workout_log.id)

        self._logger.info(
            "Workout log deleted with videos",
            extra={
                "workout_log_id": workout_log.id,
                "user_id": user.id,
                "videos_removed": removed,
            },
        )
        return workout_log.id
