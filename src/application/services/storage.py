"""Document storage for workout logs and their owners."""

from typing import Any

from src.commons.infrastructure.documentdb.base import DocumentDBBase
from src.commons.settings.models import DocumentDBSettings
from src.commons.telemetry import get_logger
from src.domain.models.user import User
from src.domain.models.workout_log import WorkoutLog


class WorkoutLogStorageService:
    """Persists workout log aggregates and the users' back-references.

    Handles:
    - Workout log CRUD, always reading and writing the whole aggregate
    - User lookup and the ordered ``workoutLogs`` reference list
    - The ownership check backed by that list
    """

    def __init__(
        self,
        document_db: DocumentDBBase,
        doc_settings: DocumentDBSettings,
    ) -> None:
        """Initialize storage service.

        Args:
            document_db: Document database provider.
            doc_settings: Document database configuration.
        """
        self._doc_db = document_db
        self._logger = get_logger(__name__)

        # Collection names
        self._users_collection = doc_settings.collections.users
        self._workout_logs_collection = doc_settings.collections.workout_logs

    # =========================================================================
    # Users
    # =========================================================================

    async def get_user(self, user_id: str) -> User | None:
        """Get a user by ID.

        Args:
            user_id: User ID.

        Returns:
            The user or None if not found.
        """
        doc = await self._doc_db.find_by_id(self._users_collection, user_id)
        if not doc:
            self._logger.debug("User not found", extra={"user_id": user_id})
            return None
        return User.model_validate(doc)

    async def add_log_reference(self, user_id: str, workout_log_id: str) -> bool:
        """Reference a workout log from its owner, most recent first."""
        return await self._doc_db.prepend_to_array(
            self._users_collection, user_id, "workoutLogs", workout_log_id
        )

    async def remove_log_reference(self, user_id: str, workout_log_id: str) -> bool:
        """Drop a workout log from its owner's reference list."""
        result = await self._doc_db.pull_from_array(
            self._users_collection, user_id, "workoutLogs", workout_log_id
        )
        self._logger.debug(
            "Workout log reference removed",
            extra={"user_id": user_id, "workout_log_id": workout_log_id},
        )
        return result

    # =========================================================================
    # Workout logs
    # =========================================================================

    async def save_workout_log(self, workout_log: WorkoutLog) -> str:
        """Insert a new workout log.

        Args:
            workout_log: Workout log to save.

        Returns:
            Document ID.
        """
        doc_id = await self._doc_db.insert(
            self._workout_logs_collection,
            self._to_document(workout_log),
        )
        self._logger.info(
            "Workout log saved",
            extra={"workout_log_id": workout_log.id, "doc_id": doc_id},
        )
        return doc_id

    async def update_workout_log(self, workout_log: WorkoutLog) -> bool:
        """Replace the stored aggregate with the given one.

        Args:
            workout_log: Updated workout log.

        Returns:
            True if updated, False if not found.
        """
        result = await self._doc_db.update(
            self._workout_logs_collection,
            workout_log.id,
            self._to_document(workout_log),
        )
        if result:
            self._logger.debug(
                "Workout log updated",
                extra={
                    "workout_log_id": workout_log.id,
                    "video_count": workout_log.video_count,
                },
            )
        else:
            self._logger.warning(
                "Workout log not found for update",
                extra={"workout_log_id": workout_log.id},
            )
        return result

    async def get_workout_log(self, workout_log_id: str) -> WorkoutLog | None:
        """Get a workout log by ID.

        Args:
            workout_log_id: Workout log ID.

        Returns:
            The workout log or None if not found.
        """
        doc = await self._doc_db.find_by_id(
            self._workout_logs_collection, workout_log_id
        )
        if not doc:
            self._logger.debug(
                "Workout log not found",
                extra={"workout_log_id": workout_log_id},
            )
            return None
        return WorkoutLog.model_validate(doc)

    async def get_workout_logs(self, workout_log_ids: list[str]) -> list[WorkoutLog]:
        """Get several workout logs, in the order of the given IDs.

        IDs without a stored log (dangling references) are skipped.
        """
        if not workout_log_ids:
            return []

        docs = await self._doc_db.find(
            self._workout_logs_collection,
            {"_id": {"$in": workout_log_ids}},
            limit=len(workout_log_ids),
        )
        by_id = {doc["id"]: doc for doc in docs}

        missing = [i for i in workout_log_ids if i not in by_id]
        if missing:
            self._logger.debug(
                "Skipping dangling workout log references",
                extra={"missing": missing},
            )

        return [
            WorkoutLog.model_validate(by_id[i]) for i in workout_log_ids if i in by_id
        ]

    async def delete_workout_log(self, workout_log_id: str) -> bool:
        """Delete a workout log document.

        Args:
            workout_log_id: Workout log ID.

        Returns:
            True if deleted, False if not found.
        """
        result = await self._doc_db.delete(
            self._workout_logs_collection, workout_log_id
        )
        self._logger.info(
            "Workout log deleted",
            extra={"workout_log_id": workout_log_id, "deleted": result},
        )
        return result

    @staticmethod
    def _to_document(workout_log: WorkoutLog) -> dict[str, Any]:
        return workout_log.model_dump(mode="json", by_alias=True)
