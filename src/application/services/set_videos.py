"""Set video service: form video upload, streaming and cleanup."""

from collections.abc import AsyncIterator

from src.application.dtos.workout_log import SetVideoStream, SetVideoUpload
from src.application.services.storage import WorkoutLogStorageService
from src.commons.infrastructure.blob.base import (
    BlobNotFoundError,
    BlobStorageBase,
    BlobStorageError,
)
from src.commons.settings.models import Settings
from src.commons.telemetry import get_logger
from src.domain.exceptions import InvalidSetVideoUploadException
from src.domain.models.workout_log import VideoMetadata, WorkoutLog
from src.domain.value_objects.byte_range import ByteRange
from src.domain.value_objects.set_video_filename import SetVideoFilename


class SetVideoService:
    """Keeps set video blobs and their metadata in step.

    Metadata on a set is recorded only after its blob is written, and
    cleared only after its blob is removed.
    """

    def __init__(
        self,
        blob_storage: BlobStorageBase,
        storage: WorkoutLogStorageService,
        settings: Settings,
    ) -> None:
        """Initialize set video service.

        Args:
            blob_storage: Blob storage provider holding the videos.
            storage: Workout log persistence.
            settings: Application settings.
        """
        self._blob = blob_storage
        self._storage = storage
        self._logger = get_logger(__name__)

        self._bucket = settings.blob_storage.buckets.videos
        self._max_files = settings.uploads.max_files_per_request
        self._max_size_mb = settings.uploads.max_video_size_mb
        self._max_size_bytes = settings.uploads.max_video_size_bytes
        self._chunk_size = settings.streaming.chunk_size_bytes

    async def ensure_bucket_exists(self) -> None:
        """Create the videos bucket if it doesn't exist."""
        if not await self._blob.bucket_exists(self._bucket):
            await self._blob.create_bucket(self._bucket)
            self._logger.info("Created bucket", extra={"bucket": self._bucket})

    # =========================================================================
    # Upload
    # =========================================================================

    async def upload_set_videos(
        self,
        workout_log: WorkoutLog,
        owner_id: str,
        uploads: list[SetVideoUpload],
    ) -> WorkoutLog:
        """Store a batch of form videos and record them on their sets.

        The whole batch is validated before any blob is written. Each file
        replaces the set's previous video; a previous video stored under a
        different extension is removed once the new metadata is saved.

        Args:
            workout_log: Log receiving the videos.
            owner_id: ID of the log's owner.
            uploads: Uploaded files named ``<exerciseId>.<setId>.<extension>``.

        Returns:
            The updated workout log.

        Raises:
            InvalidSetVideoFilenameException: If a filename is malformed.
            UnsupportedVideoExtensionException: If an extension is not allowed.
            InvalidSetVideoUploadException: If the batch or a file is invalid.
            BlobStorageError: If a blob write fails. Videos written before the
                failure are still recorded.
        """
        targets = self._validate_batch(workout_log, uploads)

        updated = workout_log
        replaced_keys: list[str] = []

        try:
            for upload, target in zip(uploads, targets, strict=True):
                key = workout_log.video_key(
                    owner_id, target.exercise_id, target.set_id, target.extension
                )
                await self._blob.upload(
                    self._bucket,
                    key,
                    upload.content,
                    content_type=target.extension.mime_type,
                )

                previous = updated.find_set(target.exercise_id, target.set_id)
                if previous is not None and previous.form_video is not None:
                    replaced_keys.append(
                        workout_log.video_key(
                            owner_id,
                            target.exercise_id,
                            target.set_id,
                            previous.form_video.extension,
                        )
                    )

                updated = updated.with_set_video(
                    target.exercise_id,
                    target.set_id,
                    VideoMetadata(size=upload.size, extension=target.extension),
                )
                self._logger.debug(
                    "Set video stored",
                    extra={"key": key, "size_bytes": upload.size},
                )
        except BlobStorageError:
            if updated is not workout_log:
                await self._storage.update_workout_log(updated)
                await self._remove_stale_videos(updated, owner_id, replaced_keys)
                self._logger.warning(
                    "Set video batch partially stored",
                    extra={
                        "workout_log_id": workout_log.id,
                        "stored": updated.video_count,
                    },
                )
            raise

        await self._storage.update_workout_log(updated)
        stale_removed = await self._remove_stale_videos(
            updated, owner_id, replaced_keys
        )

        self._logger.info(
            "Set videos uploaded",
            extra={
                "workout_log_id": workout_log.id,
                "files": len(uploads),
                "stale_removed": stale_removed,
            },
        )
        return updated

    async def _remove_stale_videos(
        self,
        workout_log: WorkoutLog,
        owner_id: str,
        replaced_keys: list[str],
    ) -> int:
        """Delete replaced blobs no set points at anymore.

        Runs after the aggregate is saved, so a failure here is logged and
        leaves the committed upload in place.
        """
        current_keys = {
            workout_log.video_key(
                owner_id, v.exercise_id, v.set_id, v.video.extension
            )
            for v in workout_log.set_videos()
        }
        stale_keys = [k for k in replaced_keys if k not in current_keys]
        if not stale_keys:
            return 0

        try:
            await self._blob.delete_many(self._bucket, stale_keys)
        except BlobStorageError as e:
            self._logger.error(
                "Failed to remove replaced set videos",
                extra={"keys": stale_keys, "error": str(e)},
            )
            return 0
        return len(stale_keys)

    def check_upload_limits(self, files: list[tuple[str | None, int | None]]) -> None:
        """Reject a batch by file count and declared sizes before it is read.

        Args:
            files: ``(filename, size)`` pairs; an unknown size is skipped.

        Raises:
            InvalidSetVideoUploadException: If the batch is empty, has too
                many files, or a file is larger than allowed.
        """
        self._check_file_count(len(files))
        for filename, size in files:
            if size is not None and size > self._max_size_bytes:
                raise InvalidSetVideoUploadException(
                    filename or "", f"File exceeds {self._max_size_mb} MB"
                )

    def _check_file_count(self, count: int) -> None:
        if count == 0:
            raise InvalidSetVideoUploadException("", "No files were uploaded")
        if count > self._max_files:
            raise InvalidSetVideoUploadException(
                "", f"At most {self._max_files} files can be uploaded at once"
            )

    def _validate_batch(
        self,
        workout_log: WorkoutLog,
        uploads: list[SetVideoUpload],
    ) -> list[SetVideoFilename]:
        self._check_file_count(len(uploads))

        targets = []
        for upload in uploads:
            target = SetVideoFilename.parse(upload.filename)
            name = str(target)
            if upload.size == 0:
                raise InvalidSetVideoUploadException(name, "File is empty")
            if upload.size > self._max_size_bytes:
                raise InvalidSetVideoUploadException(
                    name, f"File exceeds {self._max_size_mb} MB"
                )
            if workout_log.find_set(target.exercise_id, target.set_id) is None:
                raise InvalidSetVideoUploadException(
                    name,
                    f"Exercise '{target.exercise_id}' has no set '{target.set_id}'",
                )
            targets.append(target)
        return targets

    async def attach_video(
        self,
        workout_log: WorkoutLog,
        exercise_id: str,
        set_id: str,
        video: VideoMetadata,
    ) -> WorkoutLog:
        """Record video metadata on a set whose blob is already stored.

        Raises:
            SetNotFoundException: If the set does not exist.
        """
        updated = workout_log.with_set_video(exercise_id, set_id, video)
        await self._storage.update_workout_log(updated)
        return updated

    # =========================================================================
    # Streaming
    # =========================================================================

    async def open_set_video(
        self,
        workout_log: WorkoutLog,
        owner_id: str,
        exercise_id: str,
        set_id: str,
        range_header: str | None = None,
    ) -> SetVideoStream | None:
        """Open a set's form video for streaming.

        Args:
            workout_log: Log holding the set.
            owner_id: ID of the log's owner.
            exercise_id: Exercise ID.
            set_id: Set ID.
            range_header: Raw ``Range`` request header, if any.

        Returns:
            The opened stream, or None if the set has no video.

        Raises:
            InvalidByteRangeException: If the range cannot be satisfied.
            BlobStorageError: If the store fails to open the blob.
        """
        logged_set = workout_log.find_set(exercise_id, set_id)
        if logged_set is None or logged_set.form_video is None:
            return None

        video = logged_set.form_video
        byte_range = (
            ByteRange.from_header(range_header, video.size) if range_header else None
        )
        key = workout_log.video_key(owner_id, exercise_id, set_id, video.extension)

        try:
            body = await self._blob.open_stream(
                self._bucket,
                key,
                offset=byte_range.start if byte_range else 0,
                length=byte_range.length if byte_range else None,
                chunk_size=self._chunk_size,
            )
        except BlobNotFoundError:
            self._logger.warning(
                "Set video metadata without blob",
                extra={"key": key, "workout_log_id": workout_log.id},
            )
            return None

        return SetVideoStream(
            body=self._log_stream_errors(body, key),
            content_type=video.extension.mime_type,
            total_size=video.size,
            display_filename=workout_log.set_video_display_filename(
                exercise_id, set_id
            ),
            byte_range=byte_range,
        )

    async def _log_stream_errors(
        self, body: AsyncIterator[bytes], key: str
    ) -> AsyncIterator[bytes]:
        # Headers are already sent once the body is iterated
        try:
            async for chunk in body:
                yield chunk
        except Exception:
            self._logger.exception("Set video stream aborted", extra={"key": key})
            raise

    # =========================================================================
    # Deletion
    # =========================================================================

    async def delete_set_video(
        self,
        workout_log: WorkoutLog,
        owner_id: str,
        exercise_id: str,
        set_id: str,
    ) -> WorkoutLog | None:
        """Delete a set's form video blob, then clear its metadata.

        Returns:
            The updated workout log, or None if the set has no video.

        Raises:
            BlobStorageError: If the blob could not be deleted. The metadata
                is left untouched.
        """
        logged_set = workout_log.find_set(exercise_id, set_id)
        if logged_set is None or logged_set.form_video is None:
            return None

        key = workout_log.video_key(
            owner_id, exercise_id, set_id, logged_set.form_video.extension
        )
        existed = await self._blob.delete(self._bucket, key)
        if not existed:
            self._logger.warning("Set video blob already gone", extra={"key": key})

        updated = workout_log.without_set_video(exercise_id, set_id)
        await self._storage.update_workout_log(updated)

        self._logger.info(
            "Set video deleted",
            extra={"workout_log_id": workout_log.id, "key": key},
        )
        return updated

    async def delete_all_set_videos(
        self,
        workout_log: WorkoutLog,
        owner_id: str,
    ) -> int:
        """Delete every set video blob of a workout log.

        Metadata is not touched; callers delete the log afterwards.

        Returns:
            Number of blobs requested for deletion.

        Raises:
            BlobStorageError: If any blob could not be deleted.
        """
        keys = [
            workout_log.video_key(owner_id, v.exercise_id, v.set_id, v.video.extension)
            for v in workout_log.set_videos()
        ]
        await self._blob.delete_many(self._bucket, keys)
        self._logger.debug(
            "Set videos deleted",
            extra={"workout_log_id": workout_log.id, "count": len(keys)},
        )
        return len(keys)
