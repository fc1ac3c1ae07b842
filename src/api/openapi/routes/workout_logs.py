"""Workout log endpoints, including set form videos."""

from typing import Annotated
from urllib.parse import quote

from fastapi import APIRouter, File, Header, Request, Response, UploadFile, status
from fastapi.responses import StreamingResponse

from src.api.dependencies import (
    CurrentUserDep,
    OwnedWorkoutLogDep,
    SetVideoServiceDep,
    WorkoutLogServiceDep,
)
from src.application.dtos.workout_log import (
    SetVideoDeletedResponse,
    SetVideoStream,
    SetVideoUpload,
    WorkoutLogHeader,
)
from src.commons.telemetry import get_logger
from src.domain.exceptions import WorkoutLogValidationException
from src.domain.models.workout_log import WorkoutLog

router = APIRouter(prefix="/workoutLogs")
logger = get_logger(__name__)

FORM_VIDEOS_FIELD = "formVideos"


def _content_disposition(filename: str) -> str:
    quoted = quote(filename)
    if quoted != filename:
        return f"attachment; filename*=utf-8''{quoted}"
    return f'attachment; filename="{filename}"'


def _stream_headers(stream: SetVideoStream) -> dict[str, str]:
    headers = {
        "Accept-Ranges": "bytes",
        "Content-Length": str(stream.content_length),
        "Content-Disposition": _content_disposition(stream.display_filename),
    }
    if stream.byte_range is not None:
        headers["Content-Range"] = stream.byte_range.content_range
    return headers


# =============================================================================
# Workout logs
# =============================================================================


@router.post(
    "",
    response_model=WorkoutLog,
    status_code=status.HTTP_201_CREATED,
    summary="Create workout log",
    description="Create a workout log and add it to the caller's logs.",
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": {"type": "object"}}},
        }
    },
)
async def create_workout_log(
    request: Request,
    user: CurrentUserDep,
    service: WorkoutLogServiceDep,
) -> WorkoutLog:
    """Create a workout log for the authenticated user.

    The body is parsed here so that malformed JSON is reported like any
    other invalid field.
    """
    try:
        payload = await request.json()
    except ValueError as e:
        raise WorkoutLogValidationException(
            "body", "Request body is not valid JSON"
        ) from e
    return await service.create(user, payload)


@router.get(
    "",
    response_model=list[WorkoutLogHeader],
    summary="List workout logs",
    description="Summaries of the caller's workout logs, most recent first.",
)
async def list_workout_logs(
    user: CurrentUserDep,
    service: WorkoutLogServiceDep,
) -> list[WorkoutLogHeader]:
    """List the authenticated user's workout logs."""
    return await service.list_headers(user)


@router.get(
    "/{workout_log_id}",
    response_model=WorkoutLog,
    summary="Get workout log",
)
async def get_workout_log(workout_log: OwnedWorkoutLogDep) -> WorkoutLog:
    """Get a full workout log."""
    return workout_log


@router.delete(
    "/{workout_log_id}",
    response_model=str,
    summary="Delete workout log",
    description="Delete a workout log together with all of its set videos.",
)
async def delete_workout_log(
    user: CurrentUserDep,
    workout_log: OwnedWorkoutLogDep,
    service: WorkoutLogServiceDep,
) -> str:
    """Delete a workout log and return its ID."""
    return await service.delete(user, workout_log)


# =============================================================================
# Set videos
# =============================================================================


@router.post(
    "/{workout_log_id}/videoUpload",
    summary="Upload set videos",
    description=(
        "Upload form videos named <exerciseId>.<setId>.<extension>; "
        "each replaces the video of the matching set."
    ),
)
async def upload_set_videos(
    user: CurrentUserDep,
    workout_log: OwnedWorkoutLogDep,
    service: SetVideoServiceDep,
    files: Annotated[
        list[UploadFile] | None, File(alias=FORM_VIDEOS_FIELD)
    ] = None,
) -> Response:
    """Store uploaded set videos and record them on the log."""
    files = files or []
    service.check_upload_limits([(f.filename, f.size) for f in files])
    uploads = [
        SetVideoUpload(filename=f.filename, content=await f.read())
        for f in files
    ]
    await service.upload_set_videos(workout_log, user.id, uploads)
    return Response(status_code=status.HTTP_200_OK)


@router.get(
    "/{workout_log_id}/exercises/{exercise_id}/sets/{set_id}/video",
    response_class=StreamingResponse,
    summary="Stream set video",
    description="Stream a set's form video, honoring single byte ranges.",
    responses={404: {"description": "The set has no video"}},
)
async def stream_set_video(
    exercise_id: str,
    set_id: str,
    user: CurrentUserDep,
    workout_log: OwnedWorkoutLogDep,
    service: SetVideoServiceDep,
    range_header: Annotated[str | None, Header(alias="Range")] = None,
) -> Response:
    """Stream a set's form video."""
    stream = await service.open_set_video(
        workout_log, user.id, exercise_id, set_id, range_header
    )
    if stream is None:
        logger.debug(
            "No video for set",
            extra={"exercise_id": exercise_id, "set_id": set_id},
        )
        return Response(status_code=status.HTTP_404_NOT_FOUND)

    return StreamingResponse(
        stream.body,
        status_code=stream.status_code,
        media_type=stream.content_type,
        headers=_stream_headers(stream),
    )


@router.delete(
    "/{workout_log_id}/exercises/{exercise_id}/sets/{set_id}",
    response_model=SetVideoDeletedResponse,
    summary="Delete set video",
    responses={404: {"description": "The set has no video"}},
)
async def delete_set_video(
    exercise_id: str,
    set_id: str,
    user: CurrentUserDep,
    workout_log: OwnedWorkoutLogDep,
    service: SetVideoServiceDep,
) -> SetVideoDeletedResponse | Response:
    """Delete a set's form video."""
    updated = await service.delete_set_video(
        workout_log, user.id, exercise_id, set_id
    )
    if updated is None:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return SetVideoDeletedResponse(set_id=set_id, exercise_id=exercise_id)
