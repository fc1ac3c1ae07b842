"""Error handling middleware and exception handlers."""

from typing import Any

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import RequestResponseEndpoint
from starlette.responses import Response

from src.commons.infrastructure.blob.base import BlobStorageError
from src.commons.telemetry.logger import get_logger
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

logger = get_logger(__name__)


def _build_error_response(
    request: Request,
    code: str,
    message: str,
    status_code: int,
    details: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build standardized error response.

    Args:
        request: HTTP request.
        code: Error code.
        message: Error message.
        status_code: HTTP status code.
        details: Additional details.
        headers: Extra response headers.

    Returns:
        JSON error response.
    """
    request_id = getattr(request.state, "request_id", "unknown")

    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
                "details": details or {},
                "request_id": request_id,
            }
        },
        headers=headers,
    )


def _handle_exception(  # noqa: PLR0911
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle exception and return appropriate error response.

    Args:
        request: HTTP request.
        exc: Exception to handle.

    Returns:
        JSON error response.
    """
    if isinstance(exc, WorkoutLogValidationException):
        logger.warning(f"Invalid workout log: {exc}")
        return JSONResponse(
            status_code=status.HTTP_406_NOT_ACCEPTABLE,
            content={"field": exc.field, "error": exc.error},
        )

    if isinstance(exc, InvalidSetVideoFilenameException):
        logger.warning(f"Invalid video filename: {exc}")
        return _build_error_response(
            request=request,
            code="INVALID_VIDEO_FILENAME",
            message=str(exc),
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"filename": exc.filename, "reason": exc.reason},
        )

    if isinstance(exc, UnsupportedVideoExtensionException):
        logger.warning(f"Unsupported video extension: {exc}")
        return _build_error_response(
            request=request,
            code="UNSUPPORTED_VIDEO_EXTENSION",
            message=str(exc),
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"extension": exc.extension},
        )

    if isinstance(exc, InvalidSetVideoUploadException):
        logger.warning(f"Invalid video upload: {exc}")
        return _build_error_response(
            request=request,
            code="INVALID_VIDEO_UPLOAD",
            message=str(exc),
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"filename": exc.filename, "reason": exc.reason},
        )

    if isinstance(exc, WorkoutLogNotFoundException):
        logger.warning(f"Workout log not found: {exc}")
        return _build_error_response(
            request=request,
            code="WORKOUT_LOG_NOT_FOUND",
            message=str(exc),
            status_code=status.HTTP_404_NOT_FOUND,
            details={"workout_log_id": exc.workout_log_id},
        )

    if isinstance(exc, SetNotFoundException):
        logger.warning(f"Set not found: {exc}")
        return _build_error_response(
            request=request,
            code="SET_NOT_FOUND",
            message=str(exc),
            status_code=status.HTTP_404_NOT_FOUND,
            details={"exercise_id": exc.exercise_id, "set_id": exc.set_id},
        )

    if isinstance(exc, InvalidByteRangeException):
        logger.warning(f"Range not satisfiable: {exc}")
        return _build_error_response(
            request=request,
            code="RANGE_NOT_SATISFIABLE",
            message=str(exc),
            status_code=status.HTTP_416_REQUESTED_RANGE_NOT_SATISFIABLE,
            headers={"Content-Range": f"bytes */{exc.total_size}"},
        )

    if isinstance(exc, AuthenticationException):
        logger.warning(f"Unauthorized: {exc}")
        return _build_error_response(
            request=request,
            code="UNAUTHORIZED",
            message=exc.reason,
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    if isinstance(exc, BlobStorageError):
        logger.error(
            f"Storage error: {exc}",
            extra={"bucket": exc.bucket, "path": exc.path},
        )
        return _build_error_response(
            request=request,
            code="STORAGE_ERROR",
            message="Video storage is unavailable",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, DomainException):
        logger.warning(f"Domain error: {exc}")
        return _build_error_response(
            request=request,
            code="DOMAIN_ERROR",
            message=str(exc),
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    # Catch-all for unexpected errors
    logger.exception(f"Unexpected error: {exc}")
    return _build_error_response(
        request=request,
        code="INTERNAL_ERROR",
        message="An unexpected error occurred",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


async def error_handler_middleware(
    request: Request,
    call_next: RequestResponseEndpoint,
) -> Response:
    """Middleware to catch and format all exceptions.

    Args:
        request: HTTP request.
        call_next: Next handler in chain.

    Returns:
        HTTP response.
    """
    try:
        return await call_next(request)
    except Exception as exc:
        return _handle_exception(request, exc)
