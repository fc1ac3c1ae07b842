"""FastAPI dependency injection for services and settings."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Header, Request

from src.api.auth import decode_user_id, extract_token
from src.application.services.set_videos import SetVideoService
from src.application.services.storage import WorkoutLogStorageService
from src.application.services.workout_logs import WorkoutLogService
from src.commons.settings.loader import get_settings as _load_settings
from src.commons.settings.models import Settings
from src.commons.telemetry import get_logger, set_log_context
from src.domain.exceptions import AuthenticationException
from src.domain.models.user import User
from src.domain.models.workout_log import WorkoutLog
from src.infrastructure.factory import (
    InfrastructureFactory,
    get_factory,
    reset_factory,
)

logger = get_logger(__name__)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Application settings loaded from config files and environment.
    """
    return _load_settings()


def get_infrastructure_factory(
    settings: Annotated[Settings, Depends(get_settings)],
) -> InfrastructureFactory:
    """Get infrastructure factory with all providers.

    Args:
        settings: Application settings.

    Returns:
        Configured infrastructure factory.
    """
    return get_factory(settings)


def get_storage_service(
    factory: Annotated[InfrastructureFactory, Depends(get_infrastructure_factory)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> WorkoutLogStorageService:
    """Get workout log persistence service."""
    return WorkoutLogStorageService(
        document_db=factory.get_document_db(),
        doc_settings=settings.document_db,
    )


def get_set_video_service(
    factory: Annotated[InfrastructureFactory, Depends(get_infrastructure_factory)],
    storage: Annotated[WorkoutLogStorageService, Depends(get_storage_service)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> SetVideoService:
    """Get set video service with all dependencies.

    Args:
        factory: Infrastructure factory.
        storage: Workout log persistence service.
        settings: Application settings.

    Returns:
        Configured set video service.
    """
    return SetVideoService(
        blob_storage=factory.get_blob_storage(),
        storage=storage,
        settings=settings,
    )


def get_workout_log_service(
    storage: Annotated[WorkoutLogStorageService, Depends(get_storage_service)],
    set_videos: Annotated[SetVideoService, Depends(get_set_video_service)],
) -> WorkoutLogService:
    """Get workout log service with all dependencies."""
    return WorkoutLogService(storage=storage, set_videos=set_videos)


async def get_current_user(
    request: Request,
    storage: Annotated[WorkoutLogStorageService, Depends(get_storage_service)],
    settings: Annotated[Settings, Depends(get_settings)],
    authorization: Annotated[str | None, Header()] = None,
) -> User:
    """Resolve the authenticated user from the session cookie or bearer token.

    Raises:
        AuthenticationException: If no valid session is present or the user
            no longer exists.
    """
    token = extract_token(
        request.cookies.get(settings.auth.cookie_name),
        authorization,
    )
    if token is None:
        raise AuthenticationException()

    user_id = decode_user_id(token, settings.auth)
    user = await storage.get_user(user_id)
    if user is None:
        logger.info("Session refers to unknown user", extra={"user_id": user_id})
        raise AuthenticationException("Unknown user")

    set_log_context(user_id=user.id)
    return user


async def get_owned_workout_log(
    workout_log_id: str,
    user: Annotated[User, Depends(get_current_user)],
    service: Annotated[WorkoutLogService, Depends(get_workout_log_service)],
) -> WorkoutLog:
    """Load the workout log named in the path, if the user owns it.

    Raises:
        WorkoutLogNotFoundException: If missing or owned by someone else.
    """
    return await service.get_owned(user, workout_log_id)


# Type aliases for cleaner route signatures
SettingsDep = Annotated[Settings, Depends(get_settings)]
FactoryDep = Annotated[InfrastructureFactory, Depends(get_infrastructure_factory)]
StorageServiceDep = Annotated[WorkoutLogStorageService, Depends(get_storage_service)]
SetVideoServiceDep = Annotated[SetVideoService, Depends(get_set_video_service)]
WorkoutLogServiceDep = Annotated[WorkoutLogService, Depends(get_workout_log_service)]
CurrentUserDep = Annotated[User, Depends(get_current_user)]
OwnedWorkoutLogDep = Annotated[WorkoutLog, Depends(get_owned_workout_log)]


async def init_services(settings: Settings) -> None:
    """Initialize all infrastructure services on startup.

    Args:
        settings: Application settings.
    """
    # Initialize factory with settings
    factory = get_factory(settings)

    # Pre-initialize critical services to fail fast
    factory.get_blob_storage()
    factory.get_document_db()

    set_videos = SetVideoService(
        blob_storage=factory.get_blob_storage(),
        storage=WorkoutLogStorageService(
            factory.get_document_db(), settings.document_db
        ),
        settings=settings,
    )
    await set_videos.ensure_bucket_exists()


async def shutdown_services() -> None:
    """Shutdown all infrastructure services."""
    try:
        factory = get_factory()
        await factory.close_all()
    except ValueError:
        logger.debug("Factory was never initialized")
    finally:
        reset_factory()
        get_settings.cache_clear()
