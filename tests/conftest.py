"""Shared fixtures for workout log tests."""

from typing import Any

import pytest

from src.application.services.set_videos import SetVideoService
from src.application.services.storage import WorkoutLogStorageService
from src.application.services.workout_logs import WorkoutLogService
from src.commons.settings.models import (
    AppSettings,
    AuthSettings,
    Settings,
    StreamingSettings,
    UploadSettings,
)
from src.domain.models.user import User
from src.domain.models.workout_log import WorkoutLog
from tests.fakes import FakeBlobStorage, FakeDocumentDB

USER_ID = "64b7f0c2a1b2c3d4e5f60718"
OTHER_USER_ID = "64b7f0c2a1b2c3d4e5f60719"
VIDEOS_BUCKET = "wlogger-videos"
JWT_SECRET = "test-secret-long-enough-for-hs256-signing"


def push_day_payload() -> dict[str, Any]:
    """Creation payload with two exercises and three sets."""
    return {
        "name": "Push Day",
        "notes": "Felt strong",
        "exercises": [
            {
                "id": "e1",
                "name": "Bench Press",
                "sets": [
                    {"id": "s1", "reps": 5, "weight": 100, "rpe": 8},
                    {"id": "s2", "reps": 5, "weight": 100},
                ],
            },
            {
                "id": "e2",
                "name": "Dips",
                "sets": [{"id": "s1", "reps": 12}],
            },
        ],
    }


@pytest.fixture
def settings() -> Settings:
    """Settings with small limits to keep test payloads tiny."""
    return Settings(
        app=AppSettings(environment="test"),
        auth=AuthSettings(jwt_secret=JWT_SECRET),
        uploads=UploadSettings(max_video_size_mb=1),
        streaming=StreamingSettings(chunk_size_bytes=1024),
    )


@pytest.fixture
def blob_storage() -> FakeBlobStorage:
    """Empty in-memory blob storage with the videos bucket."""
    storage = FakeBlobStorage()
    storage.buckets.add(VIDEOS_BUCKET)
    return storage


@pytest.fixture
def document_db() -> FakeDocumentDB:
    """In-memory document store with two users."""
    db = FakeDocumentDB()
    db.seed("users", {"id": USER_ID, "email": "lifter@example.com", "workoutLogs": []})
    db.seed(
        "users", {"id": OTHER_USER_ID, "email": "other@example.com", "workoutLogs": []}
    )
    return db


@pytest.fixture
def storage_service(document_db, settings) -> WorkoutLogStorageService:
    return WorkoutLogStorageService(document_db, settings.document_db)


@pytest.fixture
def set_video_service(blob_storage, storage_service, settings) -> SetVideoService:
    return SetVideoService(blob_storage, storage_service, settings)


@pytest.fixture
def workout_log_service(storage_service, set_video_service) -> WorkoutLogService:
    return WorkoutLogService(storage_service, set_video_service)


@pytest.fixture
def user() -> User:
    return User(id=USER_ID, email="lifter@example.com")


@pytest.fixture
async def workout_log(workout_log_service, user) -> WorkoutLog:
    """A persisted Push Day log owned by ``user``."""
    return await workout_log_service.create(user, push_day_payload())
