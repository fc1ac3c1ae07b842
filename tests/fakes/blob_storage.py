"""Fake blob storage for testing."""

from collections.abc import AsyncIterator, Iterable
from datetime import UTC, datetime
from hashlib import md5
from typing import BinaryIO

from src.commons.infrastructure.blob.base import (
    BlobMetadata,
    BlobNotFoundError,
    BlobStorageBase,
    BlobStorageError,
    HealthStatus,
)


class FakeBlobStorage(BlobStorageBase):
    """In-memory implementation of BlobStorageBase.

    Objects are kept as ``{(bucket, path): (bytes, content_type)}``.
    """

    def __init__(self) -> None:
        self.objects: dict[tuple[str, str], tuple[bytes, str]] = {}
        self.buckets: set[str] = set()
        self.opened: list[tuple[str, str, int, int | None]] = []

        # Failure injection
        self.fail_uploads_after: int | None = None
        self.fail_deletes = False
        self._upload_calls = 0

    # -------------------------------------------------------------------------
    # Test Helpers
    # -------------------------------------------------------------------------

    def seed(self, bucket: str, path: str, data: bytes, content_type: str = "") -> None:
        """Store an object directly."""
        self.buckets.add(bucket)
        self.objects[(bucket, path)] = (data, content_type)

    def paths(self, bucket: str) -> set[str]:
        """Paths currently stored in a bucket."""
        return {p for b, p in self.objects if b == bucket}

    def content(self, bucket: str, path: str) -> bytes:
        """Bytes of a stored object."""
        return self.objects[(bucket, path)][0]

    # -------------------------------------------------------------------------
    # BlobStorageBase
    # -------------------------------------------------------------------------

    async def upload(
        self,
        bucket: str,
        path: str,
        data: BinaryIO | bytes,
        content_type: str = "application/octet-stream",
        metadata: dict[str, str] | None = None,
    ) -> BlobMetadata:
        self._upload_calls += 1
        if (
            self.fail_uploads_after is not None
            and self._upload_calls > self.fail_uploads_after
        ):
            raise BlobStorageError(bucket, path, "injected upload failure")

        content = data if isinstance(data, bytes) else data.read()
        self.objects[(bucket, path)] = (content, content_type)
        return BlobMetadata(
            path=path,
            size_bytes=len(content),
            content_type=content_type,
            created_at=datetime.now(UTC),
            etag=md5(content).hexdigest(),  # noqa: S324
        )

    async def open_stream(
        self,
        bucket: str,
        path: str,
        offset: int = 0,
        length: int | None = None,
        chunk_size: int = 65536,
    ) -> AsyncIterator[bytes]:
        if (bucket, path) not in self.objects:
            raise BlobNotFoundError(bucket, path)

        self.opened.append((bucket, path, offset, length))
        content = self.objects[(bucket, path)][0]
        end = len(content) if length is None else offset + length
        return self._chunks(content[offset:end], chunk_size)

    @staticmethod
    async def _chunks(content: bytes, chunk_size: int) -> AsyncIterator[bytes]:
        for start in range(0, len(content), chunk_size):
            yield content[start : start + chunk_size]

    async def delete(self, bucket: str, path: str) -> bool:
        if self.fail_deletes:
            raise BlobStorageError(bucket, path, "injected delete failure")
        return self.objects.pop((bucket, path), None) is not None

    async def delete_many(self, bucket: str, paths: Iterable[str]) -> None:
        paths = list(paths)
        if self.fail_deletes and paths:
            raise BlobStorageError(bucket, paths[0], "injected delete failure")
        for path in paths:
            self.objects.pop((bucket, path), None)

    async def create_bucket(self, bucket: str) -> bool:
        if bucket in self.buckets:
            return False
        self.buckets.add(bucket)
        return True

    async def bucket_exists(self, bucket: str) -> bool:
        return bucket in self.buckets

    async def health_check(self) -> HealthStatus:
        return HealthStatus(healthy=True, latency_ms=0.1, message="fake")
