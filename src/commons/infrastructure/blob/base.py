"""Abstract base class for blob storage operations."""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import BinaryIO


@dataclass
class BlobMetadata:
    """Metadata for a stored blob."""

    path: str
    size_bytes: int
    content_type: str
    created_at: datetime
    etag: str


@dataclass
class HealthStatus:
    """Health check result."""

    healthy: bool
    latency_ms: float
    message: str | None = None
    details: dict[str, str] | None = None


class BlobStorageError(Exception):
    """Raised when the object store rejects or fails an operation."""

    def __init__(self, bucket: str, path: str, reason: str) -> None:
        self.bucket = bucket
        self.path = path
        self.reason = reason
        super().__init__(f"Blob storage error on {bucket}/{path}: {reason}")


class BlobNotFoundError(BlobStorageError):
    """Raised when a blob is not found."""

    def __init__(self, bucket: str, path: str) -> None:
        super().__init__(bucket, path, "blob not found")


class BlobStorageBase(ABC):
    """Abstract base class for blob storage operations.

    Implementations should handle:
    - MinIO (local development)
    - AWS S3
    """

    @abstractmethod
    async def upload(
        self,
        bucket: str,
        path: str,
        data: BinaryIO | bytes,
        content_type: str = "application/octet-stream",
        metadata: dict[str, str] | None = None,
    ) -> BlobMetadata:
        """Upload a blob to storage, replacing any existing object.

        Args:
            bucket: Target bucket name.
            path: Path within the bucket.
            data: File-like object or bytes to upload.
            content_type: MIME type of the content.
            metadata: Optional key-value metadata.

        Returns:
            Metadata of the uploaded blob.

        Raises:
            BlobStorageError: If the store rejects the write.
        """

    @abstractmethod
    async def open_stream(
        self,
        bucket: str,
        path: str,
        offset: int = 0,
        length: int | None = None,
        chunk_size: int = 65536,
    ) -> AsyncIterator[bytes]:
        """Open a blob for streaming, optionally restricted to a byte range.

        The object is requested before this coroutine returns, so a missing
        blob fails here rather than mid-stream. The returned iterator yields
        chunks lazily and releases the connection when exhausted or closed.

        Args:
            bucket: Source bucket name.
            path: Path within the bucket.
            offset: First byte to read.
            length: Number of bytes to read; None reads to the end.
            chunk_size: Size of each yielded chunk in bytes.

        Returns:
            Async iterator over the requested bytes.

        Raises:
            BlobNotFoundError: If blob doesn't exist.
            BlobStorageError: If the store fails the read.
        """

    @abstractmethod
    async def delete(self, bucket: str, path: str) -> bool:
        """Delete a blob from storage.

        Args:
            bucket: Bucket name.
            path: Path within the bucket.

        Returns:
            True if deleted, False if didn't exist.
        """

    @abstractmethod
    async def delete_many(self, bucket: str, paths: Iterable[str]) -> None:
        """Delete several blobs in one batch.

        Missing blobs are not an error.

        Args:
            bucket: Bucket name.
            paths: Paths within the bucket.

        Raises:
            BlobStorageError: If any blob could not be deleted.
        """

    @abstractmethod
    async def create_bucket(self, bucket: str) -> bool:
        """Create a new bucket.

        Args:
            bucket: Bucket name to create.

        Returns:
            True if created, False if already exists.
        """

    @abstractmethod
    async def bucket_exists(self, bucket: str) -> bool:
        """Check if a bucket exists.

        Args:
            bucket: Bucket name.

        Returns:
            True if exists, False otherwise.
        """

    @abstractmethod
    async def health_check(self) -> HealthStatus:
        """Check service health.

        Returns:
            Health status with latency info.
        """
