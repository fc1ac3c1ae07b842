"""MinIO implementation of blob storage."""

import asyncio
import io
import time
from collections.abc import AsyncIterator, Iterable
from datetime import UTC, datetime
from typing import Any, BinaryIO

from minio import Minio
from minio.deleteobjects import DeleteObject
from minio.error import MinioException, S3Error
from urllib3.exceptions import HTTPError

from src.commons.infrastructure.blob.base import (
    BlobMetadata,
    BlobNotFoundError,
    BlobStorageBase,
    BlobStorageError,
    HealthStatus,
)
from src.commons.telemetry import get_logger

_MISSING_CODES = frozenset({"NoSuchKey", "NoSuchObject"})


class MinioBlobStorage(BlobStorageBase):
    """MinIO implementation of blob storage.

    Works with both MinIO (local development) and AWS S3 (production).
    The MinIO client is blocking, so every call runs in the default executor.
    """

    def __init__(
        self,
        endpoint: str,
        access_key: str,
        secret_key: str,
        secure: bool = False,
        region: str | None = None,
    ) -> None:
        """Initialize MinIO client.

        Args:
            endpoint: MinIO/S3 endpoint (e.g., "localhost:9000").
            access_key: Access key ID.
            secret_key: Secret access key.
            secure: Use HTTPS connection.
            region: AWS region (optional, for S3).
        """
        self._client = Minio(
            endpoint=endpoint,
            access_key=access_key,
            secret_key=secret_key,
            secure=secure,
            region=region,
        )
        self._endpoint = endpoint
        self._secure = secure
        self._logger = get_logger(__name__)

    async def upload(
        self,
        bucket: str,
        path: str,
        data: BinaryIO | bytes,
        content_type: str = "application/octet-stream",
        metadata: dict[str, str] | None = None,
    ) -> BlobMetadata:
        """Upload a blob to storage."""
        loop = asyncio.get_event_loop()

        if isinstance(data, bytes):
            data_io: BinaryIO = io.BytesIO(data)
            length = len(data)
        else:
            data.seek(0, io.SEEK_END)
            length = data.tell()
            data.seek(0)
            data_io = data

        def _upload() -> Any:
            try:
                return self._client.put_object(
                    bucket_name=bucket,
                    object_name=path,
                    data=data_io,
                    length=length,
                    content_type=content_type,
                    metadata=metadata,
                )
            except (MinioException, HTTPError) as e:
                raise BlobStorageError(bucket, path, str(e)) from e

        result = await loop.run_in_executor(None, _upload)
        self._logger.debug(
            "Blob uploaded",
            extra={"bucket": bucket, "path": path, "size_bytes": length},
        )
        return BlobMetadata(
            path=path,
            size_bytes=length,
            content_type=content_type,
            created_at=datetime.now(UTC),
            etag=getattr(result, "etag", None) or "",
        )

    async def open_stream(
        self,
        bucket: str,
        path: str,
        offset: int = 0,
        length: int | None = None,
        chunk_size: int = 65536,
    ) -> AsyncIterator[bytes]:
        """Open a blob for streaming, optionally restricted to a byte range."""
        loop = asyncio.get_event_loop()

        def _open() -> Any:
            try:
                # length=0 asks MinIO for everything after offset
                return self._client.get_object(
                    bucket_name=bucket,
                    object_name=path,
                    offset=offset,
                    length=length or 0,
                )
            except S3Error as e:
                if e.code in _MISSING_CODES:
                    raise BlobNotFoundError(bucket, path) from e
                raise BlobStorageError(bucket, path, str(e)) from e
            except (MinioException, HTTPError) as e:
                raise BlobStorageError(bucket, path, str(e)) from e

        response = await loop.run_in_executor(None, _open)
        return self._iter_response(response, chunk_size)

    async def _iter_response(
        self,
        response: Any,
        chunk_size: int,
    ) -> AsyncIterator[bytes]:
        """Yield chunks from an open object response, then release it."""
        loop = asyncio.get_event_loop()
        try:
            while True:
                chunk: bytes = await loop.run_in_executor(
                    None, response.read, chunk_size
                )
                if not chunk:
                    break
                yield chunk
        finally:
            response.close()
            response.release_conn()

    async def delete(self, bucket: str, path: str) -> bool:
        """Delete a blob from storage."""
        loop = asyncio.get_event_loop()

        def _delete() -> bool:
            try:
                self._client.stat_object(bucket_name=bucket, object_name=path)
                self._client.remove_object(bucket_name=bucket, object_name=path)
            except S3Error as e:
                if e.code in _MISSING_CODES:
                    return False
                raise BlobStorageError(bucket, path, str(e)) from e
            except (MinioException, HTTPError) as e:
                raise BlobStorageError(bucket, path, str(e)) from e
            return True

        return await loop.run_in_executor(None, _delete)

    async def delete_many(self, bucket: str, paths: Iterable[str]) -> None:
        """Delete several blobs in one batch."""
        keys = list(dict.fromkeys(paths))
        if not keys:
            return

        loop = asyncio.get_event_loop()

        def _delete_many() -> list[str]:
            try:
                # remove_objects is lazy; errors only surface while iterating
                errors = self._client.remove_objects(
                    bucket_name=bucket,
                    delete_object_list=[DeleteObject(key) for key in keys],
                )
                return [
                    f"{error.name}: {error.message}"
                    for error in errors
                    if error.code not in _MISSING_CODES
                ]
            except (MinioException, HTTPError) as e:
                raise BlobStorageError(bucket, ",".join(keys), str(e)) from e

        failures = await loop.run_in_executor(None, _delete_many)
        if failures:
            raise BlobStorageError(bucket, ",".join(keys), "; ".join(failures))
        self._logger.debug(
            "Blobs deleted",
            extra={"bucket": bucket, "count": len(keys)},
        )

    async def create_bucket(self, bucket: str) -> bool:
        """Create a new bucket."""
        loop = asyncio.get_event_loop()

        def _create() -> bool:
            if self._client.bucket_exists(bucket_name=bucket):
                return False
            self._client.make_bucket(bucket_name=bucket)
            return True

        return await loop.run_in_executor(None, _create)

    async def bucket_exists(self, bucket: str) -> bool:
        """Check if a bucket exists."""
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(
            None, lambda: self._client.bucket_exists(bucket_name=bucket)
        )

    async def health_check(self) -> HealthStatus:
        """Check service health."""
        start = time.perf_counter()
        try:
            loop = asyncio.get_event_loop()
            await loop.run_in_executor(None, self._client.list_buckets)
            latency_ms = (time.perf_counter() - start) * 1000
            return HealthStatus(
                healthy=True,
                latency_ms=latency_ms,
                message="MinIO is healthy",
                details={"endpoint": self._endpoint},
            )
        except Exception as e:
            latency_ms = (time.perf_counter() - start) * 1000
            return HealthStatus(
                healthy=False,
                latency_ms=latency_ms,
                message=f"MinIO health check failed: {e}",
                details={"endpoint": self._endpoint, "error": str(e)},
            )
