"""Unit tests for MinIO blob storage provider."""

from unittest.mock import MagicMock, patch

import pytest
from minio.error import S3Error

from src.commons.infrastructure.blob.base import BlobNotFoundError, BlobStorageError


def _s3_error(code: str) -> S3Error:
    return S3Error(
        code=code,
        message=f"{code} raised by test",
        resource="/bucket/key",
        request_id="req",
        host_id="host",
        response=MagicMock(),
    )


def _delete_error(name: str, code: str) -> MagicMock:
    error = MagicMock()
    error.name = name
    error.code = code
    error.message = f"{code} for {name}"
    return error


class TestMinioBlobStorage:
    """Tests for MinioBlobStorage provider."""

    @pytest.fixture
    def mock_client(self):
        """Patch the MinIO client class."""
        with patch(
            "src.commons.infrastructure.blob.minio_provider.Minio"
        ) as mock_client_class:
            client = MagicMock()
            mock_client_class.return_value = client
            yield client

    @pytest.fixture
    def provider(self, mock_client):
        from src.commons.infrastructure.blob.minio_provider import MinioBlobStorage

        return MinioBlobStorage(
            endpoint="localhost:9000",
            access_key="minioadmin",
            secret_key="minioadmin",
        )

    # =========================================================================
    # Upload Tests
    # =========================================================================

    async def test_upload_bytes(self, provider, mock_client):
        mock_client.put_object.return_value = MagicMock(etag="abc")

        result = await provider.upload(
            "videos", "u/l/e1.s1.mp4", b"12345", content_type="video/mp4"
        )

        kwargs = mock_client.put_object.call_args.kwargs
        assert kwargs["bucket_name"] == "videos"
        assert kwargs["object_name"] == "u/l/e1.s1.mp4"
        assert kwargs["length"] == 5
        assert kwargs["content_type"] == "video/mp4"
        assert kwargs["data"].read() == b"12345"
        assert result.size_bytes == 5
        assert result.etag == "abc"

    async def test_upload_failure_raises_storage_error(self, provider, mock_client):
        mock_client.put_object.side_effect = _s3_error("AccessDenied")

        with pytest.raises(BlobStorageError) as exc_info:
            await provider.upload("videos", "k", b"1")

        assert not isinstance(exc_info.value, BlobNotFoundError)
        assert exc_info.value.path == "k"

    # =========================================================================
    # Stream Tests
    # =========================================================================

    async def test_open_stream_range(self, provider, mock_client):
        """Test that the range is requested and chunks are yielded in order."""
        response = MagicMock()
        response.read.side_effect = [b"ab", b"cd", b""]
        mock_client.get_object.return_value = response

        stream = await provider.open_stream(
            "videos", "k", offset=10, length=4, chunk_size=2
        )
        chunks = [chunk async for chunk in stream]

        assert chunks == [b"ab", b"cd"]
        mock_client.get_object.assert_called_once_with(
            bucket_name="videos", object_name="k", offset=10, length=4
        )
        response.close.assert_called_once()
        response.release_conn.assert_called_once()

    async def test_open_stream_whole_object(self, provider, mock_client):
        response = MagicMock()
        response.read.side_effect = [b""]
        mock_client.get_object.return_value = response

        stream = await provider.open_stream("videos", "k")
        assert [chunk async for chunk in stream] == []

        assert mock_client.get_object.call_args.kwargs["length"] == 0

    async def test_open_stream_releases_on_early_close(self, provider, mock_client):
        response = MagicMock()
        response.read.side_effect = [b"ab", b"cd", b""]
        mock_client.get_object.return_value = response

        stream = await provider.open_stream("videos", "k", chunk_size=2)
        assert await anext(stream) == b"ab"
        await stream.aclose()

        response.release_conn.assert_called_once()

    async def test_open_stream_missing_blob(self, provider, mock_client):
        """Test that a missing object fails before any byte is produced."""
        mock_client.get_object.side_effect = _s3_error("NoSuchKey")

        with pytest.raises(BlobNotFoundError):
            await provider.open_stream("videos", "k")

    # =========================================================================
    # Delete Tests
    # =========================================================================

    async def test_delete_many_dedupes_keys(self, provider, mock_client):
        mock_client.remove_objects.return_value = iter([])

        with patch(
            "src.commons.infrastructure.blob.minio_provider.DeleteObject",
            side_effect=lambda key: key,
        ):
            await provider.delete_many("videos", ["a", "b", "a"])

        kwargs = mock_client.remove_objects.call_args.kwargs
        assert kwargs["delete_object_list"] == ["a", "b"]

    async def test_delete_many_empty_is_noop(self, provider, mock_client):
        await provider.delete_many("videos", [])

        mock_client.remove_objects.assert_not_called()

    async def test_delete_many_ignores_missing(self, provider, mock_client):
        mock_client.remove_objects.return_value = iter(
            [_delete_error("a", "NoSuchKey")]
        )

        await provider.delete_many("videos", ["a"])

    async def test_delete_many_raises_on_failure(self, provider, mock_client):
        mock_client.remove_objects.return_value = iter(
            [_delete_error("b", "AccessDenied")]
        )

        with pytest.raises(BlobStorageError, match="AccessDenied"):
            await provider.delete_many("videos", ["a", "b"])

    async def test_delete_missing_returns_false(self, provider, mock_client):
        mock_client.stat_object.side_effect = _s3_error("NoSuchKey")

        assert await provider.delete("videos", "k") is False
        mock_client.remove_object.assert_not_called()

    async def test_delete_access_denied_raises(self, provider, mock_client):
        mock_client.stat_object.side_effect = _s3_error("AccessDenied")

        with pytest.raises(BlobStorageError):
            await provider.delete("videos", "k")
        mock_client.remove_object.assert_not_called()

    async def test_delete_existing(self, provider, mock_client):
        assert await provider.delete("videos", "k") is True
        mock_client.remove_object.assert_called_once_with(
            bucket_name="videos", object_name="k"
        )

    # =========================================================================
    # Bucket / Health Tests
    # =========================================================================

    async def test_create_bucket_when_missing(self, provider, mock_client):
        mock_client.bucket_exists.return_value = False

        assert await provider.create_bucket("videos") is True
        mock_client.make_bucket.assert_called_once_with(bucket_name="videos")

    async def test_health_check_unhealthy(self, provider, mock_client):
        mock_client.list_buckets.side_effect = ConnectionError("refused")

        status = await provider.health_check()

        assert status.healthy is False
        assert "refused" in status.message
