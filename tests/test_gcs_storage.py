import asyncio
import time
from unittest.mock import MagicMock

import pytest
from google.api_core import exceptions as google_exceptions

from scribe_backends.exceptions import (
    MissingCredentialError,
    StorageDeleteError,
    StorageUploadError,
)
from scribe_backends.infrastructure.gcs_storage import GCSStorageClient, scratch_object


def _storage():
    client = MagicMock()
    blob = client.bucket.return_value.blob.return_value
    return GCSStorageClient(client_factory=lambda credential: client), client, blob


class TestGCSStorageClient:
    @pytest.mark.asyncio
    async def test_upload_returns_gs_uri(self):
        storage, client, blob = _storage()

        uri = await storage.upload("sa", "scratch", "obj.wav", b"data", "audio/wav")

        assert uri == "gs://scratch/obj.wav"
        client.bucket.assert_called_with("scratch")
        client.bucket.return_value.blob.assert_called_with("obj.wav")
        blob.upload_from_string.assert_called_once_with(b"data", content_type="audio/wav")

    @pytest.mark.asyncio
    async def test_upload_failure_is_wrapped(self):
        storage, _, blob = _storage()
        blob.upload_from_string.side_effect = google_exceptions.Forbidden("no access")

        with pytest.raises(StorageUploadError, match="obj.wav"):
            await storage.upload("sa", "scratch", "obj.wav", b"data", "audio/wav")

    @pytest.mark.asyncio
    async def test_delete_failure_is_wrapped(self):
        storage, _, blob = _storage()
        blob.delete.side_effect = google_exceptions.NotFound("gone")

        with pytest.raises(StorageDeleteError) as exc_info:
            await storage.delete("sa", "scratch", "obj.wav")

        assert exc_info.value.object_name == "obj.wav"

    @pytest.mark.asyncio
    async def test_missing_credential_is_rejected(self):
        storage, _, _ = _storage()

        with pytest.raises(MissingCredentialError):
            await storage.upload("", "scratch", "obj.wav", b"data", "audio/wav")


class TestScratchObject:
    @pytest.mark.asyncio
    async def test_object_lives_only_inside_the_block(self):
        storage, _, blob = _storage()

        async with scratch_object(storage, "sa", "scratch", "obj.wav", b"data", "audio/wav") as uri:
            assert uri == "gs://scratch/obj.wav"
            blob.delete.assert_not_called()

        blob.delete.assert_called_once()

    @pytest.mark.asyncio
    async def test_object_is_deleted_when_block_raises(self):
        storage, _, blob = _storage()

        with pytest.raises(ValueError):
            async with scratch_object(storage, "sa", "scratch", "obj.wav", b"data", "audio/wav"):
                raise ValueError("batch failed")

        blob.delete.assert_called_once()

    @pytest.mark.asyncio
    async def test_object_is_deleted_when_block_is_cancelled(self):
        storage, _, blob = _storage()

        with pytest.raises(asyncio.CancelledError):
            async with scratch_object(storage, "sa", "scratch", "obj.wav", b"data", "audio/wav"):
                raise asyncio.CancelledError()

        blob.delete.assert_called_once()

    @pytest.mark.asyncio
    async def test_nothing_is_deleted_when_upload_fails(self):
        storage, _, blob = _storage()
        blob.upload_from_string.side_effect = google_exceptions.Forbidden("no access")

        with pytest.raises(StorageUploadError):
            async with scratch_object(storage, "sa", "scratch", "obj.wav", b"data", "audio/wav"):
                pass

        blob.delete.assert_not_called()

    @pytest.mark.asyncio
    async def test_object_is_deleted_when_cancelled_during_upload(self):
        storage, _, blob = _storage()
        stored: set[str] = set()

        def slow_upload(data, content_type):
            time.sleep(0.3)
            stored.add("obj.wav")

        blob.upload_from_string.side_effect = slow_upload
        blob.delete.side_effect = lambda: stored.discard("obj.wav")

        async def use_scratch_object():
            async with scratch_object(storage, "sa", "scratch", "obj.wav", b"data", "audio/wav"):
                pytest.fail("block must not run after cancellation")

        task = asyncio.create_task(use_scratch_object())
        await asyncio.sleep(0.05)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

        blob.upload_from_string.assert_called_once()
        blob.delete.assert_called_once()
        assert stored == set()

    @pytest.mark.asyncio
    async def test_cancellation_during_failed_upload_deletes_nothing(self):
        storage, _, blob = _storage()

        def failing_upload(data, content_type):
            time.sleep(0.2)
            raise google_exceptions.Forbidden("no access")

        blob.upload_from_string.side_effect = failing_upload

        async def use_scratch_object():
            async with scratch_object(storage, "sa", "scratch", "obj.wav", b"data", "audio/wav"):
                pass

        task = asyncio.create_task(use_scratch_object())
        await asyncio.sleep(0.05)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

        blob.delete.assert_not_called()
