"""Google Cloud Storage implementation of the StorageClient interface."""

import asyncio
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager, suppress

from google.api_core import exceptions as google_exceptions
from google.cloud import storage

from ..exceptions import StorageDeleteError, StorageUploadError
from ..logging import setup_logging
from .client_cache import KeyedClientCache
from .google_credentials import parse_service_account
from .interfaces import StorageClient

logger = setup_logging()


def _build_storage_client(credential: str) -> storage.Client:
    account = parse_service_account(credential)
    return storage.Client(project=account.project_id, credentials=account.credentials)


class GCSStorageClient(StorageClient):
    """Handles scratch objects in Google Cloud Storage."""

    def __init__(self, client_factory: Callable[[str], storage.Client] | None = None):
        self._clients: KeyedClientCache[storage.Client] = KeyedClientCache(
            "Vertex AI service account", client_factory or _build_storage_client
        )

    async def upload(
        self,
        credential: str,
        bucket_name: str,
        object_name: str,
        data: bytes,
        content_type: str,
    ) -> str:
        blob = self._clients.get(credential).bucket(bucket_name).blob(object_name)
        try:
            await asyncio.to_thread(blob.upload_from_string, data, content_type=content_type)
        except google_exceptions.GoogleAPIError as e:
            logger.exception(
                "Cloud Storage upload failed",
                extra={"bucket_name": bucket_name, "object_name": object_name},
            )
            raise StorageUploadError(object_name, e) from e

        logger.info(
            "File uploaded to Cloud Storage",
            extra={"bucket_name": bucket_name, "object_name": object_name, "bytes": len(data)},
        )
        return f"gs://{bucket_name}/{object_name}"

    async def delete(self, credential: str, bucket_name: str, object_name: str) -> None:
        blob = self._clients.get(credential).bucket(bucket_name).blob(object_name)
        try:
            await asyncio.to_thread(blob.delete)
        except google_exceptions.GoogleAPIError as e:
            logger.exception(
                "Cloud Storage delete failed",
                extra={"bucket_name": bucket_name, "object_name": object_name},
            )
            raise StorageDeleteError(object_name, e) from e

        logger.info(
            "File deleted from Cloud Storage",
            extra={"bucket_name": bucket_name, "object_name": object_name},
        )


@asynccontextmanager
async def scratch_object(
    storage_client: StorageClient,
    credential: str,
    bucket_name: str,
    object_name: str,
    data: bytes,
    content_type: str,
) -> AsyncIterator[str]:
    """
    Uploads a scratch object for the duration of the block.

    Yields the object URI. The object is deleted when the block exits, whether
    it returns, raises or is cancelled. A failed delete is reported only when
    the block itself succeeded.

    Cancelling the caller does not stop an upload already running in its
    worker thread, so the upload is shielded and, after a cancellation, awaited
    to completion and its object removed before the cancellation propagates.
    """
    upload = asyncio.ensure_future(
        storage_client.upload(credential, bucket_name, object_name, data, content_type)
    )
    try:
        uri = await asyncio.shield(upload)
    except asyncio.CancelledError:
        await _discard_late_upload(upload, storage_client, credential, bucket_name, object_name)
        raise

    try:
        yield uri
    except BaseException:
        # Already logged by the client; the error that ended the block wins.
        with suppress(StorageDeleteError):
            await storage_client.delete(credential, bucket_name, object_name)
        raise
    else:
        await storage_client.delete(credential, bucket_name, object_name)


async def _discard_late_upload(
    upload: asyncio.Future[str],
    storage_client: StorageClient,
    credential: str,
    bucket_name: str,
    object_name: str,
) -> None:
    """Waits for an upload whose caller was cancelled and deletes what it stored."""
    try:
        await upload
    except Exception:
        # Nothing was stored; the caller's cancellation is what propagates.
        return

    logger.info(
        "Removing object uploaded after cancellation",
        extra={"bucket_name": bucket_name, "object_name": object_name},
    )
    with suppress(StorageDeleteError):
        await storage_client.delete(credential, bucket_name, object_name)
