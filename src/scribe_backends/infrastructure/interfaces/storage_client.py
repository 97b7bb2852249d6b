"""Abstract interface for scratch object storage."""

from abc import ABC, abstractmethod


class StorageClient(ABC):
    """Abstract base class for object storage used by batch transcription."""

    @abstractmethod
    async def upload(
        self,
        credential: str,
        bucket_name: str,
        object_name: str,
        data: bytes,
        content_type: str,
    ) -> str:
        """
        Uploads bytes to storage.

        Args:
            credential: The storage credential.
            bucket_name: The storage bucket name.
            object_name: The destination object name.
            data: The object contents.
            content_type: MIME type of the object.

        Returns:
            The provider URI of the uploaded object.

        Raises:
            StorageUploadError: If the upload fails.
        """

    @abstractmethod
    async def delete(self, credential: str, bucket_name: str, object_name: str) -> None:
        """
        Deletes an object from storage.

        Raises:
            StorageDeleteError: If the deletion fails.
        """
