"""Abstract interface for transcription backends."""

from abc import ABC, abstractmethod


class TranscriptionService(ABC):
    """Abstract base class for audio transcription backends."""

    provider_name: str

    @abstractmethod
    async def transcribe(self, credential: str, audio_data: bytes) -> str:
        """
        Transcribes an audio buffer into plain text.

        Args:
            credential: The provider credential (API key or service account JSON).
            audio_data: Raw audio file bytes. Never modified.

        Returns:
            The transcript with repeated whitespace collapsed and ends trimmed.

        Raises:
            TranscriptionError: If the provider returns no transcript content.
            TransportError: If the provider call fails.
            MissingCredentialError: If ``credential`` is empty.
        """
