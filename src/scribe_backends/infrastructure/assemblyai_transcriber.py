"""AssemblyAI implementation of the TranscriptionService interface."""

import asyncio
import io
from collections.abc import Callable

import assemblyai as aai

from ..config import AssemblyAIConfig
from ..domain.transcript import normalize_transcript
from ..exceptions import TranscriptionError, TransportError
from ..logging import setup_logging
from .client_cache import KeyedClientCache
from .interfaces import TranscriptionService

logger = setup_logging()


class AssemblyAITranscriber(TranscriptionService):
    """Transcribes a whole recording with one AssemblyAI request."""

    provider_name = "AssemblyAI"

    def __init__(
        self,
        config: AssemblyAIConfig,
        transcriber_factory: Callable[[str], aai.Transcriber] | None = None,
    ):
        self._config = config
        self._transcribers: KeyedClientCache[aai.Transcriber] = KeyedClientCache(
            "AssemblyAI API key", transcriber_factory or self._build_transcriber
        )

    def _build_transcriber(self, api_key: str) -> aai.Transcriber:
        client = aai.Client(aai.Settings(api_key=api_key))
        return aai.Transcriber(
            client=client,
            config=aai.TranscriptionConfig(speaker_labels=self._config.speaker_labels),
        )

    async def transcribe(self, credential: str, audio_data: bytes) -> str:
        """
        Uploads the buffer and waits for the finished transcript.

        The SDK call blocks while it polls, so it runs in a worker thread.
        """
        transcriber = self._transcribers.get(credential)

        try:
            transcription = await asyncio.to_thread(
                transcriber.transcribe, io.BytesIO(audio_data)
            )
        except Exception as e:
            logger.exception("AssemblyAI transcription failed")
            raise TransportError(self.provider_name, e) from e

        if transcription.status == aai.TranscriptStatus.error:
            logger.error(
                "AssemblyAI reported a transcription error",
                extra={"error": transcription.error},
            )
            raise TransportError(self.provider_name, transcription.error)

        if not transcription.text or not transcription.text.strip():
            raise TranscriptionError(self.provider_name)

        transcript = normalize_transcript(transcription.text)
        logger.info(
            "Audio transcription successful",
            extra={"provider": self.provider_name, "characters": len(transcript)},
        )
        return transcript
