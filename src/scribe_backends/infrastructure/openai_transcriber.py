"""OpenAI Whisper implementation of the TranscriptionService interface."""

from collections.abc import Callable

import openai

from ..config import OpenAIConfig
from ..domain.audio_chunker import AudioChunker
from ..domain.transcript import join_segments
from ..exceptions import TranscriptionError, TransportError
from ..logging import setup_logging
from .client_cache import KeyedClientCache
from .interfaces import TranscriptionService

logger = setup_logging()

ChunkProgress = Callable[[int, int], None]


class OpenAITranscriber(TranscriptionService):
    """
    Transcribes with Whisper, one size-limited chunk at a time.

    Chunks are sent strictly in order and never concurrently, so the joined
    transcript keeps the recording's order and a single recording cannot burst
    past the provider's rate limits.
    """

    provider_name = "OpenAI"

    def __init__(
        self,
        config: OpenAIConfig,
        chunker: AudioChunker,
        client_factory: Callable[[str], openai.AsyncOpenAI] | None = None,
    ):
        self._config = config
        self._chunker = chunker
        self._clients: KeyedClientCache[openai.AsyncOpenAI] = KeyedClientCache(
            "OpenAI API key", client_factory or (lambda key: openai.AsyncOpenAI(api_key=key))
        )

    async def transcribe(
        self,
        credential: str,
        audio_data: bytes,
        on_chunk_start: ChunkProgress | None = None,
    ) -> str:
        """
        Splits the buffer and transcribes each chunk in sequence.

        Args:
            credential: OpenAI API key.
            audio_data: Raw audio file bytes.
            on_chunk_start: Called with ``(index, total)`` before each chunk is sent.

        Raises:
            FormatError: If the buffer cannot be split.
            TranscriptionError: If no chunk comes back with text.
            TransportError: If a request fails.
        """
        client = self._clients.get(credential)
        chunks = self._chunker.split(audio_data, self._config.max_chunk_size)

        logger.info(
            "Transcribing audio in chunks",
            extra={"provider": self.provider_name, "chunk_count": len(chunks)},
        )

        segments: list[str] = []
        for chunk in chunks:
            if on_chunk_start:
                on_chunk_start(chunk.index, chunk.total)

            try:
                response = await client.audio.transcriptions.create(
                    model=self._config.transcription_model,
                    file=(chunk.file_name, chunk.data),
                )
            except openai.OpenAIError as e:
                logger.exception(
                    "Whisper transcription failed",
                    extra={"chunk": chunk.index, "total": chunk.total},
                )
                raise TransportError(self.provider_name, e) from e

            text = (response.text or "").strip()
            if not text:
                # A silent stretch of the recording; the other chunks still count.
                logger.warning(
                    "Whisper returned no text for chunk",
                    extra={"chunk": chunk.index, "total": chunk.total},
                )
                continue
            segments.append(text)

        transcript = join_segments(segments)
        if not transcript:
            raise TranscriptionError(self.provider_name)

        logger.info(
            "Audio transcription successful",
            extra={"provider": self.provider_name, "characters": len(transcript)},
        )
        return transcript
