"""Handler that turns one recording into a transcript and a note."""

from collections.abc import Callable

from ..config import PlatformOptions
from ..dispatcher import BackendDispatcher
from ..domain.models import NoteResult
from ..logging import setup_logging

logger = setup_logging()


class RecordingHandler:
    """Orchestrates audio-to-note processing for a single recording."""

    def __init__(self, dispatcher: BackendDispatcher):
        self._dispatcher = dispatcher

    async def process(
        self,
        audio_data: bytes,
        options: PlatformOptions,
        transcribe_only: bool = False,
        on_chunk_start: Callable[[int, int], None] | None = None,
    ) -> NoteResult:
        """
        Transcribes a recording and, unless ``transcribe_only``, summarizes it.

        Args:
            audio_data: Raw audio file bytes.
            options: Platform selection and credentials.
            transcribe_only: Skip summarization and return the transcript alone.
            on_chunk_start: Progress callback for chunked transcription.

        Returns:
            NoteResult with the transcript and, when requested, the note.

        Raises:
            Any error from the selected transcription or summarization adapter.
        """
        logger.info(
            "Processing recording",
            extra={
                "bytes": len(audio_data),
                "platform": str(options.transcript_platform),
                "model": str(options.llm_model),
                "transcribe_only": transcribe_only,
            },
        )

        transcript = await self._dispatcher.transcribe_audio(
            audio_data, options, on_chunk_start=on_chunk_start
        )
        if transcribe_only:
            return NoteResult(transcript=transcript)

        summary = await self._dispatcher.summarize_transcript(transcript, options)

        logger.info("Recording processed", extra={"title": summary.title})
        return NoteResult(transcript=transcript, summary=summary)
