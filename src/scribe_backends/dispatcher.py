"""Selects the provider adapter for each operation from the platform options."""

from collections.abc import Awaitable, Callable
from functools import partial
from typing import TypeVar, assert_never

from .config import PlatformOptions
from .domain.models import MODEL_FAMILIES, LLMFamily, LLMModel, LLMSummary, TranscriptPlatform
from .exceptions import UnsupportedModelError, UnsupportedPlatformError
from .infrastructure import (
    AssemblyAITranscriber,
    GeminiSummarizer,
    OpenAISummarizer,
    OpenAITranscriber,
    VertexTranscriber,
)
from .logging import setup_logging

logger = setup_logging()

T = TypeVar("T")


def resolve_platform(value: object) -> TranscriptPlatform:
    """
    Maps a configured platform value onto a known platform.

    Raises:
        UnsupportedPlatformError: If the value names no platform.
    """
    if isinstance(value, TranscriptPlatform):
        return value
    try:
        return TranscriptPlatform(value)
    except (ValueError, TypeError):
        raise UnsupportedPlatformError(value) from None


def resolve_model(value: object) -> tuple[LLMModel, LLMFamily]:
    """
    Maps a configured model value onto a known model and its family.

    Raises:
        UnsupportedModelError: If the value names no model or the model has
            no family.
    """
    try:
        model = value if isinstance(value, LLMModel) else LLMModel(value)
    except (ValueError, TypeError):
        raise UnsupportedModelError(value) from None
    family = MODEL_FAMILIES.get(model)
    if family is None:
        raise UnsupportedModelError(model)
    return model, family


class BackendDispatcher:
    """
    Routes transcription and summarization calls to exactly one adapter.

    Holds no state between calls and adds no retries, fallback or caching:
    each call resolves its tag, invokes one adapter with only the credential
    and payload it needs, and passes the adapter's result or error through.
    """

    def __init__(
        self,
        assemblyai: AssemblyAITranscriber,
        openai_transcriber: OpenAITranscriber,
        vertex: VertexTranscriber,
        openai_summarizer: OpenAISummarizer,
        gemini_summarizer: GeminiSummarizer,
    ):
        self._assemblyai = assemblyai
        self._openai_transcriber = openai_transcriber
        self._vertex = vertex
        self._openai_summarizer = openai_summarizer
        self._gemini_summarizer = gemini_summarizer

    async def transcribe_audio(
        self,
        audio_data: bytes,
        options: PlatformOptions,
        on_chunk_start: Callable[[int, int], None] | None = None,
    ) -> str:
        """
        Transcribes audio with the platform selected in ``options``.

        Args:
            audio_data: Raw audio file bytes.
            options: Platform selection and credentials.
            on_chunk_start: Progress callback, used by chunked platforms only.

        Raises:
            UnsupportedPlatformError: Before any adapter runs, if the platform is unknown.
        """
        platform = resolve_platform(options.transcript_platform)

        match platform:
            case TranscriptPlatform.ASSEMBLYAI:
                call = partial(
                    self._assemblyai.transcribe,
                    options.assemblyai_api_key,
                    audio_data,
                )
            case TranscriptPlatform.OPENAI:
                call = partial(
                    self._openai_transcriber.transcribe,
                    options.openai_api_key,
                    audio_data,
                    on_chunk_start=on_chunk_start,
                )
            case TranscriptPlatform.VERTEXAI:
                call = partial(
                    self._vertex.transcribe,
                    options.vertex_service_account,
                    audio_data,
                    bucket_name=options.vertex_intermediary_bucket,
                )
            case _:
                assert_never(platform)

        return await self._run("transcription", platform.value, call)

    async def summarize_transcript(
        self, transcript: str, options: PlatformOptions
    ) -> LLMSummary:
        """
        Writes a note for a transcript with the model selected in ``options``.

        Raises:
            UnsupportedModelError: Before any adapter runs, if the model is unknown.
        """
        model, family = resolve_model(options.llm_model)

        match family:
            case LLMFamily.OPENAI:
                call = partial(
                    self._openai_summarizer.summarize,
                    options.openai_api_key,
                    transcript,
                    model,
                )
            case LLMFamily.GEMINI:
                call = partial(
                    self._gemini_summarizer.summarize,
                    options.gemini_api_key,
                    transcript,
                    model,
                )
            case _:
                assert_never(family)

        return await self._run("summarization", model.value, call)

    async def repair_mermaid_chart(self, chart: str, options: PlatformOptions) -> str:
        """Asks the selected model to rewrite a mermaid chart that does not render."""
        model, family = resolve_model(options.llm_model)

        match family:
            case LLMFamily.OPENAI:
                call = partial(
                    self._openai_summarizer.repair_mermaid_chart,
                    options.openai_api_key,
                    chart,
                    model,
                )
            case LLMFamily.GEMINI:
                call = partial(
                    self._gemini_summarizer.repair_mermaid_chart,
                    options.gemini_api_key,
                    chart,
                    model,
                )
            case _:
                assert_never(family)

        return await self._run("mermaid repair", model.value, call)

    async def _run(self, operation: str, backend: str, call: Callable[[], Awaitable[T]]) -> T:
        logger.info("Dispatched", extra={"operation": operation, "backend": backend})
        try:
            result = await call()
        except Exception as e:
            logger.warning(
                "Adapter failed",
                extra={"operation": operation, "backend": backend, "error": type(e).__name__},
            )
            raise
        logger.info("Adapter succeeded", extra={"operation": operation, "backend": backend})
        return result
