"""Dependency injection configuration for the backends."""

from collections.abc import Callable

from .config import PlatformOptions, load_config
from .dispatcher import BackendDispatcher
from .domain import AudioChunker, LLMSummary
from .handlers import RecordingHandler
from .infrastructure import (
    AssemblyAITranscriber,
    GCSStorageClient,
    GeminiSummarizer,
    OpenAISummarizer,
    OpenAITranscriber,
    VertexTranscriber,
)

_config = load_config()

# Provider clients are built lazily, on the first call with a credential.
_system_prompt = _config.prompt.load_system_prompt()
_repair_prompt = _config.prompt.load_repair_prompt()

_assemblyai = AssemblyAITranscriber(_config.assemblyai)
_openai_transcriber = OpenAITranscriber(_config.openai, AudioChunker())
_vertex = VertexTranscriber(_config.vertex, GCSStorageClient())
_openai_summarizer = OpenAISummarizer(_system_prompt, _repair_prompt)
_gemini_summarizer = GeminiSummarizer(_system_prompt, _repair_prompt)

_dispatcher = BackendDispatcher(
    assemblyai=_assemblyai,
    openai_transcriber=_openai_transcriber,
    vertex=_vertex,
    openai_summarizer=_openai_summarizer,
    gemini_summarizer=_gemini_summarizer,
)


def get_dispatcher() -> BackendDispatcher:
    """Returns the configured backend dispatcher."""
    return _dispatcher


def get_handler() -> RecordingHandler:
    """Returns a recording handler bound to the configured dispatcher."""
    return RecordingHandler(_dispatcher)


async def transcribe_audio(
    audio_data: bytes,
    options: PlatformOptions,
    on_chunk_start: Callable[[int, int], None] | None = None,
) -> str:
    """Transcribes audio with the platform selected in ``options``."""
    return await _dispatcher.transcribe_audio(audio_data, options, on_chunk_start)


async def summarize_transcript(transcript: str, options: PlatformOptions) -> LLMSummary:
    """Writes a note for a transcript with the model selected in ``options``."""
    return await _dispatcher.summarize_transcript(transcript, options)
