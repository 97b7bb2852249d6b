"""Domain layer exports."""

from .audio_chunker import AudioChunker
from .models import (
    MODEL_FAMILIES,
    AudioChunk,
    DurationLimitSignal,
    FastPathOutcome,
    LLMFamily,
    LLMModel,
    LLMSummary,
    MermaidRepair,
    NoteResult,
    Recognized,
    TranscriptPlatform,
)
from .transcript import join_segments, normalize_transcript

__all__ = [
    "MODEL_FAMILIES",
    "AudioChunk",
    "AudioChunker",
    "DurationLimitSignal",
    "FastPathOutcome",
    "LLMFamily",
    "LLMModel",
    "LLMSummary",
    "MermaidRepair",
    "NoteResult",
    "Recognized",
    "TranscriptPlatform",
    "join_segments",
    "normalize_transcript",
]
