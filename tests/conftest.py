"""Shared fixtures: synthetic audio, platform options and provider fakes."""

import io
import json
from types import SimpleNamespace

import numpy as np
import pytest
import soundfile as sf

from scribe_backends.config import PlatformOptions
from scribe_backends.domain.models import LLMModel, TranscriptPlatform


def make_wav(frames: int = 16000, sample_rate: int = 16000, channels: int = 1) -> bytes:
    """Builds a 16-bit PCM WAV file holding a sine tone."""
    t = np.arange(frames) / sample_rate
    tone = (np.sin(2 * np.pi * 440 * t) * 8000).astype(np.int16)
    samples = np.repeat(tone[:, None], channels, axis=1) if channels > 1 else tone
    buffer = io.BytesIO()
    sf.write(buffer, samples, sample_rate, format="WAV", subtype="PCM_16")
    return buffer.getvalue()


def note_json(**overrides) -> str:
    """Serializes a provider response for the note schema; pass ``...`` to drop a field."""
    payload = {
        "summary": "### Points\n- Ship the release on Friday",
        "insights": "### Ideas\n- Automate the changelog",
        "mermaidChart": "graph TD\n  A[Release] --> B[Changelog]\n  B --> C(Announcement)",
        "answeredQuestions": None,
        "title": "Release planning",
    }
    payload.update(overrides)
    return json.dumps({k: v for k, v in payload.items() if v is not ...})


def speech_results(*texts: str) -> list[SimpleNamespace]:
    return [
        SimpleNamespace(alternatives=[SimpleNamespace(transcript=text)]) for text in texts
    ]


@pytest.fixture
def wav_bytes() -> bytes:
    return make_wav()


@pytest.fixture
def platform_options() -> PlatformOptions:
    return PlatformOptions(
        assemblyai_api_key="aai-key",
        openai_api_key="sk-test",
        gemini_api_key="gemini-key",
        vertex_service_account='{"project_id": "demo"}',
        vertex_intermediary_bucket="scratch-bucket",
        transcript_platform=TranscriptPlatform.OPENAI,
        llm_model=LLMModel.GPT_4O,
    )
