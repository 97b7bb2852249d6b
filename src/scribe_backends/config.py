"""Configuration models, loaded from environment variables."""

import os
from pathlib import Path

from pydantic import BaseModel

from .domain.models import LLMModel, TranscriptPlatform
from .exceptions import UnsupportedModelError, UnsupportedPlatformError


class PlatformOptions(BaseModel, frozen=True):
    """
    Per-call backend selection and credentials.

    Only the credential of the selected transcription platform and of the
    selected model's provider is used; the others may be empty.
    """

    assemblyai_api_key: str = ""
    openai_api_key: str = ""
    gemini_api_key: str = ""
    vertex_service_account: str = ""
    vertex_intermediary_bucket: str = ""
    transcript_platform: TranscriptPlatform = TranscriptPlatform.OPENAI
    llm_model: LLMModel = LLMModel.GPT_4O


class OpenAIConfig(BaseModel, frozen=True):
    """OpenAI transcription and chat configuration."""

    transcription_model: str = "whisper-1"
    max_chunk_size: int = 25 * 1024 * 1024


class AssemblyAIConfig(BaseModel, frozen=True):
    """AssemblyAI API configuration."""

    speaker_labels: bool = False


class VertexConfig(BaseModel, frozen=True):
    """Google Cloud Speech-to-Text v2 configuration."""

    location: str = "us-central1"
    model: str = "chirp_2"
    language_codes: tuple[str, ...] = ("auto",)
    # Synchronous recognize rejects inline content above this size.
    max_inline_bytes: int = 10 * 1000 * 1000


class PromptConfig(BaseModel, frozen=True):
    """System prompt shared by every summarization backend."""

    assistant_name: str = "Scribe"
    system_prompt_path: Path = Path("prompts/note_system.txt")
    repair_prompt_path: Path = Path("prompts/mermaid_repair.txt")

    def load_system_prompt(self) -> str:
        path = Path(__file__).parent / self.system_prompt_path
        return path.read_text(encoding="utf-8").format(assistant_name=self.assistant_name)

    def load_repair_prompt(self) -> str:
        return (Path(__file__).parent / self.repair_prompt_path).read_text(encoding="utf-8")


class AppConfig(BaseModel, frozen=True):
    """Root configuration for the provider adapters."""

    openai: OpenAIConfig = OpenAIConfig()
    assemblyai: AssemblyAIConfig = AssemblyAIConfig()
    vertex: VertexConfig = VertexConfig()
    prompt: PromptConfig = PromptConfig()


def _parse_platform(value: str) -> TranscriptPlatform:
    try:
        return TranscriptPlatform(value)
    except ValueError as e:
        raise UnsupportedPlatformError(value) from e


def _parse_model(value: str) -> LLMModel:
    try:
        return LLMModel(value)
    except ValueError as e:
        raise UnsupportedModelError(value) from e


def load_platform_options() -> PlatformOptions:
    """
    Loads platform options from environment variables.

    Raises:
        UnsupportedPlatformError: If ``TRANSCRIPT_PLATFORM`` names no platform.
        UnsupportedModelError: If ``LLM_MODEL`` names no model.
    """
    return PlatformOptions(
        assemblyai_api_key=os.getenv("ASSEMBLYAI_API_KEY", ""),
        openai_api_key=os.getenv("OPENAI_API_KEY", ""),
        gemini_api_key=os.getenv("GEMINI_API_KEY", ""),
        vertex_service_account=os.getenv("VERTEX_SERVICE_ACCOUNT", ""),
        vertex_intermediary_bucket=os.getenv("VERTEX_INTERMEDIARY_BUCKET", ""),
        transcript_platform=_parse_platform(
            os.getenv("TRANSCRIPT_PLATFORM", TranscriptPlatform.OPENAI.value)
        ),
        llm_model=_parse_model(os.getenv("LLM_MODEL", LLMModel.GPT_4O.value)),
    )


def load_config() -> AppConfig:
    """Loads adapter configuration from environment variables."""
    return AppConfig(
        openai=OpenAIConfig(
            transcription_model=os.getenv("OPENAI_TRANSCRIPTION_MODEL", "whisper-1"),
            max_chunk_size=int(os.getenv("OPENAI_MAX_CHUNK_SIZE", str(25 * 1024 * 1024))),
        ),
        assemblyai=AssemblyAIConfig(
            speaker_labels=os.getenv("ASSEMBLYAI_SPEAKER_LABELS", "false").lower() == "true",
        ),
        vertex=VertexConfig(
            location=os.getenv("VERTEX_LOCATION", "us-central1"),
            model=os.getenv("VERTEX_SPEECH_MODEL", "chirp_2"),
            max_inline_bytes=int(os.getenv("VERTEX_MAX_INLINE_BYTES", str(10 * 1000 * 1000))),
        ),
        prompt=PromptConfig(
            assistant_name=os.getenv("SCRIBE_ASSISTANT_NAME", "Scribe"),
        ),
    )
