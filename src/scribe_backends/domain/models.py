"""Domain models for transcription and note summarization."""

import re
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TranscriptPlatform(str, Enum):
    """Transcription backend selected by the caller's settings."""

    ASSEMBLYAI = "assemblyAi"
    OPENAI = "openAi"
    VERTEXAI = "vertexAi"


class LLMFamily(str, Enum):
    """Summarization backend family; one per provider."""

    OPENAI = "openai"
    GEMINI = "gemini"


class LLMModel(str, Enum):
    """LLM used to summarize a transcript. Each member belongs to one family."""

    GPT_4O_MINI = "gpt-4o-mini"
    GPT_4O = "gpt-4o"
    GPT_4_TURBO = "gpt-4-turbo"
    O3_MINI = "o3-mini"

    GEMINI_2_0_FLASH = "gemini-2.0-flash"
    GEMINI_2_0_FLASH_LITE_PREVIEW = "gemini-2.0-flash-lite-preview"
    GEMINI_2_0_FLASH_THINKING_EXP = "gemini-2.0-flash-thinking-exp"
    GEMINI_2_0_PRO_EXP = "gemini-2.0-pro-exp"

    @property
    def family(self) -> LLMFamily:
        return MODEL_FAMILIES[self]


MODEL_FAMILIES: dict[LLMModel, LLMFamily] = {
    LLMModel.GPT_4O_MINI: LLMFamily.OPENAI,
    LLMModel.GPT_4O: LLMFamily.OPENAI,
    LLMModel.GPT_4_TURBO: LLMFamily.OPENAI,
    LLMModel.O3_MINI: LLMFamily.OPENAI,
    LLMModel.GEMINI_2_0_FLASH: LLMFamily.GEMINI,
    LLMModel.GEMINI_2_0_FLASH_LITE_PREVIEW: LLMFamily.GEMINI,
    LLMModel.GEMINI_2_0_FLASH_THINKING_EXP: LLMFamily.GEMINI,
    LLMModel.GEMINI_2_0_PRO_EXP: LLMFamily.GEMINI,
}


# Reserved on Windows, the strictest of the desktop filesystems.
_FILENAME_RESERVED = re.compile(r'[\\/:*?"<>|\x00-\x1f\x7f]')
_WINDOWS_DEVICE_NAMES = {
    "CON", "PRN", "AUX", "NUL",
    *(f"COM{i}" for i in range(1, 10)),
    *(f"LPT{i}" for i in range(1, 10)),
}

# Node shapes ([..], (..), {..}, >..]) and edge labels (|..| and -- .. -->).
_MERMAID_LABEL = re.compile(
    r"\[([^\[\]]*)\]"
    r"|\(([^()]*)\)"
    r"|\{([^{}]*)\}"
    r"|>([^\[\]>\n]*)\]"
    r"|\|([^|]*)\|"
    r"|--\s*([^\s>\-][^\n]*?)\s*-->"
)
_MERMAID_FORBIDDEN = re.compile(r"[\"',`\x00-\x1f\x7f]")


def sanitize_title(title: str) -> str:
    """Turns a suggested title into a name that is a legal file name everywhere."""
    cleaned = _FILENAME_RESERVED.sub(" ", title)
    cleaned = re.sub(r"\s+", " ", cleaned).strip().rstrip(". ")
    if cleaned.split(".")[0].upper() in _WINDOWS_DEVICE_NAMES:
        cleaned = f"{cleaned} note"
    return cleaned


def check_mermaid_chart(chart: str) -> str:
    """
    Validates that a mermaid chart can be embedded as-is in a note.

    Raises:
        ValueError: If the chart is wrapped in a code fence or a node or edge
            label contains quotes, commas, backticks or control characters.
    """
    chart = chart.strip()
    if not chart:
        raise ValueError("mermaid chart is empty")
    if chart.startswith("```") or chart.endswith("```"):
        raise ValueError("mermaid chart must not be wrapped in a code fence")

    for match in _MERMAID_LABEL.finditer(chart):
        label = next(group for group in match.groups() if group is not None)
        if _MERMAID_FORBIDDEN.search(label):
            raise ValueError(f"mermaid label contains disallowed characters: {label!r}")

    return chart


class LLMSummary(BaseModel):
    """
    The structured note an LLM must return for a transcript.

    This model is the only definition of the note shape: the provider request
    schemas are rendered from its fields and descriptions, and provider output
    is validated against it.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    summary: str = Field(
        description=(
            "A summary of the transcript in Markdown. It will be nested under a h2 # tag, "
            "so use a tag less than that for headers.\n"
            "Concise bullet points containing the primary points of the speaker"
        ),
    )
    insights: str = Field(
        description=(
            "Insights that you gained from the transcript in Markdown.\n"
            "A brief section, a paragraph or two on what insights and enhancements you think of\n"
            "Several bullet points on things you think would be an improvement, feel free to use headers\n"
            "It will be nested under an h2 tag, so use a tag less than that for headers"
        ),
    )
    mermaid_chart: str = Field(
        alias="mermaidChart",
        description=(
            "A valid unicode mermaid chart that shows a concept map consisting of both what insights "
            "you had along with what the speaker said for the mermaid chart.\n"
            "Dont wrap it in anything, just output the mermaid chart.\n"
            "Do not use any special characters that arent letters in the nodes text, particularly "
            "new lines, tabs, or special characters like apostraphes or quotes or commas"
        ),
    )
    answered_questions: str | None = Field(
        default=None,
        alias="answeredQuestions",
        description=(
            'If the user says "Hey Scribe" or alludes to you, asking you to do something, answer '
            "the question or do the ask and put the answers here.\n"
            "Put the text in markdown, it will be nested under an h2 tag, so use a tag less than "
            "that for headers.\n"
            "Summarize the question in a short sentence as a header and place your reply nicely "
            "below for as many questions as there are.\n"
            "Leave this null when nobody addresses you."
        ),
    )
    title: str = Field(
        description=(
            "A suggested title for the note. Ensure that it is in the proper format for a file on "
            "mac, windows and linux, do not include any special characters"
        ),
    )

    @field_validator("title")
    @classmethod
    def _title_is_filename(cls, value: str) -> str:
        sanitized = sanitize_title(value)
        if not sanitized:
            raise ValueError("title is empty once reduced to a legal file name")
        return sanitized

    @field_validator("mermaid_chart")
    @classmethod
    def _chart_is_embeddable(cls, value: str) -> str:
        return check_mermaid_chart(value)

    @field_validator("answered_questions")
    @classmethod
    def _blank_answers_are_absent(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value


class MermaidRepair(BaseModel):
    """Structured output of a mermaid chart repair request."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    mermaid_chart: str = Field(
        alias="mermaidChart",
        description="A fully valid unicode mermaid chart",
    )

    @field_validator("mermaid_chart")
    @classmethod
    def _chart_is_embeddable(cls, value: str) -> str:
        return check_mermaid_chart(value)


class AudioChunk(BaseModel, frozen=True):
    """A standalone, size-bounded slice of an audio buffer."""

    index: int
    total: int
    data: bytes
    file_name: str

    @property
    def size(self) -> int:
        return len(self.data)


class Recognized(BaseModel, frozen=True):
    """Fast-path transcription that the provider served directly."""

    transcript: str


class DurationLimitSignal(BaseModel, frozen=True):
    """Fast-path refusal because the audio is longer than the provider accepts."""

    reason: str


FastPathOutcome = Recognized | DurationLimitSignal


class NoteResult(BaseModel, frozen=True):
    """Outcome of processing one recording."""

    transcript: str
    summary: LLMSummary | None = None
