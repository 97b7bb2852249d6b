from scribe_backends.config import PlatformOptions, load_platform_options
from scribe_backends.domain.models import (
    LLMFamily,
    LLMModel,
    LLMSummary,
    NoteResult,
    TranscriptPlatform,
)
from scribe_backends.exceptions import (
    ConfigurationError,
    FormatError,
    MissingCredentialError,
    SchemaValidationError,
    ScribeBackendError,
    StorageDeleteError,
    StorageUploadError,
    TranscriptionError,
    TransportError,
    UnsupportedModelError,
    UnsupportedPlatformError,
)
from scribe_backends.logging import setup_logging

__all__ = [
    "setup_logging",
    "PlatformOptions",
    "load_platform_options",
    "LLMFamily",
    "LLMModel",
    "LLMSummary",
    "NoteResult",
    "TranscriptPlatform",
    "ConfigurationError",
    "FormatError",
    "MissingCredentialError",
    "SchemaValidationError",
    "ScribeBackendError",
    "StorageDeleteError",
    "StorageUploadError",
    "TranscriptionError",
    "TransportError",
    "UnsupportedModelError",
    "UnsupportedPlatformError",
]
