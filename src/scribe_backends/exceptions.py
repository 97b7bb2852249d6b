"""Custom exceptions for the transcription and summarization backends."""


class ScribeBackendError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(ScribeBackendError):
    """Raised when the platform options cannot serve the requested operation."""


class UnsupportedPlatformError(ConfigurationError):
    """Raised when a transcription platform tag has no adapter."""

    def __init__(self, platform: object):
        self.platform = platform
        super().__init__(f"'{platform}' is not a supported transcription platform")


class UnsupportedModelError(ConfigurationError):
    """Raised when an LLM model tag has no adapter or no generation parameters."""

    def __init__(self, model: object, provider: str | None = None):
        self.model = model
        self.provider = provider
        if provider:
            message = f"'{model}' is not a supported {provider} model"
        else:
            message = f"'{model}' is not a supported LLM model"
        super().__init__(message)


class MissingCredentialError(ConfigurationError):
    """Raised when the credential for the selected provider is empty."""

    def __init__(self, credential_name: str):
        self.credential_name = credential_name
        super().__init__(f"{credential_name} is required for this operation")


class FormatError(ScribeBackendError):
    """Raised when an audio buffer cannot be parsed as audio."""

    def __init__(self, reason: str, cause: Exception | None = None):
        self.reason = reason
        self.cause = cause
        super().__init__(f"Audio could not be parsed: {reason}")


class TranscriptionError(ScribeBackendError):
    """Raised when a provider answers but returns no usable transcript."""

    def __init__(self, provider: str, reason: str = "no transcript content returned"):
        self.provider = provider
        self.reason = reason
        super().__init__(f"Failed to transcribe audio with {provider}: {reason}")


class SchemaValidationError(ScribeBackendError):
    """Raised when structured LLM output does not match the note schema."""

    def __init__(self, provider: str, cause: Exception | None = None):
        self.provider = provider
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"{provider} returned a note that does not match the schema{detail}")


class TransportError(ScribeBackendError):
    """Raised when a provider call fails (network, auth, rate limit, provider error)."""

    def __init__(
        self,
        provider: str,
        cause: Exception | str | None = None,
        message: str | None = None,
    ):
        self.provider = provider
        self.cause = cause
        if message is None:
            detail = f": {cause}" if cause else ""
            message = f"{provider} request failed{detail}"
        super().__init__(message)


class StorageUploadError(TransportError):
    """Raised when uploading a scratch object fails."""

    def __init__(self, object_name: str, cause: Exception | None = None):
        self.object_name = object_name
        super().__init__(
            "object storage",
            cause,
            message=f"Failed to upload '{object_name}' to storage: {cause}",
        )


class StorageDeleteError(TransportError):
    """Raised when deleting a scratch object fails."""

    def __init__(self, object_name: str, cause: Exception | None = None):
        self.object_name = object_name
        super().__init__(
            "object storage",
            cause,
            message=f"Failed to delete '{object_name}' from storage: {cause}",
        )
