"""Google Cloud Speech-to-Text v2 implementation of the TranscriptionService interface."""

import re
import uuid
from collections.abc import Callable, Iterable

from google.api_core import exceptions as google_exceptions
from google.api_core.client_options import ClientOptions
from google.cloud import speech_v2
from google.cloud.speech_v2.types import cloud_speech
from pydantic import BaseModel, ConfigDict

from ..config import VertexConfig
from ..domain.audio_format import guess_audio_format
from ..domain.models import DurationLimitSignal, FastPathOutcome, Recognized
from ..domain.transcript import normalize_transcript
from ..exceptions import ConfigurationError, TranscriptionError, TransportError
from ..logging import setup_logging
from .client_cache import KeyedClientCache
from .gcs_storage import scratch_object
from .google_credentials import parse_service_account
from .interfaces import StorageClient, TranscriptionService

logger = setup_logging()

# Synchronous recognize rejects long audio with INVALID_ARGUMENT and this text.
_DURATION_LIMIT = re.compile(r"maximum of \d+ seconds", re.IGNORECASE)


class SpeechSession(BaseModel):
    """A speech client together with the project its recognizer lives in."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    client: speech_v2.SpeechAsyncClient
    project_id: str


def classify_recognize_error(
    error: google_exceptions.GoogleAPICallError,
) -> DurationLimitSignal | None:
    """Returns a duration-limit signal if ``error`` is the fast-path length ceiling."""
    if isinstance(error, google_exceptions.InvalidArgument) and _DURATION_LIMIT.search(
        error.message or str(error)
    ):
        return DurationLimitSignal(reason=error.message or str(error))
    return None


def _join_results(results: Iterable[cloud_speech.SpeechRecognitionResult]) -> str:
    return " ".join(
        result.alternatives[0].transcript if result.alternatives else ""
        for result in results
    )


class VertexTranscriber(TranscriptionService):
    """
    Transcribes with Chirp 2 on Speech-to-Text v2.

    Audio is first sent inline to the synchronous ``recognize`` endpoint. When
    the buffer exceeds the inline content limit, or the provider refuses it for
    being too long, the buffer is staged in a scratch bucket and transcribed
    with ``batch_recognize``; the staged object is removed however that call
    ends.
    """

    provider_name = "Vertex AI Speech"

    def __init__(
        self,
        config: VertexConfig,
        storage: StorageClient,
        session_factory: Callable[[str], SpeechSession] | None = None,
    ):
        self._config = config
        self._storage = storage
        self._sessions: KeyedClientCache[SpeechSession] = KeyedClientCache(
            "Vertex AI service account", session_factory or self._build_session
        )

    def _build_session(self, credential: str) -> SpeechSession:
        account = parse_service_account(credential)
        client = speech_v2.SpeechAsyncClient(
            credentials=account.credentials,
            client_options=ClientOptions(
                api_endpoint=f"{self._config.location}-speech.googleapis.com"
            ),
        )
        return SpeechSession(client=client, project_id=account.project_id)

    def _recognizer(self, session: SpeechSession) -> str:
        return (
            f"projects/{session.project_id}/locations/{self._config.location}/recognizers/_"
        )

    def _recognition_config(self) -> cloud_speech.RecognitionConfig:
        return cloud_speech.RecognitionConfig(
            auto_decoding_config=cloud_speech.AutoDetectDecodingConfig(),
            language_codes=list(self._config.language_codes),
            model=self._config.model,
            features=cloud_speech.RecognitionFeatures(enable_automatic_punctuation=True),
        )

    async def transcribe(
        self, credential: str, audio_data: bytes, bucket_name: str = ""
    ) -> str:
        """
        Transcribes inline, escalating to batch recognition for long audio.

        Args:
            credential: Service account key JSON.
            audio_data: Raw audio file bytes.
            bucket_name: Scratch bucket for the batch path. Only required when
                the audio is too long for the synchronous endpoint.

        Raises:
            ConfigurationError: If escalation is needed and no bucket is set.
            TranscriptionError: If recognition returns no results.
            TransportError: If a provider call fails.
        """
        session = self._sessions.get(credential)

        outcome = await self._recognize(session, audio_data)
        match outcome:
            case Recognized(transcript=transcript):
                return transcript
            case DurationLimitSignal(reason=reason):
                logger.info(
                    "Audio too long for synchronous recognition, using batch recognition",
                    extra={"reason": reason},
                )
                if not bucket_name:
                    raise ConfigurationError(
                        "Vertex AI intermediary bucket is required to transcribe long audio"
                    )
                return await self._batch_recognize(session, credential, bucket_name, audio_data)

    async def _recognize(self, session: SpeechSession, audio_data: bytes) -> FastPathOutcome:
        if len(audio_data) > self._config.max_inline_bytes:
            return DurationLimitSignal(
                reason=(
                    f"audio is {len(audio_data)} bytes, above the "
                    f"{self._config.max_inline_bytes} byte inline content limit"
                )
            )

        request = cloud_speech.RecognizeRequest(
            recognizer=self._recognizer(session),
            config=self._recognition_config(),
            content=audio_data,
        )
        try:
            response = await session.client.recognize(request=request)
        except google_exceptions.GoogleAPICallError as e:
            signal = classify_recognize_error(e)
            if signal is not None:
                return signal
            logger.exception("Speech recognize failed")
            raise TransportError(self.provider_name, e) from e

        if not response.results:
            raise TranscriptionError(self.provider_name)

        return Recognized(transcript=self._finish(_join_results(response.results)))

    async def _batch_recognize(
        self,
        session: SpeechSession,
        credential: str,
        bucket_name: str,
        audio_data: bytes,
    ) -> str:
        audio_format = guess_audio_format(audio_data)
        object_name = f"{uuid.uuid4()}.{audio_format.extension}"

        async with scratch_object(
            self._storage,
            credential,
            bucket_name,
            object_name,
            audio_data,
            audio_format.content_type,
        ) as uri:
            request = cloud_speech.BatchRecognizeRequest(
                recognizer=self._recognizer(session),
                config=self._recognition_config(),
                files=[cloud_speech.BatchRecognizeFileMetadata(uri=uri)],
                recognition_output_config=cloud_speech.RecognitionOutputConfig(
                    inline_response_config=cloud_speech.InlineOutputConfig(),
                ),
            )
            try:
                operation = await session.client.batch_recognize(request=request)
                response = await operation.result()
            except google_exceptions.GoogleAPICallError as e:
                logger.exception("Speech batch recognize failed", extra={"uri": uri})
                raise TransportError(self.provider_name, e) from e

            file_result = response.results.get(uri)
            if file_result is None:
                raise TranscriptionError(self.provider_name, f"no result for {uri}")
            if file_result.error and file_result.error.code:
                raise TransportError(self.provider_name, file_result.error.message)
            # Newer responses carry the transcript in inline_result; older ones
            # only fill the deprecated top-level field.
            results = (
                file_result.inline_result.transcript.results
                or file_result.transcript.results
            )
            if not results:
                raise TranscriptionError(self.provider_name)

            return self._finish(_join_results(results))

    def _finish(self, raw_transcript: str) -> str:
        transcript = normalize_transcript(raw_transcript)
        if not transcript:
            raise TranscriptionError(self.provider_name, "results contained no text")
        logger.info(
            "Audio transcription successful",
            extra={"provider": self.provider_name, "characters": len(transcript)},
        )
        return transcript
