"""Infrastructure layer exports."""

from .assemblyai_transcriber import AssemblyAITranscriber
from .client_cache import KeyedClientCache
from .gcs_storage import GCSStorageClient, scratch_object
from .gemini_summarizer import GeminiSummarizer
from .openai_summarizer import OpenAISummarizer
from .openai_transcriber import OpenAITranscriber
from .vertex_transcriber import SpeechSession, VertexTranscriber

__all__ = [
    "AssemblyAITranscriber",
    "GCSStorageClient",
    "GeminiSummarizer",
    "KeyedClientCache",
    "OpenAISummarizer",
    "OpenAITranscriber",
    "SpeechSession",
    "VertexTranscriber",
    "scratch_object",
]
