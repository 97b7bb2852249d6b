"""Abstract interface for note summarization backends."""

from abc import ABC, abstractmethod

from ...domain.models import LLMModel, LLMSummary


class SummarizationService(ABC):
    """Abstract base class for LLM backends that write notes."""

    provider_name: str

    @abstractmethod
    async def summarize(
        self, credential: str, transcript: str, model: LLMModel
    ) -> LLMSummary:
        """
        Turns a transcript into a structured note.

        Args:
            credential: The provider API key.
            transcript: The transcript text.
            model: The model to use; must belong to this provider's family.

        Returns:
            A note validated against the note schema.

        Raises:
            UnsupportedModelError: If ``model`` is not served by this provider.
                Raised before any network call.
            SchemaValidationError: If the provider output does not match the schema.
            TransportError: If the provider call fails.
        """

    @abstractmethod
    async def repair_mermaid_chart(
        self, credential: str, chart: str, model: LLMModel
    ) -> str:
        """
        Asks the model to rewrite a mermaid chart that does not render.

        Returns:
            The repaired chart, validated with the same rules as note charts.

        Raises:
            UnsupportedModelError: If ``model`` is not served by this provider.
            SchemaValidationError: If the repaired chart is still invalid.
            TransportError: If the provider call fails.
        """
