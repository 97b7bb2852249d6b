"""Gemini implementation of the SummarizationService interface."""

from collections.abc import Callable

from google import genai
from google.genai import errors, types

from ..domain.models import LLMModel, LLMSummary, MermaidRepair
from ..domain.note_schema import parse_structured_output
from ..exceptions import TransportError, UnsupportedModelError
from ..logging import setup_logging
from .client_cache import KeyedClientCache
from .interfaces import SummarizationService
from .prompts import repair_request, transcript_request

logger = setup_logging()

GENERATION_PARAMETERS: dict[LLMModel, dict[str, float]] = {
    LLMModel.GEMINI_2_0_FLASH: {"temperature": 0.5},
    LLMModel.GEMINI_2_0_FLASH_LITE_PREVIEW: {"temperature": 0.5},
    LLMModel.GEMINI_2_0_FLASH_THINKING_EXP: {"temperature": 0.5},
    LLMModel.GEMINI_2_0_PRO_EXP: {"temperature": 0.5},
}

REPAIR_TEMPERATURE = 0.3


class GeminiSummarizer(SummarizationService):
    """Writes notes with Gemini using a JSON response schema."""

    provider_name = "Gemini"

    def __init__(
        self,
        system_prompt: str,
        repair_prompt: str,
        client_factory: Callable[[str], genai.Client] | None = None,
    ):
        self._system_prompt = system_prompt
        self._repair_prompt = repair_prompt
        self._clients: KeyedClientCache[genai.Client] = KeyedClientCache(
            "Gemini API key", client_factory or (lambda key: genai.Client(api_key=key))
        )

    def generation_parameters(self, model: LLMModel) -> dict[str, float]:
        """
        Returns the generation parameters for a Gemini model.

        Raises:
            UnsupportedModelError: If ``model`` is not a Gemini model.
        """
        try:
            return GENERATION_PARAMETERS[model]
        except KeyError:
            raise UnsupportedModelError(model, self.provider_name) from None

    async def summarize(
        self, credential: str, transcript: str, model: LLMModel
    ) -> LLMSummary:
        parameters = self.generation_parameters(model)
        client = self._clients.get(credential)

        raw = await self._generate(
            client,
            model,
            transcript_request(transcript),
            types.GenerateContentConfig(
                system_instruction=self._system_prompt,
                response_mime_type="application/json",
                response_schema=LLMSummary,
                **parameters,
            ),
        )
        summary = parse_structured_output(self.provider_name, raw, LLMSummary)
        logger.info("Note generated", extra={"provider": self.provider_name, "model": model.value})
        return summary

    async def repair_mermaid_chart(
        self, credential: str, chart: str, model: LLMModel
    ) -> str:
        self.generation_parameters(model)
        client = self._clients.get(credential)

        raw = await self._generate(
            client,
            model,
            repair_request(chart),
            types.GenerateContentConfig(
                system_instruction=self._repair_prompt,
                response_mime_type="application/json",
                response_schema=MermaidRepair,
                temperature=REPAIR_TEMPERATURE,
            ),
        )
        return parse_structured_output(self.provider_name, raw, MermaidRepair).mermaid_chart

    async def _generate(
        self,
        client: genai.Client,
        model: LLMModel,
        contents: str,
        config: types.GenerateContentConfig,
    ) -> str | None:
        try:
            response = await client.aio.models.generate_content(
                model=model.value,
                contents=contents,
                config=config,
            )
        except errors.APIError as e:
            logger.exception("Gemini API call failed", extra={"model": model.value})
            raise TransportError(self.provider_name, e) from e
        return response.text
