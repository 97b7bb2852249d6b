"""OpenAI implementation of the SummarizationService interface."""

import json
from collections.abc import Callable
from typing import Any

import openai
from pydantic import BaseModel

from ..domain.models import LLMModel, LLMSummary, MermaidRepair
from ..domain.note_schema import openai_json_schema, parse_structured_output
from ..exceptions import SchemaValidationError, TransportError, UnsupportedModelError
from ..logging import setup_logging
from .client_cache import KeyedClientCache
from .interfaces import SummarizationService
from .prompts import repair_request, transcript_request

logger = setup_logging()


class ModelProfile(BaseModel, frozen=True):
    """How to call one OpenAI chat model."""

    temperature: float | None = 0.5
    # Models without Structured Outputs get JSON mode plus the schema in the prompt.
    structured_outputs: bool = True


MODEL_PROFILES: dict[LLMModel, ModelProfile] = {
    LLMModel.GPT_4O_MINI: ModelProfile(),
    LLMModel.GPT_4O: ModelProfile(),
    LLMModel.GPT_4_TURBO: ModelProfile(structured_outputs=False),
    LLMModel.O3_MINI: ModelProfile(temperature=None),
}

REPAIR_TEMPERATURE = 0.3


class OpenAISummarizer(SummarizationService):
    """Writes notes with OpenAI chat completions constrained to the note schema."""

    provider_name = "OpenAI"

    def __init__(
        self,
        system_prompt: str,
        repair_prompt: str,
        client_factory: Callable[[str], openai.AsyncOpenAI] | None = None,
    ):
        self._system_prompt = system_prompt
        self._repair_prompt = repair_prompt
        self._clients: KeyedClientCache[openai.AsyncOpenAI] = KeyedClientCache(
            "OpenAI API key", client_factory or (lambda key: openai.AsyncOpenAI(api_key=key))
        )

    def profile(self, model: LLMModel) -> ModelProfile:
        """
        Returns the call profile for an OpenAI model.

        Raises:
            UnsupportedModelError: If ``model`` is not an OpenAI model.
        """
        try:
            return MODEL_PROFILES[model]
        except KeyError:
            raise UnsupportedModelError(model, self.provider_name) from None

    async def summarize(
        self, credential: str, transcript: str, model: LLMModel
    ) -> LLMSummary:
        profile = self.profile(model)
        client = self._clients.get(credential)

        raw = await self._complete(
            client,
            model,
            profile,
            system_prompt=self._system_prompt,
            user_message=transcript_request(transcript),
            schema_name="note_summary",
            schema_model=LLMSummary,
            temperature=profile.temperature,
        )
        summary = parse_structured_output(self.provider_name, raw, LLMSummary)
        logger.info("Note generated", extra={"provider": self.provider_name, "model": model.value})
        return summary

    async def repair_mermaid_chart(
        self, credential: str, chart: str, model: LLMModel
    ) -> str:
        profile = self.profile(model)
        client = self._clients.get(credential)

        raw = await self._complete(
            client,
            model,
            profile,
            system_prompt=self._repair_prompt,
            user_message=repair_request(chart),
            schema_name="mermaid_repair",
            schema_model=MermaidRepair,
            temperature=REPAIR_TEMPERATURE if profile.temperature is not None else None,
        )
        return parse_structured_output(self.provider_name, raw, MermaidRepair).mermaid_chart

    async def _complete(
        self,
        client: openai.AsyncOpenAI,
        model: LLMModel,
        profile: ModelProfile,
        *,
        system_prompt: str,
        user_message: str,
        schema_name: str,
        schema_model: type[BaseModel],
        temperature: float | None,
    ) -> str | None:
        schema = openai_json_schema(schema_model)
        request: dict[str, Any] = {"model": model.value}

        if profile.structured_outputs:
            request["response_format"] = {
                "type": "json_schema",
                "json_schema": {"name": schema_name, "strict": True, "schema": schema},
            }
        else:
            system_prompt = (
                f"{system_prompt}\n"
                "Respond with a single JSON object that matches this JSON schema:\n"
                f"{json.dumps(schema)}"
            )
            request["response_format"] = {"type": "json_object"}

        if temperature is not None:
            request["temperature"] = temperature

        try:
            completion = await client.chat.completions.create(
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_message},
                ],
                **request,
            )
        except openai.OpenAIError as e:
            logger.exception("OpenAI API call failed", extra={"model": model.value})
            raise TransportError(self.provider_name, e) from e

        if not completion.choices:
            raise SchemaValidationError(self.provider_name, ValueError("no choices returned"))

        message = completion.choices[0].message
        if getattr(message, "refusal", None):
            raise SchemaValidationError(
                self.provider_name, ValueError(f"model refused: {message.refusal}")
            )
        return message.content
