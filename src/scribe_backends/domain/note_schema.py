"""Provider-facing rendering and validation of the structured note schemas."""

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from ..exceptions import SchemaValidationError
from .models import LLMSummary

M = TypeVar("M", bound=BaseModel)

# Keywords pydantic emits that OpenAI strict mode does not accept.
_UNSUPPORTED_KEYWORDS = {"default", "title"}


def openai_json_schema(model: type[BaseModel] = LLMSummary) -> dict[str, Any]:
    """
    Renders a model as an OpenAI strict JSON schema.

    Strict mode requires every property to be listed as required and forbids
    additional properties, so optional fields stay nullable but required.
    """
    source = model.model_json_schema(by_alias=True)
    properties = {
        name: {k: v for k, v in prop.items() if k not in _UNSUPPORTED_KEYWORDS}
        for name, prop in source["properties"].items()
    }
    return {
        "type": "object",
        "properties": properties,
        "required": list(properties),
        "additionalProperties": False,
    }


def parse_structured_output(provider: str, raw: str | None, model: type[M]) -> M:
    """
    Validates raw provider JSON against a note model.

    Raises:
        SchemaValidationError: If the output is empty, not JSON, or does not
            match the model.
    """
    if not raw or not raw.strip():
        raise SchemaValidationError(provider, ValueError("empty response"))
    try:
        return model.model_validate_json(raw)
    except ValidationError as e:
        raise SchemaValidationError(provider, e) from e
