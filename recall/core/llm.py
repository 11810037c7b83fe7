"""LLM client utilities for the OpenAI-compatible AI gateway."""

import json
import re
from typing import TypeVar

from openai import OpenAI
from pydantic import BaseModel

from recall.core.config import get_settings

T = TypeVar("T", bound=BaseModel)


def get_gateway_client() -> OpenAI:
    """
    Get an OpenAI SDK client pointed at the AI gateway.

    Returns:
        OpenAI client configured with the gateway URL and key

    Raises:
        ValueError: If AI_GATEWAY_API_KEY is not configured
    """
    settings = get_settings()
    if not settings.AI_GATEWAY_API_KEY:
        raise ValueError("AI_GATEWAY_API_KEY is not configured")

    return OpenAI(
        api_key=settings.AI_GATEWAY_API_KEY,
        base_url=settings.AI_GATEWAY_URL,
        max_retries=0,
    )


def _strip_llm_fences(raw_output: str) -> str:
    """Strip markdown code fences from LLM output.

    Handles: ```json ... ```, ``` ... ```, leading/trailing whitespace.
    """
    cleaned = raw_output.strip()

    # Extract JSON from markdown code fences
    fence_match = re.search(r"```(?:json)?\s*\n?(.*?)```", cleaned, re.DOTALL)
    if fence_match:
        return fence_match.group(1).strip()

    # Fallback: strip leading/trailing fences without regex
    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    return cleaned.strip()


def parse_llm_json(raw_output: str, model: type[T]) -> T:
    """
    Parse LLM output as JSON and validate against a Pydantic model.

    Args:
        raw_output: Raw string from LLM response
        model: Pydantic model class to validate against

    Returns:
        Validated Pydantic model instance

    Raises:
        json.JSONDecodeError: If JSON parsing fails after cleanup
        pydantic.ValidationError: If parsed JSON doesn't match schema
    """
    cleaned = _strip_llm_fences(raw_output)
    parsed = json.loads(cleaned)
    return model.model_validate(parsed)
