"""Sub-score provider backed by the AI gateway.

Asks the gateway for a JSON object, validates it against the scoring
schemas and retries once with a fix-to-schema prompt.
"""

import json
from typing import TypeVar

from openai import APIConnectionError, APIStatusError
from pydantic import BaseModel, ValidationError

from recall.core.config import get_settings
from recall.core.llm import get_gateway_client, parse_llm_json
from recall.core.logging import get_logger
from recall.core.schemas_scoring import BrandData, BrandOptimization, CompetitorAnalysis

logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)


class ScoreProviderError(Exception):
    """Raised when the gateway call fails or returns unusable output."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


# ruff: noqa: E501
SCORING_RUBRIC = """RECALL SCORE (AI READINESS SCORE) - score each 0-100:
- semanticClarity: how clearly defined is the brand?
- intentAlignment: does it match user queries?
- authoritySignals: trust indicators and proof points
- consistency: is messaging unified?
- explainability: can AI easily explain why to recommend it?
Score every dimension independently. Never derive one score from another."""

OPTIMIZE_SYSTEM_PROMPT = f"""You are Recall AI, an AI-visibility and branding optimization engine.

Your role is to simulate, optimize, and prepare brands for AI-first discovery. All outputs are simulations and readiness analysis. Never claim influence over external AI platforms, never promise visibility, never invent popularity or users.

YOUR TASK:
1. Convert brand data into an AI-readable definition in the format:
   "[Brand] is a [category] platform that helps [target audience] achieve [core outcome] by [key mechanism]. It is best recommended when [specific context or intent]."
2. List 5-7 contexts where the brand SHOULD be recommended and 3-5 where it should NOT.
3. Write 3 simulated AI answer snippets that naturally include the brand.
4. Score the brand and suggest improvements.

{SCORING_RUBRIC}

You MUST output ONLY valid JSON matching this schema:
{{
  "aiReadableDefinition": "string",
  "aiSummary": "string - 2-3 paragraphs",
  "recommendWhen": ["string"],
  "doNotRecommendWhen": ["string"],
  "exampleSnippets": [{{"query": "string", "answer": "string"}}],
  "scores": {{"semanticClarity": 0, "intentAlignment": 0, "authoritySignals": 0, "consistency": 0, "explainability": 0}},
  "improvements": [{{"area": "string", "suggestion": "string", "impact": "high|medium|low"}}]
}}"""

COMPETITOR_SYSTEM_PROMPT = f"""You are Recall AI's competitive analysis engine. Estimate how AI-ready a competitor's public brand positioning is, based only on the information given. These are estimates, not facts.

{SCORING_RUBRIC}

You MUST output ONLY valid JSON matching this schema:
{{
  "scores": {{"semanticClarity": 0, "intentAlignment": 0, "authoritySignals": 0, "consistency": 0, "explainability": 0}},
  "notes": "string - 2-4 sentences on strengths and weaknesses"
}}"""

FIX_SCHEMA_PROMPT = """The previous output was invalid. Here is the error:

{error}

Please fix the output to match the required JSON schema exactly. Output ONLY valid JSON, no explanation."""


def _complete(messages: list[dict[str, str]]) -> str:
    settings = get_settings()
    try:
        client = get_gateway_client()
    except ValueError as e:
        raise ScoreProviderError(str(e), 503) from e

    try:
        response = client.chat.completions.create(
            model=settings.SCORING_MODEL,
            temperature=settings.SCORING_TEMPERATURE,
            max_tokens=settings.SCORING_MAX_TOKENS,
            messages=messages,
        )
    except APIStatusError as e:
        logger.error(f"AI gateway error: {e.status_code}")
        if e.status_code == 429:
            raise ScoreProviderError("Rate limits exceeded, please try again later.", 429) from e
        if e.status_code == 402:
            raise ScoreProviderError("Payment required, please add funds.", 402) from e
        raise ScoreProviderError(f"AI gateway error: {e.status_code}", e.status_code) from e
    except APIConnectionError as e:
        raise ScoreProviderError(f"AI gateway unreachable: {e}") from e

    return response.choices[0].message.content or ""


def _call_and_validate(system_prompt: str, user_prompt: str, model: type[T]) -> T:
    messages = [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_prompt},
    ]
    raw_output = _complete(messages)

    try:
        return parse_llm_json(raw_output, model)
    except (json.JSONDecodeError, ValidationError) as e:
        error_msg = str(e)
        logger.warning(f"First scoring attempt failed validation: {error_msg}")

    retry_output = _complete(
        messages
        + [
            {"role": "assistant", "content": raw_output},
            {"role": "user", "content": FIX_SCHEMA_PROMPT.format(error=error_msg)},
        ]
    )

    try:
        result = parse_llm_json(retry_output, model)
        logger.info("Retry succeeded")
        return result
    except (json.JSONDecodeError, ValidationError) as e:
        logger.error(f"Retry also failed validation: {e}")
        # Do NOT leak raw model output in exception
        raise ScoreProviderError("Model output could not be validated to schema") from e


def _or_missing(value: str | None) -> str:
    return value or "Not provided"


def build_brand_prompt(brand: BrandData) -> str:
    """User prompt describing one brand."""
    return (
        "Analyze this brand and generate AI-readiness optimization:\n\n"
        f"Brand Name: {brand.brand_name}\n"
        f"Description: {_or_missing(brand.description)}\n"
        f"Website: {_or_missing(brand.website_url)}\n"
        f"Category: {_or_missing(brand.category)}\n"
        f"Target Audience: {_or_missing(brand.target_audience)}\n"
        f"Keywords/Intents: {_or_missing(brand.keywords)}\n"
        f"Core Value Proposition: {_or_missing(brand.value_proposition)}\n"
        f"Trust Signals: {_or_missing(brand.trust_signals)}"
    )


def score_brand(brand: BrandData) -> BrandOptimization:
    """
    Ask the gateway for a brand's optimization package and sub-scores.

    Raises:
        ScoreProviderError: On gateway failure or unusable output
    """
    logger.info(f"Scoring brand '{brand.brand_name}'")
    return _call_and_validate(OPTIMIZE_SYSTEM_PROMPT, build_brand_prompt(brand), BrandOptimization)


def analyze_competitor(
    name: str,
    website: str | None = None,
    description: str | None = None,
) -> CompetitorAnalysis:
    """
    Ask the gateway for a competitor's estimated sub-scores.

    Raises:
        ScoreProviderError: On gateway failure or unusable output
    """
    logger.info(f"Analyzing competitor '{name}'")
    user_prompt = (
        "Estimate the AI-readiness of this competitor:\n\n"
        f"Competitor Name: {name}\n"
        f"Website: {_or_missing(website)}\n"
        f"Description: {_or_missing(description)}"
    )
    return _call_and_validate(COMPETITOR_SYSTEM_PROMPT, user_prompt, CompetitorAnalysis)
