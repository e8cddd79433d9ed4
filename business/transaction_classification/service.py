"""
Natural-language transaction classification.

Model output is treated as untrusted text: it is de-fenced and then validated
into a ModelTransactionAnalysis, which coerces every field before it becomes a
TransactionAnalysis.
"""

import logging
from typing import Optional, Sequence

from pydantic import ValidationError

from business.transaction_classification.models import (
    ModelTransactionAnalysis,
    TransactionAnalysis,
)
from business.transaction_classification.prompts import build_prompt
from integrations.gemini import GeminiAPIError, GeminiClient, ModelCandidate
from utils.constants import get_gemini_api_key

logger = logging.getLogger(__name__)

# Preference order: fastest/cheapest first.
MODEL_CANDIDATES: tuple[ModelCandidate, ...] = (
    ModelCandidate("gemini-2.5-flash"),
    ModelCandidate("gemini-2.0-flash"),
    ModelCandidate("gemini-2.5-pro"),
    ModelCandidate("gemini-2.0-flash-exp"),
)

TEMPERATURE = 0.1
MAX_OUTPUT_TOKENS = 500
MODELS_TO_LOG = 10
MODELS_IN_ERROR = 5


class ClassificationError(Exception):
    """Raised when no candidate model produced a usable analysis."""

    pass


class InvalidModelOutputError(ValueError):
    pass


def strip_code_fence(raw_text: str) -> str:
    cleaned = raw_text.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    if cleaned.startswith("```"):
        cleaned = cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    return cleaned.strip()


def parse_analysis(raw_text: str) -> TransactionAnalysis:
    """Turn raw model text into a validated TransactionAnalysis."""
    cleaned = strip_code_fence(raw_text)
    try:
        parsed = ModelTransactionAnalysis.model_validate_json(cleaned)
    except ValidationError as e:
        raise InvalidModelOutputError(f"Model output is not a usable JSON object: {e}") from e
    return parsed.to_analysis()


def _exhaustion_message(available_models: list[str]) -> str:
    message = "All AI models failed. "
    if available_models:
        message += f"Available models: {', '.join(available_models[:MODELS_IN_ERROR])}"
    else:
        message += "Could not list available models. Your API key may be invalid or restricted."
    return message


def classify_transaction(
    text: str,
    *,
    gemini: Optional[GeminiClient] = None,
    candidates: Sequence[ModelCandidate] = MODEL_CANDIDATES,
) -> TransactionAnalysis:
    """
    Classify one natural-language transaction description.

    Candidates are tried strictly in order and the first one that yields a
    parseable response wins. Per-candidate failures are logged and skipped.

    Raises:
        GeminiConfigurationError: no API key is configured (no network call is made)
        ClassificationError: every candidate failed
    """
    if gemini is None:
        gemini = GeminiClient(api_key=get_gemini_api_key())

    available_models = gemini.list_models()
    if available_models:
        logger.info("Available models: %s", available_models[:MODELS_TO_LOG])

    prompt = build_prompt(text)
    last_error: Optional[Exception] = None

    for candidate in candidates:
        try:
            response_text = gemini.generate_text(
                candidate,
                prompt,
                temperature=TEMPERATURE,
                max_output_tokens=MAX_OUTPUT_TOKENS,
            )
            analysis = parse_analysis(response_text)
        except (GeminiAPIError, InvalidModelOutputError) as e:
            logger.warning("Failed %s: %s", candidate.label, e)
            last_error = e
            continue

        logger.info("Successfully used: %s", candidate.label)
        return analysis

    raise ClassificationError(_exhaustion_message(available_models)) from last_error
