from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from utils.constants import GEMINI_API_VERSION, GEMINI_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


class GeminiError(Exception):
    """Base exception for Gemini integration errors"""

    pass


class GeminiConfigurationError(GeminiError):
    """Raised when the Gemini API key is missing"""

    pass


class GeminiAPIError(GeminiError):
    """Raised when a Gemini call fails or returns a non-success response"""

    pass


@dataclass(frozen=True)
class ModelCandidate:
    model: str
    api_version: str = GEMINI_API_VERSION

    @property
    def label(self) -> str:
        return f"{self.api_version}/models/{self.model}"


ClientFactory = Callable[[str, types.HttpOptions], Any]


def _default_client_factory(api_key: str, http_options: types.HttpOptions) -> genai.Client:
    return genai.Client(api_key=api_key, http_options=http_options)


class GeminiClient:
    """Thin wrapper over google-genai that speaks plain text in and out.

    One SDK client is kept per API version. Every request carries the
    configured timeout, so a hung model cannot stall the fallback chain.
    """

    def __init__(
        self,
        api_key: str | None,
        timeout_seconds: float = GEMINI_TIMEOUT_SECONDS,
        client_factory: ClientFactory | None = None,
    ) -> None:
        if not api_key:
            raise GeminiConfigurationError(
                "Gemini API key not configured. Please add GOOGLE_GEMINI_API_KEY to your .env.local file."
            )
        self._api_key = api_key
        self._timeout_ms = int(timeout_seconds * 1000)
        self._client_factory = client_factory or _default_client_factory
        self._clients: dict[str, Any] = {}

    def _client_for(self, api_version: str) -> Any:
        client = self._clients.get(api_version)
        if client is None:
            http_options = types.HttpOptions(api_version=api_version, timeout=self._timeout_ms)
            client = self._client_factory(self._api_key, http_options)
            self._clients[api_version] = client
        return client

    def generate_text(
        self,
        candidate: ModelCandidate,
        prompt: str,
        *,
        temperature: float,
        max_output_tokens: int,
    ) -> str:
        """Run one generateContent call and return the first text part ('' if none)."""
        logger.info("Trying: %s", candidate.label)
        client = self._client_for(candidate.api_version)
        try:
            response = client.models.generate_content(
                model=candidate.model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    temperature=temperature,
                    max_output_tokens=max_output_tokens,
                ),
            )
            text = response.text if response else None
        except genai_errors.APIError as e:
            detail = e.message or f"API returned {e.code}"
            raise GeminiAPIError(detail) from e
        except genai_errors.UnknownApiResponseError as e:
            # Non-JSON body, e.g. an HTML error page from a proxy.
            raise GeminiAPIError(f"Unreadable response: {e}") from e
        except httpx.HTTPError as e:
            raise GeminiAPIError(f"Transport error: {e}") from e
        except Exception as e:
            raise GeminiAPIError(f"Unexpected {type(e).__name__}: {e}") from e

        return text or ""

    def list_models(self) -> list[str]:
        """List model names visible to this key. Best effort: any failure yields []."""
        try:
            client = self._client_for(GEMINI_API_VERSION)
            return [model.name for model in client.models.list() if getattr(model, "name", None)]
        except Exception as e:
            logger.debug("Could not list Gemini models: %s", e)
            return []
