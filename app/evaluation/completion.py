"""Completion service used to generate one variation per grid point."""
import logging
from typing import Optional, Protocol

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

logger = logging.getLogger(__name__)

DEFAULT_MAX_TOKENS = 500


class ProviderError(Exception):
    """Any failure reported by the completion provider."""


class RateLimited(ProviderError):
    pass


class Unauthorized(ProviderError):
    pass


class ServiceUnavailable(ProviderError):
    pass


class CompletionService(Protocol):
    async def complete(
        self, prompt: str, temperature: float, top_p: float, max_tokens: int = DEFAULT_MAX_TOKENS
    ) -> str:
        ...


def translate_provider_error(exc: Exception) -> ProviderError:
    """Map a Google API exception onto the provider error taxonomy."""
    if isinstance(exc, google_exceptions.ResourceExhausted):
        return RateLimited("Rate limit exceeded. Please try again later.")
    if isinstance(exc, (google_exceptions.Unauthenticated, google_exceptions.PermissionDenied)):
        return Unauthorized("Invalid API key. Please check your Google API key.")
    if isinstance(
        exc,
        (
            google_exceptions.ServiceUnavailable,
            google_exceptions.InternalServerError,
            google_exceptions.DeadlineExceeded,
        ),
    ):
        return ServiceUnavailable("The model service is temporarily unavailable. Please try again.")
    return ProviderError(f"Model API error: {getattr(exc, 'message', None) or exc}")


class GeminiCompletionClient:
    """Gemini-backed completion service."""

    def __init__(
        self,
        model_name: str,
        api_key: Optional[str] = None,
        timeout_seconds: float = 60.0,
    ):
        if api_key:
            genai.configure(api_key=api_key)
        self.model_name = model_name
        self.timeout_seconds = timeout_seconds
        self.model = genai.GenerativeModel(model_name)

    async def complete(
        self, prompt: str, temperature: float, top_p: float, max_tokens: int = DEFAULT_MAX_TOKENS
    ) -> str:
        """Generate one completion; raises a ProviderError subclass on failure."""
        config = genai.types.GenerationConfig(
            temperature=temperature,
            top_p=top_p,
            max_output_tokens=max_tokens,
        )
        try:
            resp = await self.model.generate_content_async(
                prompt,
                generation_config=config,
                request_options={"timeout": self.timeout_seconds},
            )
        except google_exceptions.GoogleAPIError as e:
            raise translate_provider_error(e) from e

        try:
            return resp.text or ""
        except ValueError:
            # No text part, e.g. the candidate was blocked
            logger.info("Model %s returned no text for temperature=%s top_p=%s", self.model_name, temperature, top_p)
            return ""
