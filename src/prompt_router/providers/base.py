"""
Abstract base handler for upstream AI providers.

Each provider owns exactly one wire schema in each direction: building its
native request from a prompt plus GenerationParameters, and parsing its
native success and error payloads back into the normalized shapes. Handlers
hold no credentials or connections; the Dispatcher passes the provider's
ProviderConfig in and performs the HTTP call itself.
"""

import math
import re
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

import structlog

from prompt_router.models.enums import ProviderId
from prompt_router.models.llm_models import GenerationParameters, NormalizedResponse, TokenUsage
from prompt_router.models.routing_models import ProviderConfig
from prompt_router.providers.exceptions import (
    AuthenticationError,
    ModelNotFoundError,
    ProviderAPIError,
    RateLimitError,
    RouterError,
)


logger = structlog.get_logger(__name__)

DEFAULT_MAX_TOKENS = 1000
DEFAULT_TEMPERATURE = 0.7
DEFAULT_TOP_P = 0.8
DEFAULT_TOP_K = 10


def _as_int(value: Any) -> int:
    """Coerce a token counter to int, treating missing or junk values as 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(value, 0)
    if isinstance(value, float):
        return max(int(value), 0) if math.isfinite(value) else 0
    return 0


def parse_retry_after(value: Optional[str]) -> Optional[int]:
    """
    Parse a Retry-After header given in delta-seconds.

    HTTP-date values and garbage return None so the caller applies its default.
    """
    if value is None:
        return None
    try:
        seconds = int(float(value.strip()))
    except (OverflowError, TypeError, ValueError):
        return None
    return seconds if seconds >= 0 else None


class BaseProviderHandler(ABC):
    """
    Abstract base class for provider handlers.

    Responsibilities:
    - Build the provider endpoint URL and auth headers
    - Translate prompt + GenerationParameters into the native request body
      (provider defaults are applied here and only here)
    - Parse a native success payload into NormalizedResponse
    - Map a non-2xx response into exactly one RouterError subclass

    Does NOT handle:
    - HTTP transport, timeouts or retries (that's the Dispatcher's job)
    - Choosing the target (that's the classifier and RoutingPolicy)
    """

    provider_id: ProviderId
    model_pattern: re.Pattern
    available_models: tuple[str, ...] = ()
    probe_model: str

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(provider={self.provider_id.value})"

    def matches_model(self, model: str) -> bool:
        """Check the provider's model naming convention."""
        return bool(self.model_pattern.match(model))

    @abstractmethod
    def build_url(self, config: ProviderConfig, model: str) -> str:
        """Full endpoint URL for a generation call."""

    def build_headers(self, config: ProviderConfig) -> Dict[str, str]:
        """Auth and content headers. Bearer auth unless overridden."""
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {config.api_key}",
        }

    @abstractmethod
    def translate_request(
        self, prompt: str, model: str, params: GenerationParameters
    ) -> Dict[str, Any]:
        """Build the provider's native JSON request body."""

    @abstractmethod
    def parse_response(self, data: Mapping[str, Any], model: str) -> NormalizedResponse:
        """
        Parse the provider's native success payload.

        Must populate text, usage, provider_metadata and timestamp even when
        the payload omits the corresponding fields.
        """

    def extract_error_message(self, body: Any, fallback: str) -> str:
        """
        Pull the provider-reported message out of an error body.

        Looks at error.message, then message, then a string error field.
        """
        if isinstance(body, Mapping):
            error = body.get("error")
            if isinstance(error, Mapping) and error.get("message"):
                return str(error["message"])
            if body.get("message"):
                return str(body["message"])
            if isinstance(error, str) and error:
                return error
        return fallback

    def parse_error(
        self,
        status_code: int,
        body: Any,
        headers: Mapping[str, str],
        model: str,
        raw_text: str = "",
    ) -> RouterError:
        """
        Map an upstream HTTP error response to a RouterError.

        The status table is shared by every provider:
        401 -> authentication, 429 -> rate limit, 404 -> model not found,
        anything else -> API error with the upstream status and message.
        """
        upstream_message = self.extract_error_message(body, raw_text or f"HTTP {status_code}")
        message = f"{self.provider_id.value} API Error ({status_code}): {upstream_message}"
        common = {
            "provider": self.provider_id,
            "model": model,
            "status_code": status_code,
            "details": {"upstream_message": upstream_message},
        }

        if status_code == 401:
            return AuthenticationError(message, **common)
        if status_code == 429:
            retry_after = parse_retry_after(headers.get("retry-after"))
            return RateLimitError(message, retry_after=retry_after, **common)
        if status_code == 404:
            return ModelNotFoundError(message, **common)
        return ProviderAPIError(message, **common)

    def _build_response(
        self,
        model: str,
        text: Any,
        prompt_tokens: Any = 0,
        completion_tokens: Any = 0,
        total_tokens: Any = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> NormalizedResponse:
        prompt_count = _as_int(prompt_tokens)
        completion_count = _as_int(completion_tokens)
        total_count = _as_int(total_tokens) if total_tokens is not None else prompt_count + completion_count
        return NormalizedResponse(
            provider=self.provider_id,
            model=model,
            text=text if isinstance(text, str) else "",
            usage=TokenUsage(
                prompt_tokens=prompt_count,
                completion_tokens=completion_count,
                total_tokens=total_count,
            ),
            provider_metadata=metadata or {},
            timestamp=datetime.now(timezone.utc),
        )
