"""
Anthropic messages handler.

POST {base_url}/v1/messages with headers x-api-key and anthropic-version.
Response text is taken from the first content block; total tokens are
input_tokens + output_tokens since the API does not report a total.
"""

import re
from typing import Any, Dict, Mapping

from prompt_router.models.enums import ProviderId
from prompt_router.models.llm_models import GenerationParameters, NormalizedResponse
from prompt_router.models.routing_models import ProviderConfig
from prompt_router.providers.base import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_TEMPERATURE,
    BaseProviderHandler,
)


ANTHROPIC_VERSION = "2023-06-01"


class AnthropicHandler(BaseProviderHandler):
    """Handler for the Anthropic messages schema."""

    provider_id = ProviderId.ANTHROPIC
    model_pattern = re.compile(r"^claude-", re.IGNORECASE)
    available_models = ("claude-3.5-sonnet", "claude-4-opus", "claude-4-sonnet")
    probe_model = "claude-3.5-sonnet"

    def build_url(self, config: ProviderConfig, model: str) -> str:
        return f"{config.base_url.rstrip('/')}/v1/messages"

    def build_headers(self, config: ProviderConfig) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-api-key": config.api_key or "",
            "anthropic-version": ANTHROPIC_VERSION,
        }

    def translate_request(
        self, prompt: str, model: str, params: GenerationParameters
    ) -> Dict[str, Any]:
        return {
            "model": model,
            "max_tokens": params.max_tokens if params.max_tokens is not None else DEFAULT_MAX_TOKENS,
            "temperature": params.temperature if params.temperature is not None else DEFAULT_TEMPERATURE,
            "messages": [{"role": "user", "content": prompt}],
        }

    def parse_response(self, data: Mapping[str, Any], model: str) -> NormalizedResponse:
        content = data.get("content") or []
        first = content[0] if content and isinstance(content[0], Mapping) else {}
        usage = data.get("usage") or {}

        return self._build_response(
            model=model,
            text=first.get("text"),
            prompt_tokens=usage.get("input_tokens", 0),
            completion_tokens=usage.get("output_tokens", 0),
            metadata={
                "id": data.get("id"),
                "role": data.get("role"),
                "stop_reason": data.get("stop_reason"),
            },
        )
