"""
OpenAI chat-completions handler.

POST {base_url}/chat/completions with payload:
{
    "model": "gpt-4o",
    "messages": [{"role": "user", "content": "..."}],
    "max_tokens": 1000,
    "temperature": 0.7,
    "stream": false
}

Response:
{
    "id": "chatcmpl-...",
    "created": 1700000000,
    "choices": [{"message": {"content": "..."}, "finish_reason": "stop"}],
    "usage": {"prompt_tokens": 12, "completion_tokens": 40, "total_tokens": 52}
}
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


class OpenAIHandler(BaseProviderHandler):
    """Handler for the OpenAI chat-completions schema."""

    provider_id = ProviderId.OPENAI
    model_pattern = re.compile(r"^(gpt-|o1-|o3-)", re.IGNORECASE)
    available_models = ("gpt-4o", "gpt-4.5-preview", "o3-mini", "o1-preview")
    probe_model = "gpt-4o"

    def build_url(self, config: ProviderConfig, model: str) -> str:
        return f"{config.base_url.rstrip('/')}/chat/completions"

    def build_headers(self, config: ProviderConfig) -> Dict[str, str]:
        headers = super().build_headers(config)
        if config.organization:
            headers["OpenAI-Organization"] = config.organization
        return headers

    def translate_request(
        self, prompt: str, model: str, params: GenerationParameters
    ) -> Dict[str, Any]:
        return {
            "model": model,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": params.max_tokens if params.max_tokens is not None else DEFAULT_MAX_TOKENS,
            "temperature": params.temperature if params.temperature is not None else DEFAULT_TEMPERATURE,
            "stream": False,
        }

    def parse_response(self, data: Mapping[str, Any], model: str) -> NormalizedResponse:
        choices = data.get("choices") or []
        first = choices[0] if choices and isinstance(choices[0], Mapping) else {}
        message = first.get("message") or {}
        usage = data.get("usage") or {}

        return self._build_response(
            model=model,
            text=message.get("content") if isinstance(message, Mapping) else "",
            prompt_tokens=usage.get("prompt_tokens", 0),
            completion_tokens=usage.get("completion_tokens", 0),
            total_tokens=usage.get("total_tokens", 0),
            metadata={
                "id": data.get("id"),
                "created": data.get("created"),
                "finish_reason": first.get("finish_reason"),
            },
        )
