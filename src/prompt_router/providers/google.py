"""
Google Gemini generateContent handler.

POST {base_url}/v1beta/models/{model}:generateContent?key=API_KEY with payload:
{
    "contents": [{"parts": [{"text": "..."}]}],
    "generationConfig": {
        "temperature": 0.7,
        "maxOutputTokens": 1000,
        "topP": 0.8,
        "topK": 10
    }
}

Google is the only provider that honours top_p/top_k; the API key travels
in the query string instead of a header.
"""

import re
from typing import Any, Dict, Mapping
from urllib.parse import quote

from prompt_router.models.enums import ProviderId
from prompt_router.models.llm_models import GenerationParameters, NormalizedResponse
from prompt_router.models.routing_models import ProviderConfig
from prompt_router.providers.base import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_TEMPERATURE,
    DEFAULT_TOP_K,
    DEFAULT_TOP_P,
    BaseProviderHandler,
)


class GoogleHandler(BaseProviderHandler):
    """Handler for the Gemini generateContent schema."""

    provider_id = ProviderId.GOOGLE
    model_pattern = re.compile(r"^gemini-", re.IGNORECASE)
    available_models = ("gemini-2.0-flash-exp", "gemini-2.5-pro", "gemini-1.5-pro")
    probe_model = "gemini-2.0-flash-exp"

    def build_url(self, config: ProviderConfig, model: str) -> str:
        base = config.base_url.rstrip("/")
        return f"{base}/v1beta/models/{quote(model, safe='')}:generateContent?key={config.api_key}"

    def build_headers(self, config: ProviderConfig) -> Dict[str, str]:
        return {"Content-Type": "application/json"}

    def translate_request(
        self, prompt: str, model: str, params: GenerationParameters
    ) -> Dict[str, Any]:
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": params.temperature if params.temperature is not None else DEFAULT_TEMPERATURE,
                "maxOutputTokens": params.max_tokens if params.max_tokens is not None else DEFAULT_MAX_TOKENS,
                "topP": params.top_p if params.top_p is not None else DEFAULT_TOP_P,
                "topK": params.top_k if params.top_k is not None else DEFAULT_TOP_K,
            },
        }

    def parse_response(self, data: Mapping[str, Any], model: str) -> NormalizedResponse:
        candidates = data.get("candidates") or []
        candidate = candidates[0] if candidates and isinstance(candidates[0], Mapping) else {}
        content = candidate.get("content") or {}
        parts = (content.get("parts") or []) if isinstance(content, Mapping) else []
        first_part = parts[0] if parts and isinstance(parts[0], Mapping) else {}
        usage = data.get("usageMetadata") or {}

        return self._build_response(
            model=model,
            text=first_part.get("text"),
            prompt_tokens=usage.get("promptTokenCount", 0),
            completion_tokens=usage.get("candidatesTokenCount", 0),
            total_tokens=usage.get("totalTokenCount", 0),
            metadata={
                "finish_reason": candidate.get("finishReason"),
                "safety_ratings": candidate.get("safetyRatings"),
            },
        )
