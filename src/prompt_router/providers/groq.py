"""
Groq handler.

Groq serves an OpenAI-compatible chat-completions API, so the wire schema is
inherited unchanged; only the model naming convention, the model list and the
absence of an organization header differ.
"""

import re
from typing import Dict

from prompt_router.models.enums import ProviderId
from prompt_router.models.routing_models import ProviderConfig
from prompt_router.providers.base import BaseProviderHandler
from prompt_router.providers.openai import OpenAIHandler


class GroqHandler(OpenAIHandler):
    """Handler for Groq's OpenAI-compatible endpoint."""

    provider_id = ProviderId.GROQ
    model_pattern = re.compile(r"^(llama-|mixtral-)", re.IGNORECASE)
    available_models = ("llama-3.3-70b-versatile", "mixtral-8x7b-32768")
    probe_model = "llama-3.3-70b-versatile"

    def build_headers(self, config: ProviderConfig) -> Dict[str, str]:
        return BaseProviderHandler.build_headers(self, config)
