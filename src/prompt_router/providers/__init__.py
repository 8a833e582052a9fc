"""
Provider handler abstraction and implementations.

Components:
- BaseProviderHandler: Abstract base class for provider handlers
- OpenAIHandler, AnthropicHandler, GoogleHandler, GroqHandler: one wire schema each
- PROVIDER_HANDLERS: lookup keyed on ProviderId used by the Dispatcher
- exceptions: normalized error taxonomy
"""

from prompt_router.models.enums import ProviderId
from prompt_router.providers.anthropic import AnthropicHandler
from prompt_router.providers.base import BaseProviderHandler
from prompt_router.providers.exceptions import (
    AuthenticationError,
    ConfigError,
    ModelNotFoundError,
    PromptValidationError,
    ProviderAPIError,
    ProviderNetworkError,
    ProviderTimeoutError,
    ProviderUnavailableError,
    RateLimitError,
    RouterError,
)
from prompt_router.providers.google import GoogleHandler
from prompt_router.providers.groq import GroqHandler
from prompt_router.providers.openai import OpenAIHandler

PROVIDER_HANDLERS: dict[ProviderId, BaseProviderHandler] = {
    handler.provider_id: handler
    for handler in (OpenAIHandler(), AnthropicHandler(), GoogleHandler(), GroqHandler())
}

__all__ = [
    "PROVIDER_HANDLERS",
    "BaseProviderHandler",
    "OpenAIHandler",
    "AnthropicHandler",
    "GoogleHandler",
    "GroqHandler",
    "RouterError",
    "PromptValidationError",
    "AuthenticationError",
    "RateLimitError",
    "ModelNotFoundError",
    "ProviderUnavailableError",
    "ProviderNetworkError",
    "ProviderTimeoutError",
    "ProviderAPIError",
    "ConfigError",
]
