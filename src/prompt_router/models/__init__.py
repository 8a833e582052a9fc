"""
Pydantic data models for the prompt router.

Includes:
- Enums (Category, ProviderId, ErrorKind)
- Routing models (RoutingPolicy, ProviderTarget, ClassificationResult, RoutingDecision)
- LLM models (GenerationParameters, NormalizedResponse, NormalizedError)
"""

from prompt_router.models.enums import Category, ErrorKind, ProviderId
from prompt_router.models.llm_models import (
    GenerationParameters,
    HealthStatus,
    NormalizedError,
    NormalizedResponse,
    ProviderProbeResult,
    TokenUsage,
)
from prompt_router.models.routing_models import (
    DEFAULT_CONTEXTUAL_BONUSES,
    ChatResult,
    ClassificationResult,
    KeywordBonus,
    ProviderConfig,
    ProviderTarget,
    RoutingDecision,
    RoutingPolicy,
    RoutingSummary,
)

__all__ = [
    # Enums
    "Category",
    "ErrorKind",
    "ProviderId",
    # Routing models
    "DEFAULT_CONTEXTUAL_BONUSES",
    "ClassificationResult",
    "KeywordBonus",
    "ProviderConfig",
    "ProviderTarget",
    "RoutingDecision",
    "RoutingPolicy",
    "RoutingSummary",
    "ChatResult",
    # LLM models
    "GenerationParameters",
    "NormalizedError",
    "NormalizedResponse",
    "TokenUsage",
    "ProviderProbeResult",
    "HealthStatus",
]
