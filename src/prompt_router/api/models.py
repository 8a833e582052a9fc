"""
API-specific request and response models for FastAPI endpoints.

Field names on the wire are camelCase; models accept either spelling.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from prompt_router.models.enums import ProviderId
from prompt_router.models.llm_models import GenerationParameters, HealthStatus, NormalizedError
from prompt_router.models.routing_models import ChatResult


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ChatOptions(BaseModel):
    """Generation options and optional routing override."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    max_tokens: int = Field(default=1000, ge=1, le=4000, alias="maxTokens")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    top_p: float = Field(default=0.8, ge=0.0, le=1.0, alias="topP")
    top_k: int = Field(default=10, ge=1, le=100, alias="topK")
    force_provider: Optional[ProviderId] = Field(default=None, alias="forceProvider")
    force_model: Optional[str] = Field(default=None, min_length=1, alias="forceModel")

    def to_generation_parameters(self) -> GenerationParameters:
        return GenerationParameters(
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            top_p=self.top_p,
            top_k=self.top_k,
        )


class ChatRequest(BaseModel):
    """Request body for POST /api/chat."""

    prompt: str = Field(..., min_length=1, max_length=10000)
    options: ChatOptions = Field(default_factory=ChatOptions)


class ProviderTestRequest(BaseModel):
    """Request body for POST /api/chat/test-provider."""

    provider: ProviderId


class RoutingInfo(BaseModel):
    provider: ProviderId
    model: str
    category: str
    confidence: float
    reason: str


class UsageInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    prompt_tokens: int = Field(alias="promptTokens")
    completion_tokens: int = Field(alias="completionTokens")
    total_tokens: int = Field(alias="totalTokens")


class ResponseMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    response_time: int = Field(alias="responseTime", description="Upstream time in ms")
    timestamp: datetime
    request_id: Optional[str] = Field(default=None, alias="requestId")
    provider_metadata: dict[str, Any] = Field(default_factory=dict, alias="providerMetadata")


class ChatData(BaseModel):
    response: str
    routing: RoutingInfo
    usage: UsageInfo
    metadata: ResponseMetadata

    @classmethod
    def from_result(cls, result: ChatResult, request_id: Optional[str] = None) -> "ChatData":
        response = result.response
        return cls(
            response=response.text,
            routing=RoutingInfo(
                provider=response.provider,
                model=response.model,
                category=result.routing.category,
                confidence=result.routing.confidence,
                reason=result.routing.reason,
            ),
            usage=UsageInfo(
                prompt_tokens=response.usage.prompt_tokens,
                completion_tokens=response.usage.completion_tokens,
                total_tokens=response.usage.total_tokens,
            ),
            metadata=ResponseMetadata(
                response_time=result.response_time_ms,
                timestamp=response.timestamp,
                request_id=request_id,
                provider_metadata=response.provider_metadata,
            ),
        )


class ChatResponse(BaseModel):
    """Success envelope for POST /api/chat."""

    success: bool = True
    data: ChatData


class RoutingOverview(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    categories: list[str]
    default_model: dict[str, str] = Field(alias="defaultModel")
    total_keywords: int = Field(alias="totalKeywords")


class ModelsData(BaseModel):
    providers: list[ProviderId]
    models: dict[str, list[str]]
    routing: RoutingOverview


class ModelsResponse(BaseModel):
    success: bool = True
    data: ModelsData


class BasicHealth(BaseModel):
    """Summary health; extra fields are rejected so a HealthStatus payload never validates as this."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    status: str = Field(examples=["healthy", "unhealthy"])
    available_providers: int = Field(alias="availableProviders")
    timestamp: datetime = Field(default_factory=_utcnow)


class HealthResponse(BaseModel):
    """Response for GET /api/chat/health (basic or detailed)."""

    success: bool = True
    data: BasicHealth | HealthStatus


class ErrorResponse(BaseModel):
    """Standard error response format."""

    success: bool = False
    error: NormalizedError
    timestamp: datetime = Field(default_factory=_utcnow)
