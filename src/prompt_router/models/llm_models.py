"""
Provider-neutral request/response models.

These are the only shapes that cross the dispatcher boundary. Provider
handlers translate GenerationParameters into their own wire format and parse
their own payloads back into NormalizedResponse.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from prompt_router.models.enums import ErrorKind, ProviderId


class GenerationParameters(BaseModel):
    """
    Sampling parameters supplied by the caller.

    All fields are optional; provider defaults are applied at translation
    time by each handler, never here.
    """

    model_config = ConfigDict(frozen=True)

    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)
    max_tokens: Optional[int] = Field(default=None, ge=1, le=4000)
    top_p: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    top_k: Optional[int] = Field(default=None, ge=1, le=100)


class TokenUsage(BaseModel):
    """Token counters; absent provider fields are reported as 0."""

    model_config = ConfigDict(frozen=True)

    prompt_tokens: int = Field(default=0, ge=0)
    completion_tokens: int = Field(default=0, ge=0)
    total_tokens: int = Field(default=0, ge=0)


class NormalizedResponse(BaseModel):
    """Uniform successful response for every provider."""

    model_config = ConfigDict(frozen=True)

    provider: ProviderId
    model: str
    text: str = ""
    usage: TokenUsage = Field(default_factory=TokenUsage)
    provider_metadata: Dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class NormalizedError(BaseModel):
    """Uniform error payload for every failure kind."""

    model_config = ConfigDict(frozen=True)

    kind: ErrorKind
    message: str
    provider: Optional[ProviderId] = None
    model: Optional[str] = None
    http_status: Optional[int] = None
    retry_after_seconds: Optional[int] = None
    details: Dict[str, Any] = Field(default_factory=dict)


class ProviderProbeResult(BaseModel):
    """Outcome of a single health probe against one provider."""

    provider: ProviderId
    status: str = Field(..., description="available | unavailable")
    model: Optional[str] = None
    latency_ms: Optional[int] = Field(default=None, ge=0)
    error: Optional[str] = None
    kind: Optional[ErrorKind] = None
    checked_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class HealthStatus(BaseModel):
    """Aggregate of concurrent provider probes."""

    status: str = Field(..., description="healthy | unhealthy")
    available_providers: int = Field(..., ge=0)
    total_providers: int = Field(..., ge=0)
    providers: list[ProviderProbeResult] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
