"""
Routing data models.

RoutingPolicy is built once at startup and is read-only afterwards.
ClassificationResult and RoutingDecision are created per request.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from prompt_router.models.enums import Category, ProviderId
from prompt_router.models.llm_models import NormalizedResponse


class ProviderTarget(BaseModel):
    """A resolved (provider, model) pair a request will be sent to."""

    model_config = ConfigDict(frozen=True)

    provider: ProviderId = Field(..., description="Provider identifier")
    model: str = Field(..., min_length=1, description="Provider-specific model name")

    def __str__(self) -> str:
        return f"{self.provider.value}/{self.model}"


class ProviderConfig(BaseModel):
    """Credentials and endpoint for one provider."""

    model_config = ConfigDict(frozen=True)

    api_key: Optional[str] = None
    base_url: Optional[str] = None
    organization: Optional[str] = None

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key) and bool(self.base_url)


class KeywordBonus(BaseModel):
    """
    One contextual scoring rule applied independently of configured keywords.

    `substrings` triggers on plain containment; `words` triggers on a
    whole-word match of any listed word. Exactly one of the two is set.
    """

    model_config = ConfigDict(frozen=True)

    category: Category
    points: int = Field(..., ge=1)
    substrings: tuple[str, ...] = ()
    words: tuple[str, ...] = ()


DEFAULT_CONTEXTUAL_BONUSES: tuple[KeywordBonus, ...] = (
    KeywordBonus(category=Category.CODING, points=2, substrings=("error", "bug", "fix")),
    KeywordBonus(
        category=Category.CODING,
        points=3,
        words=("function", "class", "method", "variable", "array", "object"),
    ),
    KeywordBonus(category=Category.REASONING, points=2, substrings=("why", "how", "explain")),
    KeywordBonus(
        category=Category.REASONING,
        points=2,
        words=("because", "therefore", "thus", "hence", "consequently"),
    ),
    KeywordBonus(category=Category.CREATIVE, points=3, substrings=("story", "creative", "imagine")),
    KeywordBonus(
        category=Category.CREATIVE,
        points=2,
        words=("write", "create", "generate", "compose", "design"),
    ),
    KeywordBonus(category=Category.FAST, points=3, substrings=("quick", "brief", "short")),
)


class RoutingPolicy(BaseModel):
    """
    Static routing configuration.

    Categories missing from `targets` route to `default_target`.
    """

    model_config = ConfigDict(frozen=True)

    keywords: dict[Category, tuple[str, ...]] = Field(default_factory=dict)
    targets: dict[Category, ProviderTarget] = Field(default_factory=dict)
    default_target: ProviderTarget
    contextual_bonuses: tuple[KeywordBonus, ...] = DEFAULT_CONTEXTUAL_BONUSES

    def keywords_for(self, category: Category) -> tuple[str, ...]:
        return self.keywords.get(category, ())

    def target_for(self, category: Category) -> ProviderTarget:
        return self.targets.get(category, self.default_target)

    @property
    def total_keywords(self) -> int:
        return sum(len(words) for words in self.keywords.values())


class ClassificationResult(BaseModel):
    """Outcome of scoring a single prompt."""

    model_config = ConfigDict(frozen=True)

    category: Category
    confidence: float = Field(..., ge=0.1, le=1.0)
    reason: str
    normalized_prompt: str


class RoutingDecision(BaseModel):
    """
    Resolved target plus the routing metadata returned to the caller.

    `category` is "forced" when the caller supplied an explicit override.
    """

    model_config = ConfigDict(frozen=True)

    target: ProviderTarget
    category: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    reason: str
    forced: bool = False


class RoutingSummary(BaseModel):
    """Snapshot of routing configuration for the query surface."""

    available_providers: list[ProviderId]
    configured_categories: list[Category]
    default_target: ProviderTarget
    total_keywords: int = Field(..., ge=0)


class ChatResult(BaseModel):
    """Dispatcher output for one chat request: the response plus how it was routed."""

    model_config = ConfigDict(frozen=True)

    response: NormalizedResponse
    routing: RoutingDecision
    response_time_ms: int = Field(..., ge=0)

