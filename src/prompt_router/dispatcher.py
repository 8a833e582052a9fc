"""
Dispatcher: resolves a routing decision to a provider call and normalizes the result.

Communicates with upstream providers using an httpx AsyncClient. Supports:
- Explicit (provider, model) overrides validated before any network call
- Category -> target resolution through the RoutingPolicy
- One polymorphic handler per provider for wire translation
- Normalization of every transport, HTTP and parsing failure into one RouterError kind
- Concurrent health probing across providers
"""

import asyncio
import time
from typing import Mapping, MutableMapping, Optional, Union

import httpx
import structlog

from prompt_router.models.enums import ErrorKind, ProviderId
from prompt_router.models.llm_models import (
    GenerationParameters,
    HealthStatus,
    NormalizedResponse,
    ProviderProbeResult,
)
from prompt_router.models.routing_models import (
    ChatResult,
    ClassificationResult,
    ProviderConfig,
    ProviderTarget,
    RoutingDecision,
    RoutingPolicy,
    RoutingSummary,
)
from prompt_router.monitoring.metrics import (
    dispatch_latency_seconds,
    dispatch_requests_total,
    dispatch_tokens_total,
)
from prompt_router.providers import PROVIDER_HANDLERS, BaseProviderHandler
from prompt_router.providers.exceptions import (
    PromptValidationError,
    ProviderAPIError,
    ProviderNetworkError,
    ProviderTimeoutError,
    ProviderUnavailableError,
    RouterError,
)
from prompt_router.routing.classifier import PromptClassifier


logger = structlog.get_logger(__name__)

PROBE_PROMPT = "Hello, this is a test message."
PROBE_MAX_TOKENS = 10
FORCED_CATEGORY = "forced"
FORCED_REASON = "Forced by user request"


class Dispatcher:
    """
    Routes prompts to providers and returns NormalizedResponse objects.

    The RoutingPolicy and provider configs are read-only; each dispatch is an
    independent unit of work whose only suspension point is the HTTP call.
    Availability is re-evaluated from `provider_configs` on every call.
    """

    def __init__(
        self,
        policy: RoutingPolicy,
        provider_configs: MutableMapping[ProviderId, ProviderConfig],
        classifier: Optional[PromptClassifier] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
        handlers: Optional[Mapping[ProviderId, BaseProviderHandler]] = None,
    ):
        """
        Initialize dispatcher.

        Args:
            policy: Routing policy (keywords, category targets, default target)
            provider_configs: Per-provider API key / base URL
            classifier: Prompt classifier (built from policy if omitted)
            client: Shared httpx client; created lazily when omitted
            timeout: Per-request timeout in seconds
            handlers: Provider handler lookup (defaults to PROVIDER_HANDLERS)
        """
        self.policy = policy
        self.provider_configs = provider_configs
        self.classifier = classifier or PromptClassifier(policy)
        self.timeout = timeout
        self.handlers = dict(handlers) if handlers is not None else dict(PROVIDER_HANDLERS)
        self._client = client
        self._owns_client = client is None

        logger.info(
            "Dispatcher initialized",
            timeout=timeout,
            providers=[provider.value for provider in self.handlers],
            default_target=str(policy.default_target),
        )

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                headers={"User-Agent": "prompt-router/0.1"},
            )
            self._owns_client = True
            logger.debug("Created new httpx AsyncClient")
        return self._client

    # === Availability ===

    def is_provider_available(self, provider: ProviderId) -> bool:
        """A provider is available iff it has a handler, an API key and a base URL."""
        config = self.provider_configs.get(provider)
        return provider in self.handlers and config is not None and config.is_configured

    def list_available_providers(self) -> list[ProviderId]:
        return [provider for provider in ProviderId if self.is_provider_available(provider)]

    def list_available_models(self, provider: Union[ProviderId, str]) -> list[str]:
        """Static allow-list for a provider; empty when the provider is not available."""
        try:
            provider_id = ProviderId(provider)
        except ValueError:
            return []
        if not self.is_provider_available(provider_id):
            return []
        return list(self.handlers[provider_id].available_models)

    # === Routing ===

    def validate_override(self, provider: Union[ProviderId, str], model: str) -> ProviderTarget:
        """
        Validate a caller-supplied (provider, model) override.

        Raises:
            PromptValidationError: unknown provider or model name off the provider's pattern
            ProviderUnavailableError: provider has no credentials configured
        """
        try:
            provider_id = ProviderId(provider)
        except ValueError:
            valid = ", ".join(p.value for p in ProviderId)
            raise PromptValidationError(
                f"Invalid provider: {provider}. Must be one of: {valid}",
                details={"provider": str(provider)},
            )

        if not self.is_provider_available(provider_id):
            raise ProviderUnavailableError(
                f"Provider {provider_id.value} is not configured or missing API key",
                provider=provider_id,
                model=model,
            )

        if not model or not self.handlers[provider_id].matches_model(model):
            raise PromptValidationError(
                f"Invalid model {model} for provider {provider_id.value}",
                provider=provider_id,
                model=model,
            )

        return ProviderTarget(provider=provider_id, model=model)

    def resolve_target(self, classification: ClassificationResult) -> ProviderTarget:
        target = self.policy.target_for(classification.category)
        if classification.category not in self.policy.targets:
            logger.warning(
                "No target configured for category, using default",
                category=classification.category.value,
                default_target=str(target),
            )
        return target

    def route(
        self,
        prompt: str,
        force_provider: Optional[str] = None,
        force_model: Optional[str] = None,
    ) -> RoutingDecision:
        """
        Decide where a prompt goes.

        Classification is skipped entirely when both override fields are present.
        """
        if force_provider and force_model:
            target = self.validate_override(force_provider, force_model)
            return RoutingDecision(
                target=target,
                category=FORCED_CATEGORY,
                confidence=1.0,
                reason=FORCED_REASON,
                forced=True,
            )

        classification = self.classifier.classify(prompt)
        return RoutingDecision(
            target=self.resolve_target(classification),
            category=classification.category.value,
            confidence=classification.confidence,
            reason=classification.reason,
        )

    # === Dispatch ===

    async def dispatch(
        self,
        prompt: str,
        routing: Union[ProviderTarget, ClassificationResult, RoutingDecision],
        params: Optional[GenerationParameters] = None,
    ) -> NormalizedResponse:
        """
        Send one prompt to one provider, with a single attempt.

        Args:
            prompt: Prompt text sent verbatim to the provider
            routing: Explicit target, a classification, or a routing decision
            params: Generation parameters (provider defaults fill the gaps)

        Returns:
            NormalizedResponse

        Raises:
            RouterError: exactly one normalized kind for any failure
        """
        if isinstance(routing, ClassificationResult):
            target = self.resolve_target(routing)
        elif isinstance(routing, RoutingDecision):
            target = routing.target
        else:
            target = routing
        params = params or GenerationParameters()

        handler = self.handlers.get(target.provider)
        config = self.provider_configs.get(target.provider)
        if handler is None or config is None or not config.is_configured:
            dispatch_requests_total.labels(
                provider=target.provider.value, outcome=ErrorKind.PROVIDER_UNAVAILABLE.value
            ).inc()
            raise ProviderUnavailableError(
                f"Provider {target.provider.value} is not available or not configured",
                provider=target.provider,
                model=target.model,
            )

        url = handler.build_url(config, target.model)
        body = handler.translate_request(prompt, target.model, params)
        headers = handler.build_headers(config)

        logger.info(
            "Dispatching request",
            provider=target.provider.value,
            model=target.model,
            prompt_length=len(prompt),
        )

        start_time = time.perf_counter()
        try:
            response = await self._send(handler, target, url, headers, body)
        except RouterError as exc:
            self._record_failure(target, exc, start_time)
            raise

        latency_ms = int((time.perf_counter() - start_time) * 1000)
        dispatch_requests_total.labels(provider=target.provider.value, outcome="success").inc()
        dispatch_latency_seconds.labels(
            provider=target.provider.value, success="true"
        ).observe(latency_ms / 1000.0)
        dispatch_tokens_total.labels(
            provider=target.provider.value, token_type="prompt"
        ).inc(response.usage.prompt_tokens)
        dispatch_tokens_total.labels(
            provider=target.provider.value, token_type="completion"
        ).inc(response.usage.completion_tokens)

        logger.info(
            "Dispatch successful",
            provider=target.provider.value,
            model=target.model,
            latency_ms=latency_ms,
            prompt_tokens=response.usage.prompt_tokens,
            completion_tokens=response.usage.completion_tokens,
        )
        return response

    async def _send(
        self,
        handler: BaseProviderHandler,
        target: ProviderTarget,
        url: str,
        headers: dict[str, str],
        body: dict,
    ) -> NormalizedResponse:
        provider, model = target.provider, target.model
        try:
            client = self._get_client()
            # httpx timeouts apply per phase; wait_for bounds the whole call
            response = await asyncio.wait_for(
                client.post(url, json=body, headers=headers, timeout=self.timeout),
                timeout=self.timeout,
            )
        except (httpx.TimeoutException, asyncio.TimeoutError) as e:
            raise ProviderTimeoutError(
                f"Request timeout for {provider.value} ({self.timeout}s)",
                provider=provider,
                model=model,
                details={"timeout": self.timeout, "error_type": type(e).__name__},
            ) from e
        except (httpx.RequestError, httpx.InvalidURL) as e:
            raise ProviderNetworkError(
                f"Network error for {provider.value}: {e}",
                provider=provider,
                model=model,
                details={"error_type": type(e).__name__},
            ) from e

        if not response.is_success:
            try:
                error_body = response.json()
            except ValueError:
                error_body = None
            raise handler.parse_error(
                response.status_code,
                error_body,
                response.headers,
                model,
                raw_text=response.text,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderAPIError(
                f"Invalid JSON response from {provider.value}",
                provider=provider,
                model=model,
                status_code=response.status_code,
                details={"parse_error": str(e)},
            ) from e

        if not isinstance(data, Mapping):
            raise ProviderAPIError(
                f"Unexpected response shape from {provider.value}",
                provider=provider,
                model=model,
                status_code=response.status_code,
                details={"payload_type": type(data).__name__},
            )

        try:
            return handler.parse_response(data, model)
        except (AttributeError, IndexError, KeyError, OverflowError, TypeError, ValueError) as e:
            raise ProviderAPIError(
                f"Malformed response from {provider.value}: {e}",
                provider=provider,
                model=model,
                status_code=response.status_code,
                details={"error_type": type(e).__name__},
            ) from e

    def _record_failure(self, target: ProviderTarget, exc: RouterError, start_time: float) -> None:
        latency = time.perf_counter() - start_time
        dispatch_requests_total.labels(provider=target.provider.value, outcome=exc.kind.value).inc()
        dispatch_latency_seconds.labels(provider=target.provider.value, success="false").observe(latency)
        logger.warning(
            "Dispatch failed",
            provider=target.provider.value,
            model=target.model,
            kind=exc.kind.value,
            status_code=exc.status_code,
            error=exc.message,
        )

    async def handle_chat(
        self,
        prompt: str,
        params: Optional[GenerationParameters] = None,
        force_provider: Optional[str] = None,
        force_model: Optional[str] = None,
    ) -> ChatResult:
        """Route and dispatch one chat request, timing the upstream call."""
        decision = self.route(prompt, force_provider, force_model)

        logger.info(
            "Routing decision",
            provider=decision.target.provider.value,
            model=decision.target.model,
            category=decision.category,
            confidence=decision.confidence,
        )

        start_time = time.perf_counter()
        response = await self.dispatch(prompt, decision, params)
        response_time_ms = int((time.perf_counter() - start_time) * 1000)

        return ChatResult(response=response, routing=decision, response_time_ms=response_time_ms)

    # === Query surface ===

    async def test_provider(self, provider: Union[ProviderId, str]) -> ProviderProbeResult:
        """
        Single cheap round-trip against a provider.

        Never raises for provider failures: the outcome is reported in the result.
        """
        try:
            provider_id = ProviderId(provider)
        except ValueError:
            raise PromptValidationError(
                f"Invalid provider: {provider}",
                details={"provider": str(provider)},
            )

        handler = self.handlers.get(provider_id)
        model = handler.probe_model if handler else None

        if not self.is_provider_available(provider_id):
            return ProviderProbeResult(
                provider=provider_id,
                status="unavailable",
                model=model,
                error=f"Provider {provider_id.value} is not configured",
                kind=ErrorKind.PROVIDER_UNAVAILABLE,
            )

        start_time = time.perf_counter()
        try:
            await self.dispatch(
                PROBE_PROMPT,
                ProviderTarget(provider=provider_id, model=model),
                GenerationParameters(max_tokens=PROBE_MAX_TOKENS),
            )
        except RouterError as exc:
            logger.warning("Provider probe failed", provider=provider_id.value, kind=exc.kind.value)
            return ProviderProbeResult(
                provider=provider_id,
                status="unavailable",
                model=model,
                error=exc.message,
                kind=exc.kind,
            )

        return ProviderProbeResult(
            provider=provider_id,
            status="available",
            model=model,
            latency_ms=int((time.perf_counter() - start_time) * 1000),
        )

    async def get_health_status(self) -> HealthStatus:
        """Probe every available provider concurrently; one failing probe never fails the whole."""
        providers = self.list_available_providers()
        outcomes = await asyncio.gather(
            *(self.test_provider(provider) for provider in providers),
            return_exceptions=True,
        )

        results: list[ProviderProbeResult] = []
        for provider, outcome in zip(providers, outcomes):
            if isinstance(outcome, ProviderProbeResult):
                results.append(outcome)
                continue
            logger.error("Provider probe crashed", provider=provider.value, error=str(outcome))
            results.append(
                ProviderProbeResult(
                    provider=provider,
                    status="unavailable",
                    error=str(outcome),
                )
            )

        available = sum(1 for result in results if result.status == "available")
        return HealthStatus(
            status="healthy" if available > 0 else "unhealthy",
            available_providers=available,
            total_providers=len(providers),
            providers=results,
        )

    def get_routing_summary(self) -> RoutingSummary:
        return RoutingSummary(
            available_providers=self.list_available_providers(),
            configured_categories=list(self.policy.targets.keys()),
            default_target=self.policy.default_target,
            total_keywords=self.policy.total_keywords,
        )

    async def close(self):
        """Close the HTTP client connection if this dispatcher created it."""
        if self._owns_client and self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            logger.debug("Closed dispatcher HTTP client")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
