"""
Chat API routes.

POST /api/chat routes a prompt (classified or forced) to a provider and
returns the normalized response; the remaining endpoints expose the
dispatcher's query surface.
"""

import platform
import time
from datetime import datetime, timezone

import structlog
from fastapi import APIRouter, Depends, Query, Request, status
from prometheus_client import Counter, Histogram

from prompt_router.api.dependencies import get_dispatcher
from prompt_router.api.models import (
    BasicHealth,
    ChatData,
    ChatRequest,
    ChatResponse,
    HealthResponse,
    ModelsData,
    ModelsResponse,
    ProviderTestRequest,
    RoutingOverview,
)
from prompt_router.dispatcher import Dispatcher
from prompt_router.models.llm_models import ProviderProbeResult
from prompt_router.routing.prompt_guard import validate_prompt

logger = structlog.get_logger(__name__)

# Prometheus metrics
chat_requests_total = Counter(
    "chat_requests_total",
    "Total chat requests",
    ["status"],
)

chat_duration_seconds = Histogram(
    "chat_duration_seconds",
    "Chat request duration in seconds (routing + upstream)",
)

STARTED_AT = time.time()

router = APIRouter(prefix="/api/chat")


@router.post(
    "",
    response_model=ChatResponse,
    response_model_by_alias=True,
    status_code=status.HTTP_200_OK,
    summary="Route a prompt to the best-suited model",
    responses={
        200: {"description": "Provider responded"},
        400: {"description": "Invalid prompt, options or override"},
        401: {"description": "Upstream rejected credentials"},
        404: {"description": "Upstream model not found"},
        429: {"description": "Upstream rate limit (see Retry-After)"},
        503: {"description": "Provider not configured"},
    },
)
async def chat(
    body: ChatRequest,
    request: Request,
    dispatcher: Dispatcher = Depends(get_dispatcher),
) -> ChatResponse:
    start_time = time.time()
    prompt = validate_prompt(body.prompt)
    options = body.options

    try:
        result = await dispatcher.handle_chat(
            prompt,
            params=options.to_generation_parameters(),
            force_provider=options.force_provider.value if options.force_provider else None,
            force_model=options.force_model,
        )
    except Exception:
        chat_requests_total.labels(status="error").inc()
        raise

    chat_requests_total.labels(status="success").inc()
    chat_duration_seconds.observe(time.time() - start_time)

    logger.info(
        "Chat request completed",
        provider=result.response.provider.value,
        model=result.response.model,
        category=result.routing.category,
        response_time_ms=result.response_time_ms,
        total_tokens=result.response.usage.total_tokens,
    )

    request_id = getattr(request.state, "request_id", None)
    return ChatResponse(data=ChatData.from_result(result, request_id=request_id))


@router.get(
    "/models",
    response_model=ModelsResponse,
    response_model_by_alias=True,
    summary="Available providers, their models and routing configuration",
)
async def list_models(dispatcher: Dispatcher = Depends(get_dispatcher)) -> ModelsResponse:
    providers = dispatcher.list_available_providers()
    summary = dispatcher.get_routing_summary()

    return ModelsResponse(
        data=ModelsData(
            providers=providers,
            models={provider.value: dispatcher.list_available_models(provider) for provider in providers},
            routing=RoutingOverview(
                categories=[category.value for category in summary.configured_categories],
                default_model={
                    "provider": summary.default_target.provider.value,
                    "model": summary.default_target.model,
                },
                total_keywords=summary.total_keywords,
            ),
        )
    )


@router.post(
    "/test-provider",
    summary="Probe a single provider with a tiny request",
)
async def test_provider(
    body: ProviderTestRequest,
    dispatcher: Dispatcher = Depends(get_dispatcher),
) -> dict:
    logger.info("Testing provider", provider=body.provider.value)
    result: ProviderProbeResult = await dispatcher.test_provider(body.provider)
    return {"success": True, "data": result.model_dump(mode="json", exclude_none=True)}


@router.get(
    "/health",
    response_model=HealthResponse,
    response_model_by_alias=True,
    summary="Service health (detailed=true probes every configured provider)",
)
async def health(
    detailed: bool = Query(default=False),
    dispatcher: Dispatcher = Depends(get_dispatcher),
) -> HealthResponse:
    if detailed:
        return HealthResponse(data=await dispatcher.get_health_status())

    available = dispatcher.list_available_providers()
    return HealthResponse(
        data=BasicHealth(
            status="healthy" if available else "unhealthy",
            available_providers=len(available),
        )
    )


@router.get("/stats", summary="Routing configuration and process statistics")
async def stats(dispatcher: Dispatcher = Depends(get_dispatcher)) -> dict:
    summary = dispatcher.get_routing_summary()
    return {
        "success": True,
        "data": {
            "routing": summary.model_dump(mode="json"),
            "server": {
                "uptime": round(time.time() - STARTED_AT, 3),
                "python": platform.python_version(),
                "platform": platform.platform(),
            },
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    }
