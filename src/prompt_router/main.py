"""
FastAPI application entry point for the prompt router.
"""

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from prompt_router.api.dependencies import get_dispatcher
from prompt_router.api.error_handlers import EXCEPTION_HANDLERS
from prompt_router.api.middleware import RequestTracingMiddleware
from prompt_router.api.routes import router as chat_router
from prompt_router.config import parse_list, settings, validate_startup_config
from prompt_router.logging_config import configure_logging

# Logging is configured before any module-level logger emits
configure_logging(settings.LOG_LEVEL, settings.ENVIRONMENT)
logger = structlog.get_logger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    description="Classifies prompts and routes them to the best-suited AI provider",
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Binds a request id to every log line emitted while handling a request
app.add_middleware(RequestTracingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=parse_list(settings.ALLOWED_ORIGINS),
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

for exc_class, handler in EXCEPTION_HANDLERS.items():
    app.add_exception_handler(exc_class, handler)

app.include_router(chat_router, tags=["chat"])


@app.on_event("startup")
async def startup():
    """Validate configuration; a ConfigError aborts startup."""
    logger.info(
        "Application startup",
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
    )
    try:
        validate_startup_config(settings)
    except Exception as exc:
        logger.critical("Invalid configuration, refusing to start", error=str(exc))
        raise

    dispatcher = get_dispatcher()
    logger.info(
        "Application startup complete",
        available_providers=[provider.value for provider in dispatcher.list_available_providers()],
        default_target=str(dispatcher.policy.default_target),
    )


@app.on_event("shutdown")
async def shutdown():
    """Application shutdown - close the shared HTTP client."""
    logger.info("Application shutdown")
    await get_dispatcher().close()


if settings.PROMETHEUS_ENABLED:
    Instrumentator().instrument(app).expose(app)


@app.get("/")
async def root():
    """Root endpoint with API documentation links."""
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "chat": "/api/chat",
        "health": "/api/chat/health",
        "metrics": "/metrics" if settings.PROMETHEUS_ENABLED else None,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "prompt_router.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
