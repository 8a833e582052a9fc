"""
FastAPI API routes and endpoints.

- routes.py: /api/chat endpoints (chat, models, test-provider, health, stats)
- dependencies.py: Dependency injection for settings, routing policy and dispatcher
- models.py: API-specific request/response models
- error_handlers.py: Exception handlers for structured error responses
- middleware.py: Request id tracing
"""

from prompt_router.api import dependencies, error_handlers, models
from prompt_router.api.routes import router

__all__ = [
    "router",
    "dependencies",
    "error_handlers",
    "models",
]
