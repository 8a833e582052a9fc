"""
FastAPI dependency injection for the prompt router.

Provides singleton instances of expensive resources (routing policy, dispatcher).
Tests replace them through `app.dependency_overrides`.
"""

from functools import lru_cache

from prompt_router.config import Settings, build_provider_configs, build_routing_policy, settings
from prompt_router.dispatcher import Dispatcher
from prompt_router.models.routing_models import RoutingPolicy


@lru_cache()
def get_settings() -> Settings:
    """
    Get settings singleton.

    Returns:
        Settings instance
    """
    return settings


@lru_cache()
def get_routing_policy() -> RoutingPolicy:
    """Routing policy built once from settings."""
    return build_routing_policy(get_settings())


@lru_cache()
def get_dispatcher() -> Dispatcher:
    """
    Get singleton dispatcher with a shared httpx connection pool.

    Uses @lru_cache to ensure only one dispatcher (and HTTP client) is created.

    Returns:
        Dispatcher instance
    """
    current = get_settings()
    return Dispatcher(
        policy=get_routing_policy(),
        provider_configs=build_provider_configs(current),
        timeout=current.API_TIMEOUT,
    )
