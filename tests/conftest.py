"""Shared test fixtures and configuration for all tests.

This conftest.py provides common fixtures used across unit and integration tests.
Network access is never needed: every Dispatcher built here talks to an
httpx.MockTransport that records the requests it receives.
"""

import json
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import httpx
import pytest

from prompt_router.config import Settings
from prompt_router.dispatcher import Dispatcher
from prompt_router.models.enums import Category, ProviderId
from prompt_router.models.routing_models import ProviderConfig, ProviderTarget, RoutingPolicy


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with every provider configured.

    Override specific settings in individual tests as needed:
        def test_something(test_settings):
            test_settings.GROQ_API_KEY = None
    """
    return Settings(
        _env_file=None,
        APP_NAME="Prompt Router (Test)",
        DEBUG=True,
        LOG_LEVEL="DEBUG",
        ENVIRONMENT="development",
        OPENAI_API_KEY="sk-test-openai",
        ANTHROPIC_API_KEY="sk-test-anthropic",
        GOOGLE_API_KEY="test-google",
        GROQ_API_KEY="gsk-test-groq",
        API_TIMEOUT=5.0,
        PROMETHEUS_ENABLED=False,
    )


@pytest.fixture
def routing_policy() -> RoutingPolicy:
    """Policy with small, known keyword lists and the stock targets."""
    return RoutingPolicy(
        keywords={
            Category.CODING: ("code", "python", "debug", "algorithm"),
            Category.REASONING: ("explain", "analyze", "compare"),
            Category.CREATIVE: ("story", "poem"),
            Category.FAST: ("hi", "hello", "thanks"),
        },
        targets={
            Category.CODING: ProviderTarget(provider=ProviderId.ANTHROPIC, model="claude-3.5-sonnet"),
            Category.REASONING: ProviderTarget(provider=ProviderId.OPENAI, model="o3-mini"),
            Category.CREATIVE: ProviderTarget(provider=ProviderId.GOOGLE, model="gemini-2.5-pro"),
            Category.FAST: ProviderTarget(provider=ProviderId.GROQ, model="llama-3.3-70b-versatile"),
        },
        default_target=ProviderTarget(provider=ProviderId.OPENAI, model="gpt-4o"),
    )


@pytest.fixture
def provider_configs() -> Dict[ProviderId, ProviderConfig]:
    """Mutable config map with every provider configured."""
    return {
        ProviderId.OPENAI: ProviderConfig(api_key="sk-test-openai", base_url="https://openai.test/v1"),
        ProviderId.ANTHROPIC: ProviderConfig(api_key="sk-test-anthropic", base_url="https://anthropic.test"),
        ProviderId.GOOGLE: ProviderConfig(api_key="test-google", base_url="https://google.test"),
        ProviderId.GROQ: ProviderConfig(api_key="gsk-test-groq", base_url="https://groq.test/openai/v1"),
    }


@pytest.fixture
def fixtures_dir() -> Path:
    """Path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def load_payload(fixtures_dir: Path) -> Callable[[str], Dict[str, Any]]:
    """Factory fixture returning a provider payload by fixture name.

    Usage:
        def test_something(load_payload):
            data = load_payload("openai_response")
    """
    def _load(name: str) -> Dict[str, Any]:
        with open(fixtures_dir / f"{name}.json") as f:
            return json.load(f)

    return _load


class RecordingTransport:
    """Callable for httpx.MockTransport that remembers every request."""

    def __init__(self, responder: Callable[[httpx.Request], httpx.Response]):
        self.responder = responder
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def last_json(self) -> Dict[str, Any]:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def make_dispatcher(routing_policy: RoutingPolicy, provider_configs: Dict[ProviderId, ProviderConfig]):
    """Factory fixture building a Dispatcher over a recording mock transport.

    Usage:
        def test_something(make_dispatcher):
            dispatcher, transport = make_dispatcher(lambda request: httpx.Response(200, json={}))
    """
    def _create(
        responder: Optional[Callable[[httpx.Request], httpx.Response]] = None,
        timeout: float = 5.0,
        configs: Optional[Dict[ProviderId, ProviderConfig]] = None,
    ) -> tuple[Dispatcher, RecordingTransport]:
        transport = RecordingTransport(responder or (lambda request: httpx.Response(200, json={})))
        client = httpx.AsyncClient(transport=httpx.MockTransport(transport))
        dispatcher = Dispatcher(
            policy=routing_policy,
            provider_configs=configs if configs is not None else provider_configs,
            client=client,
            timeout=timeout,
        )
        return dispatcher, transport

    return _create
