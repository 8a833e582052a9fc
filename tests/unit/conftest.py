"""Unit test fixtures (mocks and stubs).

Provides mock objects for testing without external dependencies.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, Mock

import pytest

from prompt_router.dispatcher import Dispatcher
from prompt_router.models.enums import ProviderId
from prompt_router.models.llm_models import NormalizedResponse, TokenUsage
from prompt_router.models.routing_models import ChatResult, ProviderTarget, RoutingDecision


@pytest.fixture
def normalized_response():
    """NormalizedResponse as an OpenAI call would produce it."""
    return NormalizedResponse(
        provider=ProviderId.OPENAI,
        model="o3-mini",
        text="Quantum physics describes nature at the smallest scales.",
        usage=TokenUsage(prompt_tokens=10, completion_tokens=15, total_tokens=25),
        provider_metadata={"id": "chatcmpl-1", "finish_reason": "stop"},
        timestamp=datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def chat_result(normalized_response):
    """ChatResult for a classified reasoning prompt."""
    return ChatResult(
        response=normalized_response,
        routing=RoutingDecision(
            target=ProviderTarget(provider=ProviderId.OPENAI, model="o3-mini"),
            category="reasoning",
            confidence=0.8,
            reason="Identified analytical or problem-solving request",
        ),
        response_time_ms=420,
    )


@pytest.fixture
def mock_dispatcher(chat_result):
    """Mock Dispatcher for route-level unit tests."""
    mock = Mock(spec=Dispatcher)

    mock.handle_chat = AsyncMock(return_value=chat_result)
    mock.test_provider = AsyncMock()
    mock.get_health_status = AsyncMock()
    mock.list_available_providers = Mock(return_value=[ProviderId.OPENAI, ProviderId.GROQ])
    mock.list_available_models = Mock(side_effect=lambda provider: [f"{ProviderId(provider).value}-model"])

    return mock
