"""
Integration tests for the FastAPI application.

These tests run the full stack (routes, classifier, dispatcher, provider
handlers, error handlers) with an httpx.MockTransport standing in for the
upstream providers, so no network access is needed.
"""

import httpx
import pytest
from fastapi.testclient import TestClient

from prompt_router.api.dependencies import get_dispatcher
from prompt_router.main import app
from prompt_router.models.enums import ProviderId
from prompt_router.models.routing_models import ProviderConfig


@pytest.fixture
def upstream(load_payload):
    """Per-host upstream behaviour; tests replace entries to inject failures."""
    payloads = {
        "openai.test": load_payload("openai_response"),
        "groq.test": load_payload("openai_response"),
        "anthropic.test": load_payload("anthropic_response"),
        "google.test": load_payload("google_response"),
    }
    return {host: (lambda request, body=body: httpx.Response(200, json=body)) for host, body in payloads.items()}


@pytest.fixture
def wired(make_dispatcher, upstream):
    """TestClient whose dispatcher talks to the mock upstream; yields (client, transport)."""
    dispatcher, transport = make_dispatcher(lambda request: upstream[request.url.host](request))
    app.dependency_overrides[get_dispatcher] = lambda: dispatcher
    yield TestClient(app, raise_server_exceptions=False), transport
    app.dependency_overrides.clear()


def test_root_endpoint(wired):
    """Test root endpoint returns service info."""
    client, _ = wired
    response = client.get("/")

    assert response.status_code == 200
    data = response.json()
    assert "service" in data
    assert data["chat"] == "/api/chat"
    assert data["health"] == "/api/chat/health"


def test_coding_prompt_routed_to_coding_target(wired):
    client, transport = wired
    response = client.post("/api/chat", json={"prompt": "Write a function to sort an array"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["response"] == "Recursion is a function calling itself."
    assert data["routing"]["provider"] == "anthropic"
    assert data["routing"]["model"] == "claude-3.5-sonnet"
    assert data["routing"]["category"] == "coding"
    assert data["usage"] == {"promptTokens": 20, "completionTokens": 9, "totalTokens": 29}
    assert transport.call_count == 1
    assert transport.requests[0].url.path == "/v1/messages"


def test_creative_prompt_uses_google_sampling_options(wired):
    client, transport = wired
    response = client.post(
        "/api/chat",
        json={"prompt": "Write a creative story about dragons", "options": {"topK": 40, "temperature": 1.2}},
    )

    assert response.status_code == 200
    assert response.json()["data"]["routing"]["provider"] == "google"
    config = transport.last_json()["generationConfig"]
    assert config["topK"] == 40
    assert config["temperature"] == 1.2
    assert config["maxOutputTokens"] == 1000


def test_forced_routing(wired):
    client, transport = wired
    response = client.post(
        "/api/chat",
        json={"prompt": "Hi", "options": {"forceProvider": "groq", "forceModel": "mixtral-8x7b-32768"}},
    )

    assert response.status_code == 200
    routing = response.json()["data"]["routing"]
    assert routing == {
        "provider": "groq",
        "model": "mixtral-8x7b-32768",
        "category": "forced",
        "confidence": 1.0,
        "reason": "Forced by user request",
    }
    assert transport.last_json()["model"] == "mixtral-8x7b-32768"


def test_forced_model_off_pattern_is_rejected_without_network(wired):
    client, transport = wired
    response = client.post(
        "/api/chat",
        json={"prompt": "Hi", "options": {"forceProvider": "google", "forceModel": "gpt-4o"}},
    )

    assert response.status_code == 400
    assert response.json()["error"]["kind"] == "VALIDATION_ERROR"
    assert transport.call_count == 0


def test_forced_unconfigured_provider_is_503(wired, provider_configs):
    client, transport = wired
    provider_configs[ProviderId.ANTHROPIC] = ProviderConfig(api_key=None, base_url="https://anthropic.test")

    response = client.post(
        "/api/chat",
        json={"prompt": "Hi", "options": {"forceProvider": "anthropic", "forceModel": "claude-4-opus"}},
    )

    assert response.status_code == 503
    assert response.json()["error"]["kind"] == "PROVIDER_UNAVAILABLE"
    assert transport.call_count == 0


def test_upstream_rate_limit(wired, upstream):
    client, _ = wired
    upstream["groq.test"] = lambda request: httpx.Response(
        429, headers={"Retry-After": "12"}, json={"error": {"message": "Rate limit reached"}}
    )

    response = client.post("/api/chat", json={"prompt": "Hi"})

    assert response.status_code == 429
    assert response.headers["Retry-After"] == "12"
    error = response.json()["error"]
    assert error["kind"] == "RATE_LIMIT_ERROR"
    assert error["provider"] == "groq"
    assert "Rate limit reached" in error["message"]


def test_upstream_timeout(wired, upstream):
    client, _ = wired

    def _timeout(request):
        raise httpx.ReadTimeout("timed out", request=request)

    upstream["openai.test"] = _timeout
    response = client.post("/api/chat", json={"prompt": "Explain quantum physics"})

    assert response.status_code == 408
    assert response.json()["error"]["kind"] == "TIMEOUT_ERROR"


def test_upstream_auth_failure(wired, upstream):
    client, _ = wired
    upstream["anthropic.test"] = lambda request: httpx.Response(
        401, json={"type": "error", "error": {"type": "authentication_error", "message": "invalid x-api-key"}}
    )

    response = client.post("/api/chat", json={"prompt": "debug this python code"})

    assert response.status_code == 401
    assert response.json()["error"]["kind"] == "AUTHENTICATION_ERROR"


def test_chat_invalid_request(wired):
    """Malformed body maps to 400 VALIDATION_ERROR, not 422."""
    client, transport = wired
    response = client.post("/api/chat", json={"invalid": "request"})

    assert response.status_code == 400
    assert response.json()["error"]["kind"] == "VALIDATION_ERROR"
    assert transport.call_count == 0


def test_models_endpoint_lists_only_configured(wired, provider_configs):
    client, _ = wired
    provider_configs[ProviderId.GOOGLE] = ProviderConfig(api_key=None, base_url="https://google.test")

    response = client.get("/api/chat/models")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["providers"] == ["openai", "anthropic", "groq"]
    assert "google" not in data["models"]
    assert data["models"]["groq"] == ["llama-3.3-70b-versatile", "mixtral-8x7b-32768"]
    assert data["routing"]["defaultModel"] == {"provider": "openai", "model": "gpt-4o"}
    assert data["routing"]["totalKeywords"] == 12


def test_test_provider_endpoint(wired):
    client, transport = wired
    response = client.post("/api/chat/test-provider", json={"provider": "openai"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["provider"] == "openai"
    assert data["status"] == "available"
    assert transport.last_json()["max_tokens"] == 10


def test_detailed_health_with_one_failing_provider(wired, upstream):
    client, _ = wired
    upstream["google.test"] = lambda request: httpx.Response(500, json={"error": {"message": "internal"}})

    response = client.get("/api/chat/health", params={"detailed": "true"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "healthy"
    assert data["total_providers"] == 4
    assert data["available_providers"] == 3
    google = next(probe for probe in data["providers"] if probe["provider"] == "google")
    assert google["status"] == "unavailable"
    assert google["kind"] == "API_ERROR"


def test_stats_endpoint(wired):
    client, _ = wired
    response = client.get("/api/chat/stats")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["routing"]["total_keywords"] == 12
    assert data["routing"]["default_target"] == {"provider": "openai", "model": "gpt-4o"}
    assert data["server"]["uptime"] >= 0
    assert "python" in data["server"]
