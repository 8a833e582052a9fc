"""
Integration tests for the prompt router.

Test components together:
- API endpoints (FastAPI TestClient) over a real Dispatcher
- Upstream providers replaced by httpx.MockTransport
"""
