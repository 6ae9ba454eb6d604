"""Shared fixtures for warpmetrics-mcp tests.

Unit tests use the fixture spec in tests/fixtures/openapi.json and stub
the API with httpx.MockTransport. The live fixture at the bottom skips
when no API key is configured.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from warpmetrics_mcp.catalog import build_catalog
from warpmetrics_mcp.loader import load_spec

FIXTURE_SPEC = Path(__file__).parent / "fixtures" / "openapi.json"
TEST_API_URL = "https://api.test.warpmetrics.com"
TEST_API_KEY = "wm_test_key"


@pytest.fixture
def spec() -> dict[str, Any]:
    return load_spec(FIXTURE_SPEC)


@pytest.fixture
def catalog(spec):
    return build_catalog(spec)


@pytest.fixture
def spec_path() -> Path:
    return FIXTURE_SPEC


# ---------------------------------------------------------------------------
# Stubbed API
# ---------------------------------------------------------------------------

class Recorder:
    """Collects requests seen by a MockTransport handler."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def make_client(recorder) -> Callable[..., httpx.AsyncClient]:
    """Return a factory building an AsyncClient backed by a canned response.

    Usage::

        client = make_client(json={"success": True, "data": []})
        client = make_client(status=502, text="<html>Bad Gateway</html>")
        client = make_client(handler=lambda request: httpx.Response(...))
    """
    def _make(
        status: int = 200,
        json: Any = None,
        text: str | None = None,
        handler: Callable[[httpx.Request], httpx.Response] | None = None,
    ) -> httpx.AsyncClient:
        def _respond(request: httpx.Request) -> httpx.Response:
            recorder.requests.append(request)
            if handler is not None:
                return handler(request)
            if text is not None:
                return httpx.Response(status, text=text)
            return httpx.Response(status, json=json)

        return httpx.AsyncClient(
            base_url=TEST_API_URL,
            headers={"Authorization": f"Bearer {TEST_API_KEY}"},
            transport=httpx.MockTransport(_respond),
        )

    return _make


@pytest.fixture
def serve_spec() -> Callable[[httpx.Request], httpx.Response]:
    """MockTransport handler serving the fixture spec at /v1/docs/openapi.json."""
    def _handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/v1/docs/openapi.json":
            return httpx.Response(200, content=FIXTURE_SPEC.read_bytes())
        return httpx.Response(404, json={"success": False, "error": {"message": "Not found"}})
    return _handler


# ---------------------------------------------------------------------------
# Live API — skip unless a key is configured
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def live_settings():
    """Settings for the live API; skips when it cannot be reached."""
    from warpmetrics_mcp.config import load_settings

    settings = load_settings()
    if not settings.api_key:
        pytest.skip("WARPMETRICS_API_KEY not set")
    try:
        resp = httpx.get(settings.spec_url, timeout=10)
        if resp.status_code != 200:
            pytest.skip(f"spec endpoint returned {resp.status_code}")
    except httpx.RequestError:
        pytest.skip(f"Warpmetrics API not reachable at {settings.api_url}")
    return settings
