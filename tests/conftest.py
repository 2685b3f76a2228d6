"""
tests/conftest.py

Shared pytest fixtures used by both unit and integration test suites.
All HTTP fixtures use respx.mock — no real network calls are made in any test.
"""

from __future__ import annotations

import pytest
import respx

# ---------------------------------------------------------------------------
# Keep the real token out of every test run
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _clear_token_env(monkeypatch):
    """Removes CLOUDFLARE_API_TOKEN so no test picks up a developer's token."""
    monkeypatch.delenv("CLOUDFLARE_API_TOKEN", raising=False)


# ---------------------------------------------------------------------------
# HTTP mock fixture — intercepts all httpx calls
# ---------------------------------------------------------------------------


@pytest.fixture()
def mock_http():
    """
    Yields a respx router that intercepts all httpx.AsyncClient calls.

    No real network traffic is allowed during tests. Use this fixture
    wherever a service or client would normally make an outbound request.
    """
    with respx.mock(assert_all_called=False) as router:
        yield router
