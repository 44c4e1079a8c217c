"""Shared pytest fixtures for Shield SDK tests.

Fixture summary
---------------
api_key          - Dummy API key used by every client fixture.
shield           - ShieldClient pointed at the default endpoint; closed after the test.
load_fixture     - Loads a recorded Shield API response from ``fixtures/api_responses/shield``.

All HTTP traffic is mocked with respx; no test touches the network.
"""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncGenerator, Callable, Iterator
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio
import structlog

from elysium_shield.client.client import ShieldClient
from elysium_shield.config.settings import get_settings

FIXTURES_DIR = Path(__file__).parent / "fixtures" / "api_responses" / "shield"

TEST_API_KEY = "sk_test_0123456789abcdef"


# ---------------------------------------------------------------------------
# Environment isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Strip SHIELD_* variables and reset cached settings and logging per test."""
    for var in ("SHIELD_API_KEY", "SHIELD_API_URL", "SHIELD_TIMEOUT_MS", "SHIELD_DEBUG", "SHIELD_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    logging.getLogger().handlers.clear()
    # Debug-enabled clients lower the package logger level.
    logging.getLogger("elysium_shield").setLevel(logging.NOTSET)
    structlog.reset_defaults()


# ---------------------------------------------------------------------------
# Client fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def api_key() -> str:
    return TEST_API_KEY


@pytest_asyncio.fixture
async def shield(api_key: str) -> AsyncGenerator[ShieldClient, None]:
    """A ShieldClient that owns its HTTP client.

    The HTTP client is created on the first request, so respx routes
    registered inside the test intercept it.
    """
    client = ShieldClient(api_key)
    yield client
    await client.aclose()


@pytest.fixture
def load_fixture() -> Callable[[str], dict[str, Any]]:
    """Return a loader for recorded Shield API responses."""

    def _load(name: str) -> dict[str, Any]:
        return json.loads((FIXTURES_DIR / name).read_text(encoding="utf-8"))

    return _load
