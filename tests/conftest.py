"""Shared test fixtures for the kodikarr test suite."""

from __future__ import annotations

from collections.abc import Callable

import pytest
from kodik_samples import (
    PAGE_HTML,
    PAGE_URL,
    PLAYER_JS,
    PLAYER_SCRIPT_URL,
    FakeTransport,
    FixedUserAgents,
    obfuscate_link,
    player_api_payload,
)

from kodikarr.infrastructure.kodik.decoder import ShiftCache
from kodikarr.infrastructure.kodik.endpoint_cache import EndpointCache


@pytest.fixture()
def obfuscate() -> Callable[[str, int], str]:
    return obfuscate_link


@pytest.fixture()
def endpoint_cache() -> EndpointCache:
    """Isolated endpoint cache (never the process-wide one)."""
    return EndpointCache()


@pytest.fixture()
def shift_cache() -> ShiftCache:
    """Isolated shift cache (never the process-wide one)."""
    return ShiftCache()


@pytest.fixture()
def fake_transport() -> FakeTransport:
    return FakeTransport(
        pages={PAGE_URL: PAGE_HTML, PLAYER_SCRIPT_URL: PLAYER_JS},
        api_payload=player_api_payload(),
    )


@pytest.fixture()
def user_agents() -> FixedUserAgents:
    return FixedUserAgents()
