"""Library entry points for callers outside the HTTP API.

Both share the process-wide endpoint and shift caches with every other
resolver in the process.
"""

from __future__ import annotations

import asyncio
from typing import Optional

import httpx

from kodikarr.domain.entities.kodik import PlayerResponse
from kodikarr.infrastructure.config.schema import AppConfig
from kodikarr.interfaces.composition import build_use_case


async def resolve(
    url: str,
    *,
    config: Optional[AppConfig] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> PlayerResponse:
    """Resolve a player page URL into decoded links.

    Uses ``http_client`` when given, otherwise opens (and closes) its own.
    Raises ``KodikError`` on any pipeline failure.
    """
    config = config or AppConfig()
    if http_client is not None:
        return await build_use_case(config, http_client).execute(url)

    async with httpx.AsyncClient(
        timeout=config.http_timeout_seconds,
        follow_redirects=config.http_follow_redirects,
    ) as client:
        return await build_use_case(config, client).execute(url)


def resolve_blocking(
    url: str, *, config: Optional[AppConfig] = None
) -> PlayerResponse:
    """Blocking variant of :func:`resolve` for synchronous callers.

    Runs its own event loop, so it must not be called from inside a running
    loop (``asyncio.run`` raises ``RuntimeError`` there).
    """
    return asyncio.run(resolve(url, config=config))
