"""Composition root: dependency injection via FastAPI lifespan."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, cast

import httpx
import structlog
from fastapi import FastAPI

from kodikarr.application.use_cases.resolve_player import ResolvePlayerUseCase
from kodikarr.infrastructure.config.schema import AppConfig
from kodikarr.infrastructure.hoster_resolvers.kodik import KodikResolver
from kodikarr.infrastructure.http.httpx_transport import HttpxTransport
from kodikarr.infrastructure.kodik.decoder import (
    LinkDecoder,
    ShiftCache,
    default_shift_cache,
)
from kodikarr.infrastructure.kodik.endpoint_cache import (
    EndpointCache,
    default_endpoint_cache,
)
from kodikarr.infrastructure.user_agents import RandomUserAgentPool
from kodikarr.interfaces.app_state import AppState

log = structlog.get_logger(__name__)


def build_use_case(
    config: AppConfig,
    http_client: httpx.AsyncClient,
    *,
    endpoint_cache: EndpointCache | None = None,
    shift_cache: ShiftCache | None = None,
) -> ResolvePlayerUseCase:
    """Wire the resolution pipeline.

    Caches default to the process-wide instances so endpoint discovery and
    shift search happen once per process.
    """
    transport = HttpxTransport(
        http_client,
        timeout_seconds=config.http_timeout_seconds,
        follow_redirects=config.http_follow_redirects,
    )
    return ResolvePlayerUseCase(
        transport=transport,
        user_agents=RandomUserAgentPool(config.http_user_agents),
        endpoint_cache=endpoint_cache or default_endpoint_cache(),
        link_decoder=LinkDecoder(shift_cache or default_shift_cache()),
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    state = cast(AppState, app.state)
    config = state.config

    state.http_client = httpx.AsyncClient(
        timeout=config.http_timeout_seconds,
        follow_redirects=config.http_follow_redirects,
    )
    state.resolve_player_uc = build_use_case(config, state.http_client)
    state.kodik_resolver = KodikResolver(
        state.resolve_player_uc, domains=config.kodik_domains
    )
    log.info("app_started", app_name=config.app_name, environment=config.environment)

    try:
        yield
    finally:
        await state.http_client.aclose()
        log.info("app_stopped")
