"""Application state container for FastAPI dependency injection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from starlette.datastructures import State

from kodikarr.infrastructure.config import AppConfig

if TYPE_CHECKING:
    from kodikarr.application.use_cases.resolve_player import ResolvePlayerUseCase
    from kodikarr.infrastructure.hoster_resolvers.kodik import KodikResolver


class AppState(State):
    """FastAPI application state with all DI resources.

    Lifecycle managed by composition.py::lifespan().
    """

    # Configuration
    config: AppConfig

    # Infrastructure
    http_client: httpx.AsyncClient

    # Application Services
    resolve_player_uc: ResolvePlayerUseCase
    kodik_resolver: KodikResolver
