"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

from kodikarr.infrastructure.kodik.extractors import PLAYER_DOMAINS
from kodikarr.infrastructure.user_agents import DEFAULT_USER_AGENTS

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "kodikarr",
    "environment": "dev",
    "http": {
        "timeout_seconds": 30.0,
        "follow_redirects": True,
        "user_agents": list(DEFAULT_USER_AGENTS),
    },
    "kodik": {
        "domains": list(PLAYER_DOMAINS),
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "api": {
        "host": "0.0.0.0",  # noqa: S104
        "port": 7980,
    },
}
