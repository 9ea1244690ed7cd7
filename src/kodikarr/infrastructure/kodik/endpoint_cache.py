"""Process-wide cache of the discovered player API endpoint."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import structlog

from kodikarr.infrastructure.cache.single_slot import SingleSlotCache
from kodikarr.infrastructure.kodik.extractors import (
    b64_to_text,
    extract_encoded_endpoint,
    extract_player_script_url,
)

log = structlog.get_logger(__name__)

FetchText = Callable[[str], Awaitable[str]]


@dataclass(frozen=True)
class _Discovered:
    endpoint: str  # e.g. "/ftor"
    domain: str  # domain the endpoint was discovered on


class EndpointCache:
    """Discover the obfuscated API path once, reuse it for every later call.

    The slot is global, not keyed by domain. A hit for a different domain
    than the one that discovered it is logged, not re-discovered.
    """

    def __init__(self) -> None:
        self._slot: SingleSlotCache[_Discovered] = SingleSlotCache()

    def try_read(self) -> str | None:
        entry = self._slot.get()
        return entry.endpoint if entry is not None else None

    async def discover_if_absent(
        self, domain: str, page_text: str, fetch: FetchText
    ) -> str:
        """Return the cached endpoint or discover it from the player script.

        Extraction and fetch errors propagate; the slot stays empty so a
        later call can retry discovery.
        """
        entry = self._slot.get()
        if entry is not None:
            if entry.domain != domain:
                log.warning(
                    "kodik_endpoint_cache_domain_mismatch",
                    cached_domain=entry.domain,
                    domain=domain,
                    endpoint=entry.endpoint,
                )
            return entry.endpoint

        player_url = extract_player_script_url(domain, page_text)
        script_text = await fetch(player_url)
        endpoint = b64_to_text(extract_encoded_endpoint(script_text))

        self._slot.set(_Discovered(endpoint=endpoint, domain=domain))
        log.info("kodik_endpoint_discovered", endpoint=endpoint, domain=domain)
        return endpoint


_DEFAULT_ENDPOINT_CACHE = EndpointCache()


def default_endpoint_cache() -> EndpointCache:
    """Endpoint cache shared by every resolver in this process."""
    return _DEFAULT_ENDPOINT_CACHE
