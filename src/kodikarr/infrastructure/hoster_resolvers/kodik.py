"""Kodik hoster resolver: turns kodik player URLs into playable HLS streams.

Kodik player URLs follow the pattern:
    https://kodik.info/{type}/{id}/{hash}/{quality}
    //kodik.info/seria/1484069/6a2e103e9acf9829c6cba7e69555afb1/720p

The heavy lifting (endpoint discovery, link decoding) lives in
ResolvePlayerUseCase; this adapter only checks the host and picks the best
tier.

Domains:
    kodik.info, kodik.cc, kodik.biz, aniqit.com  (player mirrors)
"""

from __future__ import annotations

from collections.abc import Iterable
from urllib.parse import urlparse

import structlog

from kodikarr.application.use_cases.resolve_player import ResolvePlayerUseCase
from kodikarr.domain.entities.stream import ResolvedStream, StreamQuality
from kodikarr.domain.exceptions import KodikError
from kodikarr.infrastructure.kodik.extractors import PLAYER_DOMAINS

log = structlog.get_logger(__name__)

DEFAULT_DOMAINS = frozenset(PLAYER_DOMAINS)


def _host(url: str) -> str:
    # Scheme-less and protocol-relative URLs are common in embeds
    if "://" not in url:
        url = "https://" + url.lstrip("/")
    hostname = urlparse(url).hostname or ""
    return hostname.removeprefix("www.")


class KodikResolver:
    """Resolves kodik player pages to the best available stream."""

    def __init__(
        self,
        use_case: ResolvePlayerUseCase,
        *,
        domains: Iterable[str] = DEFAULT_DOMAINS,
    ) -> None:
        self._use_case = use_case
        self._domains = frozenset(domains)

    @property
    def name(self) -> str:
        return "kodik"

    def supports(self, url: str) -> bool:
        return _host(url) in self._domains

    async def resolve(self, url: str) -> ResolvedStream | None:
        """Resolve a kodik player URL; ``None`` when anything fails."""
        if not self.supports(url):
            log.warning("kodik_invalid_url", url=url)
            return None

        try:
            return await self.best_stream(url)
        except KodikError as exc:
            log.warning(
                "kodik_resolve_failed", url=url, kind=exc.kind.value, error=str(exc)
            )
            return None

    async def best_stream(self, url: str) -> ResolvedStream | None:
        """Best stream of a player page; ``None`` only when no link came back.

        Pipeline errors propagate as ``KodikError``.
        """
        response = await self._use_case.execute(url)

        best = response.best_link()
        if best is None:
            log.info("kodik_no_links", url=url)
            return None

        quality, link = best
        log.debug("kodik_resolved", url=url, quality=quality.value)
        return ResolvedStream(
            video_url=link.src,
            is_hls=".m3u8" in link.src,
            quality=StreamQuality.from_tier(quality),
        )
