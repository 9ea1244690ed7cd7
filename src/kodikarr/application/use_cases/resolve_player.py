"""Resolve a Kodik player page URL into decoded stream links.

Stages run strictly in order and fail fast:

1. domain       -- hostname taken from the page URL
2. page         -- player page fetched with a spoofed User-Agent
3. identity     -- ``videoInfo`` triple extracted from the page
4. endpoint     -- API path read from the endpoint cache, discovered on miss
5. links        -- identity POSTed to the API, links decoded in place

Nothing is retried; a failed call must be restarted by the caller.
"""

from __future__ import annotations

import structlog

from kodikarr.domain.entities.kodik import PlayerResponse
from kodikarr.domain.ports import HttpTransportPort, UserAgentPort
from kodikarr.infrastructure.kodik.decoder import LinkDecoder
from kodikarr.infrastructure.kodik.endpoint_cache import EndpointCache
from kodikarr.infrastructure.kodik.extractors import (
    extract_domain,
    extract_video_identity,
)

log = structlog.get_logger(__name__)

_API_ACCEPT = "application/json, text/javascript, */*; q=0.01"


class ResolvePlayerUseCase:
    def __init__(
        self,
        *,
        transport: HttpTransportPort,
        user_agents: UserAgentPort,
        endpoint_cache: EndpointCache,
        link_decoder: LinkDecoder,
    ) -> None:
        self._transport = transport
        self._user_agents = user_agents
        self._endpoint_cache = endpoint_cache
        self._decoder = link_decoder

    async def execute(self, url: str) -> PlayerResponse:
        domain = extract_domain(url)
        log.debug("kodik_domain_resolved", url=url, domain=domain)

        page_text = await self._fetch(url)
        identity = extract_video_identity(page_text)
        log.debug(
            "kodik_identity_extracted",
            type=identity.type,
            hash=identity.hash,
            id=identity.id,
        )

        endpoint = await self._endpoint_cache.discover_if_absent(
            domain, page_text, self._fetch
        )

        origin = f"https://{domain}"
        headers = {
            "Origin": origin,
            "Accept": _API_ACCEPT,
            "Referer": origin,
            "User-Agent": self._user_agents.next(),
            "X-Requested-With": "XMLHttpRequest",
        }
        payload = await self._transport.post_form(
            f"{origin}{endpoint}", headers, identity.form_fields()
        )
        response = PlayerResponse.from_dict(payload)

        self._decoder.decode_all(response)
        log.info(
            "kodik_links_decoded",
            domain=domain,
            id=identity.id,
            q360=len(response.links.quality_360),
            q480=len(response.links.quality_480),
            q720=len(response.links.quality_720),
        )
        return response

    async def _fetch(self, url: str) -> str:
        return await self._transport.get_text(
            url, {"User-Agent": self._user_agents.next()}
        )
