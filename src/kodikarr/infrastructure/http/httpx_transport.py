"""httpx-backed HTTP collaborator for the resolution pipeline."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

import httpx
import structlog

from kodikarr.domain.exceptions import TransportError

log = structlog.get_logger(__name__)


class HttpxTransport:
    """Implements ``HttpTransportPort`` on a shared ``httpx.AsyncClient``.

    No retries: the first failure is raised as ``TransportError`` with the
    httpx exception chained.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        timeout_seconds: float = 30.0,
        follow_redirects: bool = True,
    ) -> None:
        self._http = http_client
        self._timeout = timeout_seconds
        self._follow_redirects = follow_redirects

    async def get_text(self, url: str, headers: Mapping[str, str]) -> str:
        try:
            resp = await self._http.get(
                url,
                headers=dict(headers),
                timeout=self._timeout,
                follow_redirects=self._follow_redirects,
            )
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            log.warning("kodik_get_failed", url=url, error=str(exc))
            raise TransportError(f"GET {url} failed: {exc}", url=url) from exc

        log.debug(
            "kodik_get_ok", url=url, status=resp.status_code, size=len(resp.text)
        )
        return resp.text

    async def post_form(
        self,
        url: str,
        headers: Mapping[str, str],
        fields: Sequence[tuple[str, str]],
    ) -> Any:
        # httpx form encoding takes a dict; Python dicts keep insertion order
        data = dict(fields)
        try:
            resp = await self._http.post(
                url,
                headers=dict(headers),
                data=data,
                timeout=self._timeout,
                follow_redirects=self._follow_redirects,
            )
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            log.warning("kodik_post_failed", url=url, error=str(exc))
            raise TransportError(f"POST {url} failed: {exc}", url=url) from exc

        try:
            return resp.json()
        except ValueError as exc:
            log.warning("kodik_post_invalid_json", url=url, body=resp.text[:200])
            raise TransportError(
                f"POST {url} returned invalid JSON", url=url
            ) from exc
