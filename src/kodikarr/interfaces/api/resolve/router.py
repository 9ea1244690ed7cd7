"""Resolve endpoints: decoded Kodik stream links over HTTP."""

from __future__ import annotations

from collections.abc import Awaitable
from typing import Any, TypeVar, cast

import structlog
from fastapi import APIRouter, HTTPException, Query, Request

from kodikarr.domain.exceptions import ErrorKind, KodikError
from kodikarr.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(tags=["resolve"])

T = TypeVar("T")

# Bad input page -> 422, upstream/transport/decoding trouble -> 502
_STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.NO_DOMAIN_FOUND: 422,
    ErrorKind.MISSING_FIELD: 422,
    ErrorKind.NO_PLAYER_SCRIPT: 502,
    ErrorKind.NO_ENDPOINT_MARKER: 502,
    ErrorKind.TRANSPORT_FAILURE: 502,
    ErrorKind.DECODE_FAILURE: 502,
    ErrorKind.LINK_DECODE_FAILED: 502,
}


async def _run_pipeline(url: str, call: Awaitable[T]) -> T:
    try:
        return await call
    except KodikError as exc:
        status = _STATUS_BY_KIND.get(exc.kind, 502)
        log.warning(
            "resolve_request_failed", url=url, kind=exc.kind.value, status=status
        )
        raise HTTPException(
            status_code=status,
            detail={"kind": exc.kind.value, "message": str(exc)},
        ) from exc


@router.get("/resolve")
async def resolve_player(
    request: Request,
    url: str = Query(..., min_length=1, description="Kodik player page URL"),
) -> dict[str, Any]:
    """Return all decoded links of a player page, grouped by resolution."""
    state = cast(AppState, request.app.state)

    response = await _run_pipeline(url, state.resolve_player_uc.execute(url))
    return response.to_dict()


@router.get("/stream")
async def best_stream(
    request: Request,
    url: str = Query(..., min_length=1, description="Kodik player page URL"),
) -> dict[str, Any]:
    """Return only the best playable stream of a player page.

    Only hosts in ``kodik.domains`` are accepted (422 otherwise). Pipeline
    errors map like ``/resolve``; 404 means the page returned no links.
    """
    state = cast(AppState, request.app.state)
    resolver = state.kodik_resolver

    if not resolver.supports(url):
        raise HTTPException(
            status_code=422,
            detail={"kind": "UnsupportedHost", "message": f"not a kodik host: {url}"},
        )

    stream = await _run_pipeline(url, resolver.best_stream(url))
    if stream is None:
        raise HTTPException(status_code=404, detail="No playable stream found")

    return {
        "url": stream.video_url,
        "is_hls": stream.is_hls,
        "quality": stream.quality.name,
    }
