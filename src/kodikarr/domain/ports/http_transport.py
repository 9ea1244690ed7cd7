"""Port for the HTTP collaborator used by the resolution pipeline."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class HttpTransportPort(Protocol):
    """Issues the GET/POST requests of one resolution call.

    Implementations own timeouts, TLS and connection pooling. Any failure
    (connection, status, body read) MUST surface as ``TransportError``.
    """

    async def get_text(self, url: str, headers: Mapping[str, str]) -> str:
        """GET ``url`` and return the body as text."""
        ...

    async def post_form(
        self,
        url: str,
        headers: Mapping[str, str],
        fields: Sequence[tuple[str, str]],
    ) -> Any:
        """POST ``fields`` URL-encoded (in order) and return the decoded JSON."""
        ...
