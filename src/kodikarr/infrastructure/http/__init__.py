from __future__ import annotations

from .httpx_transport import HttpxTransport

__all__ = ["HttpxTransport"]
