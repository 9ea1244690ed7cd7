"""Kodik player page extraction, endpoint discovery and link decoding."""

from __future__ import annotations

from .decoder import LinkDecoder, ShiftCache
from .endpoint_cache import EndpointCache

__all__ = ["EndpointCache", "LinkDecoder", "ShiftCache"]
