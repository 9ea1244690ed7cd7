"""Port for User-Agent spoofing."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class UserAgentPort(Protocol):
    def next(self) -> str:
        """Return a User-Agent; consecutive calls need not be identical."""
        ...
