"""Thread-safe single-value store shared by concurrent resolution calls."""

from __future__ import annotations

import threading
from typing import Generic, TypeVar

T = TypeVar("T")


class SingleSlotCache(Generic[T]):
    """Holds at most one value, guarded by a lock.

    Readers never observe a partially written value. Two writers racing on
    first discovery simply overwrite each other; callers only store values
    that are a pure function of remote site configuration, so the slot
    converges either way.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value: T | None = None

    def get(self) -> T | None:
        with self._lock:
            return self._value

    def set(self, value: T) -> None:
        with self._lock:
            self._value = value
