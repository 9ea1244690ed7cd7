from __future__ import annotations

from .single_slot import SingleSlotCache

__all__ = ["SingleSlotCache"]
