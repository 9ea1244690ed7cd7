"""Hoster resolver implementations for extracting playable video URLs."""

from __future__ import annotations

from .kodik import KodikResolver

__all__ = ["KodikResolver"]
