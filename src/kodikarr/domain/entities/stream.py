"""Resolved stream value objects handed out by hoster resolvers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from kodikarr.domain.entities.kodik import Quality


class StreamQuality(IntEnum):
    """Ranked quality levels (higher value = better quality)."""

    UNKNOWN = 0
    SD_360P = 20
    SD_480P = 30
    HD_720P = 40

    @classmethod
    def from_tier(cls, quality: Quality) -> StreamQuality:
        return {
            Quality.Q360: cls.SD_360P,
            Quality.Q480: cls.SD_480P,
            Quality.Q720: cls.HD_720P,
        }[quality]


@dataclass(frozen=True)
class ResolvedStream:
    """Result of resolving a player URL to an actual video URL.

    Returned by HosterResolverPort implementations.
    """

    video_url: str  # Actual playable URL (.mp4:hls:manifest.m3u8)
    is_hls: bool = False
    quality: StreamQuality = StreamQuality.UNKNOWN
