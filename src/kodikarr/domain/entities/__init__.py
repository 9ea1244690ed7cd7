from .kodik import Link, Links, PlayerResponse, Quality, VideoIdentity
from .stream import ResolvedStream, StreamQuality

__all__ = [
    "Link",
    "Links",
    "PlayerResponse",
    "Quality",
    "ResolvedStream",
    "StreamQuality",
    "VideoIdentity",
]
