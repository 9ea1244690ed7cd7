"""Domain entities for Kodik player resolution.

Pure value objects without I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from kodikarr.domain.exceptions import InvalidResponseError

# Fixed form fields the player API expects next to the identity triple.
_FIXED_FORM_FIELDS: tuple[tuple[str, str], ...] = (
    ("bad_user", "true"),
    ("info", "{}"),
    ("cdn_is_working", "true"),
)


class Quality(str, Enum):
    """Resolution tiers returned by the player API (value = JSON key)."""

    Q360 = "360"
    Q480 = "480"
    Q720 = "720"


@dataclass(frozen=True)
class VideoIdentity:
    """Identity triple scraped from a player page."""

    type: str  # "video", "seria", ...
    hash: str
    id: str  # numeric, kept as text

    def form_fields(self) -> list[tuple[str, str]]:
        """Form pairs in the order the player API receives them."""
        return [
            ("type", self.type),
            ("hash", self.hash),
            ("id", self.id),
            *_FIXED_FORM_FIELDS,
        ]


@dataclass
class Link:
    """One stream entry. ``src`` is obfuscated until decoded in place."""

    src: str
    mime_type: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"src": self.src, "type": self.mime_type}


@dataclass
class Links:
    quality_360: list[Link] = field(default_factory=list)
    quality_480: list[Link] = field(default_factory=list)
    quality_720: list[Link] = field(default_factory=list)

    def tier(self, quality: Quality) -> list[Link]:
        return {
            Quality.Q360: self.quality_360,
            Quality.Q480: self.quality_480,
            Quality.Q720: self.quality_720,
        }[quality]


@dataclass
class PlayerResponse:
    """Decoded answer of the player API.

    Created per call from the remote JSON and mutated in place by the link
    decoder.
    """

    links: Links
    advert_script: str = ""
    domain: str = ""
    default: int = 0
    ip: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> PlayerResponse:
        """Build a response from the player API JSON body."""
        if not isinstance(data, dict) or not isinstance(data.get("links"), dict):
            raise InvalidResponseError("player response has no 'links' object")

        raw_links: dict[str, Any] = data["links"]
        tiers: dict[Quality, list[Link]] = {}
        for quality in Quality:
            entries = raw_links.get(quality.value) or []
            if not isinstance(entries, list):
                raise InvalidResponseError(
                    f"player response tier {quality.value!r} is not a list"
                )
            tiers[quality] = [_parse_link(entry, quality) for entry in entries]

        try:
            default = int(data.get("default") or 0)
        except (TypeError, ValueError):
            default = 0

        return cls(
            links=Links(
                quality_360=tiers[Quality.Q360],
                quality_480=tiers[Quality.Q480],
                quality_720=tiers[Quality.Q720],
            ),
            advert_script=str(data.get("advert_script") or ""),
            domain=str(data.get("domain") or ""),
            default=default,
            ip=str(data.get("ip") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "links": {
                quality.value: [link.to_dict() for link in self.links.tier(quality)]
                for quality in Quality
            }
        }

    def best_link(self) -> tuple[Quality, Link] | None:
        """First link of the highest non-empty tier."""
        for quality in (Quality.Q720, Quality.Q480, Quality.Q360):
            tier = self.links.tier(quality)
            if tier:
                return quality, tier[0]
        return None


def _parse_link(entry: Any, quality: Quality) -> Link:
    if not isinstance(entry, dict) or not isinstance(entry.get("src"), str):
        raise InvalidResponseError(
            f"player response tier {quality.value!r} has an entry without 'src'"
        )
    return Link(src=entry["src"], mime_type=str(entry.get("type") or ""))
