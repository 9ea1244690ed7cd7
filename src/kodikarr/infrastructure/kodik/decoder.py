"""Kodik stream link decoding.

Player API links are obfuscated as base64 text run through a Caesar shift
(letters only, case preserved; digits and punctuation untouched). The
shift rotates per site session, so it is found by trying every rotation
until the result decodes to valid UTF-8, then cached for the next links.

Higher tiers are not decoded independently: their plain URL differs from
the 360p one only in the ``/360.mp4`` segment, so it is derived by
substitution.
"""

from __future__ import annotations

import string
from functools import lru_cache

import structlog

from kodikarr.domain.entities.kodik import Link, PlayerResponse, Quality
from kodikarr.domain.exceptions import DecodeError, LinkDecodeError
from kodikarr.infrastructure.cache.single_slot import SingleSlotCache
from kodikarr.infrastructure.kodik.extractors import b64_to_text

log = structlog.get_logger(__name__)

_MIN_SHIFT = 1
_MAX_SHIFT = 25


@lru_cache(maxsize=_MAX_SHIFT + 1)
def _reverse_table(shift: int) -> dict[int, int]:
    lower = string.ascii_lowercase
    upper = string.ascii_uppercase
    k = shift % 26
    return str.maketrans(
        lower + upper,
        lower[-k:] + lower[:-k] + upper[-k:] + upper[:-k] if k else lower + upper,
    )


def caesar_decode(text: str, shift: int) -> str:
    """Shift ASCII letters back by ``shift``: ``(p + 26 - shift) % 26``."""
    return text.translate(_reverse_table(shift))


def _pad(text: str) -> str:
    return text + "=" * (-len(text) % 4)


def try_shift(obfuscated: str, shift: int) -> str | None:
    """Decode with one rotation; ``None`` when the result is not valid text."""
    try:
        return b64_to_text(_pad(caesar_decode(obfuscated, shift)))
    except DecodeError:
        return None


def search_shift(obfuscated: str) -> tuple[int, str]:
    """Brute-force rotations 1..25 and return the first that decodes.

    Rotation 0 is never a candidate.
    """
    for shift in range(_MIN_SHIFT, _MAX_SHIFT + 1):
        decoded = try_shift(obfuscated, shift)
        if decoded is not None:
            return shift, decoded
    raise LinkDecodeError(obfuscated)


class ShiftCache:
    """Last rotation that decoded a link; 0 means not yet discovered."""

    def __init__(self) -> None:
        self._slot: SingleSlotCache[int] = SingleSlotCache()

    def get(self) -> int:
        return self._slot.get() or 0

    def set(self, shift: int) -> None:
        if not _MIN_SHIFT <= shift <= _MAX_SHIFT:
            raise ValueError(f"shift must be in 1..25, got {shift}")
        self._slot.set(shift)


_DEFAULT_SHIFT_CACHE = ShiftCache()


def default_shift_cache() -> ShiftCache:
    """Shift cache shared by every decoder in this process."""
    return _DEFAULT_SHIFT_CACHE


def derive_tier_src(src_360: str, quality: Quality) -> str | None:
    """Swap the ``/360.mp4`` segment of a decoded 360p URL for ``quality``."""
    head, sep, tail = src_360.rpartition(f"/{Quality.Q360.value}.mp4")
    if not sep:
        return None
    return f"{head}/{quality.value}.mp4{tail}"


class LinkDecoder:
    """Decodes player responses in place, reusing a discovered rotation."""

    def __init__(self, shift_cache: ShiftCache | None = None) -> None:
        self._shift_cache = shift_cache or default_shift_cache()

    def decode_one(self, obfuscated: str) -> str:
        """Try the cached rotation first, fall back to a full search."""
        cached = self._shift_cache.get()
        if cached:
            decoded = try_shift(obfuscated, cached)
            if decoded is not None:
                return decoded
            log.debug("kodik_cached_shift_failed", shift=cached)

        shift, decoded = search_shift(obfuscated)
        if shift != cached:
            self._shift_cache.set(shift)
            log.info("kodik_shift_discovered", shift=shift)
        return decoded

    def decode_all(self, response: PlayerResponse) -> None:
        """Replace every obfuscated ``src`` with a playable URL.

        Not transactional: a failure leaves earlier links decoded.
        """
        base = response.links.quality_360
        for link in base:
            link.src = self.decode_one(link.src)

        for quality in (Quality.Q480, Quality.Q720):
            for index, link in enumerate(response.links.tier(quality)):
                link.src = self._derive_or_decode(base, index, link, quality)

    def _derive_or_decode(
        self, base: list[Link], index: int, link: Link, quality: Quality
    ) -> str:
        if base:
            source = base[min(index, len(base) - 1)].src
            derived = derive_tier_src(source, quality)
            if derived is not None:
                return derived
            log.warning(
                "kodik_tier_derivation_failed",
                quality=quality.value,
                src=source[:120],
            )
        return self.decode_one(link.src)
