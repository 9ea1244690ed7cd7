"""Targeted pattern extraction from Kodik player pages and scripts.

All functions are pure: they search text and either return the captured
value or raise the matching ``KodikError``. No I/O happens here.
"""

from __future__ import annotations

import base64
import binascii
import re

from kodikarr.domain.entities.kodik import VideoIdentity
from kodikarr.domain.exceptions import (
    DecodeError,
    MissingFieldError,
    NoDomainFoundError,
    NoEndpointMarkerError,
    NoPlayerScriptError,
)

# Known player hosts (full host without "www.")
PLAYER_DOMAINS: tuple[str, ...] = (
    "kodik.info",
    "kodik.cc",
    "kodik.biz",
    "aniqit.com",
)

# Dotted hostname: DNS labels of 1-63 chars, lowercase/digits/inner hyphens
_DOMAIN_RE = re.compile(
    r"(?:[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?\.)+[a-z0-9][a-z0-9-]{0,61}[a-z0-9]"
)

# videoInfo.type = 'video';
_VIDEO_INFO_FIELDS = ("type", "hash", "id")
_VIDEO_INFO_RES = {
    name: re.compile(rf"videoInfo\.{name}\s*=\s*'([^']+)'\s*;")
    for name in _VIDEO_INFO_FIELDS
}

# <script type="text/javascript" src="/assets/js/app.player_single.abc123.js">
_PLAYER_SCRIPT_RE = re.compile(
    r"<script[^>]*\bsrc=[\"']/(assets/js/app\.player_single[^\"']*)[\"']"
)

# $.ajax({type:"POST",url:atob("L2Z0b3I="),cache:!1,...
_ENDPOINT_RE = re.compile(
    r"\$\.ajax\(.*?url:\s*atob\(\s*[\"']([A-Za-z0-9+/=]+)[\"']\s*\)",
    re.DOTALL,
)


def extract_domain(url: str) -> str:
    """Return the first dotted hostname found anywhere in ``url``."""
    match = _DOMAIN_RE.search(url)
    if match is None:
        raise NoDomainFoundError(url)
    return match.group(0)


def extract_video_identity(page_text: str) -> VideoIdentity:
    """Collect the ``videoInfo`` triple; all three or nothing."""
    values: dict[str, str] = {}
    for name in _VIDEO_INFO_FIELDS:
        match = _VIDEO_INFO_RES[name].search(page_text)
        if match is None:
            raise MissingFieldError(name)
        values[name] = match.group(1)
    return VideoIdentity(type=values["type"], hash=values["hash"], id=values["id"])


def extract_player_script_url(domain: str, page_text: str) -> str:
    """Absolute URL of the ``app.player_single`` script referenced by the page."""
    match = _PLAYER_SCRIPT_RE.search(page_text)
    if match is None:
        raise NoPlayerScriptError()
    return f"https://{domain}/{match.group(1)}"


def extract_encoded_endpoint(player_script_text: str) -> str:
    """Base64 payload of the ``url: atob("...")`` argument of ``$.ajax``."""
    match = _ENDPOINT_RE.search(player_script_text)
    if match is None:
        raise NoEndpointMarkerError()
    return match.group(1)


def b64_to_text(data: str) -> str:
    """Strict standard base64 followed by UTF-8 validation."""
    try:
        return base64.b64decode(data, validate=True).decode("utf-8")
    except (binascii.Error, ValueError) as exc:
        # UnicodeDecodeError is a ValueError
        raise DecodeError(f"cannot decode {data!r}: {exc}") from exc
