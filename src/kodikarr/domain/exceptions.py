"""Errors raised while resolving a Kodik player page.

Every stage of the pipeline fails fast with one of these; callers may
branch on the class or on ``kind``.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    NO_DOMAIN_FOUND = "NoDomainFound"
    MISSING_FIELD = "MissingField"
    NO_PLAYER_SCRIPT = "NoPlayerScript"
    NO_ENDPOINT_MARKER = "NoEndpointMarker"
    TRANSPORT_FAILURE = "TransportFailure"
    DECODE_FAILURE = "DecodeFailure"
    LINK_DECODE_FAILED = "LinkDecodeFailed"


class KodikError(Exception):
    """Base error for the resolution pipeline."""

    kind: ErrorKind


class NoDomainFoundError(KodikError):
    kind = ErrorKind.NO_DOMAIN_FOUND

    def __init__(self, url: str) -> None:
        super().__init__(f"No valid domain found in {url!r}")
        self.url = url


class MissingFieldError(KodikError):
    """A ``videoInfo.<field>`` assignment is absent from the page."""

    kind = ErrorKind.MISSING_FIELD

    def __init__(self, field: str) -> None:
        super().__init__(f"videoInfo.{field} not found in player page")
        self.field = field


class NoPlayerScriptError(KodikError):
    kind = ErrorKind.NO_PLAYER_SCRIPT

    def __init__(self) -> None:
        super().__init__("app.player_single script tag not found in player page")


class NoEndpointMarkerError(KodikError):
    kind = ErrorKind.NO_ENDPOINT_MARKER

    def __init__(self) -> None:
        super().__init__("$.ajax atob(...) endpoint marker not found in player script")


class TransportError(KodikError):
    """Network, HTTP status or body read failure of the HTTP collaborator."""

    kind = ErrorKind.TRANSPORT_FAILURE

    def __init__(self, message: str, *, url: str = "") -> None:
        super().__init__(message)
        self.url = url


class InvalidResponseError(TransportError):
    """Player API answered with a body that is not the expected shape."""


class DecodeError(KodikError):
    """Base64 or UTF-8 validation failure."""

    kind = ErrorKind.DECODE_FAILURE


class LinkDecodeError(KodikError):
    """No rotation in 1..25 turns the link into valid base64 text."""

    kind = ErrorKind.LINK_DECODE_FAILED

    def __init__(self, original: str) -> None:
        super().__init__(f"Src: {original} cannot be decoded")
        self.original = original
