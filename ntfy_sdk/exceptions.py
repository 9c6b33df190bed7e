"""
Exceptions raised by the ntfy SDK.

Every error surfaced by the client derives from NtfyError so callers can
catch library failures with a single except clause.
"""
from typing import Optional


class NtfyError(Exception):
    """Base class for all ntfy SDK errors."""


class NtfyTransportError(NtfyError):
    """Network level failure (DNS, TCP, TLS, timeout) talking to the server."""


class NtfyHTTPError(NtfyError):
    """The server answered with a non-success status code."""

    def __init__(self, status_code: int, detail: str = ""):
        self.status_code = status_code
        self.detail = detail
        message = f"ntfy server returned HTTP {status_code}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class PublishError(NtfyHTTPError):
    """A publish request was rejected by the server."""


class DecodeError(NtfyError):
    """A payload could not be decoded as an ntfy message."""

    def __init__(self, message: str, raw: Optional[str] = None):
        self.raw = raw
        super().__init__(message)


class StreamClosedError(NtfyError):
    """The subscription stream ended without the listener being stopped."""


class ListenerCancelled(NtfyError):
    """The listener was stopped while a connection was active."""
