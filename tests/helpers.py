"""
Helpers for building fake ntfy server traffic in tests.
"""
import json

import httpx


def make_message(**overrides):
    """Build a message dict as the server would send it."""
    payload = {
        "id": "sPs71M8A2T",
        "time": 1700000000,
        "expires": 1700043200,
        "event": "message",
        "topic": "alerts",
        "message": "Backup finished",
    }
    payload.update(overrides)
    return payload


def message_line(**overrides) -> bytes:
    """One newline-terminated line of a /json stream."""
    return (json.dumps(make_message(**overrides)) + "\n").encode("utf-8")


def mock_client(handler) -> httpx.AsyncClient:
    """HTTP client whose requests are answered by handler."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))
