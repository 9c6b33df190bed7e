"""
Authorization header helpers.

ntfy accepts either HTTP Basic credentials or a Bearer access token. Access
tokens can also be sent as the password of a Basic pair with an empty user.
"""
import base64
from typing import Optional

BASIC_PREFIX = "Basic "
BEARER_PREFIX = "Bearer "


def basic_token(username: str, password: str) -> str:
    """Encode a username/password pair as a Basic Authorization value."""
    raw = f"{username}:{password}".encode("utf-8")
    return BASIC_PREFIX + base64.b64encode(raw).decode("ascii")


def authorization_value(token: Optional[str]) -> Optional[str]:
    """
    Turn a caller supplied token into an Authorization header value.

    Values already carrying a Basic or Bearer scheme are returned as-is,
    anything else is treated as a bare access token.
    """
    if token is None:
        return None
    if token.startswith(BASIC_PREFIX) or token.startswith(BEARER_PREFIX):
        return token
    return BEARER_PREFIX + token


def resolve_credentials(
    token: Optional[str] = None,
    username: Optional[str] = None,
    password: Optional[str] = None,
) -> Optional[str]:
    """
    Pick the Authorization value for explicit call-site credentials.

    Returns None when nothing was supplied so the caller can fall back to its
    configured default.

    Raises:
        ValueError: If both a token and a username/password pair are given
    """
    has_pair = username is not None or password is not None
    if token is not None and has_pair:
        raise ValueError("Pass either a token or a username/password pair, not both")
    if has_pair:
        return basic_token(username or "", password or "")
    return authorization_value(token)
