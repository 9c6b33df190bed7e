"""
ntfy SDK - publish to and subscribe from ntfy push notification topics.
"""

__version__ = "0.1.0"

from .client import NtfyClient, publish
from .config import (
    DEFAULT_SERVER_URL,
    ClientConfig,
    get_default_config,
    set_authentication,
    set_server,
)
from .exceptions import (
    DecodeError,
    ListenerCancelled,
    NtfyError,
    NtfyHTTPError,
    NtfyTransportError,
    PublishError,
    StreamClosedError,
)
from .headers import PublishOptions, build_metadata
from .listener import Listener, ListenerState, Server
from .models import ActionButton, Attachment, EventType, NtfyMessage, decode_message

__all__ = [
    "__version__",
    "NtfyClient",
    "publish",
    "Listener",
    "ListenerState",
    "Server",
    "PublishOptions",
    "build_metadata",
    "ClientConfig",
    "DEFAULT_SERVER_URL",
    "get_default_config",
    "set_server",
    "set_authentication",
    "NtfyMessage",
    "ActionButton",
    "Attachment",
    "EventType",
    "decode_message",
    "NtfyError",
    "NtfyTransportError",
    "NtfyHTTPError",
    "PublishError",
    "DecodeError",
    "StreamClosedError",
    "ListenerCancelled",
]
