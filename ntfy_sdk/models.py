"""
Pydantic models for messages received from an ntfy server.

The same schema is used for every line of a subscription stream and for the
body returned by a publish request. Optional fields the server leaves out
stay None; nothing is filled in on the client side.
"""
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import DecodeError


class NtfyDTO(BaseModel):
    """
    Base configuration for all ntfy models.

    - Instances are immutable once decoded.
    - Fields the server adds later are ignored instead of rejected.
    """
    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
    )


class EventType(str, Enum):
    """Kinds of events an ntfy server emits."""
    OPEN = "open"                   # Subscription established
    KEEPALIVE = "keepalive"         # Periodic no-op to keep the connection alive
    MESSAGE = "message"             # An actual notification
    POLL_REQUEST = "poll_request"   # Ask the client to poll for messages


class ActionButton(NtfyDTO):
    """An action button attached to a notification."""
    action: str = Field(default="view", description="Action type: view, broadcast or http.")
    label: str = Field(default="", description="Label of the button in the notification.")
    url: Optional[str] = Field(default=None, description="URL to open or call when tapped.")
    clear: bool = Field(default=False, description="Clear the notification after the button is tapped.")
    intent: Optional[str] = None
    extras: Optional[Dict[str, Any]] = None
    headers: Optional[Dict[str, Any]] = None
    method: Optional[str] = None
    body: Optional[str] = None


class Attachment(NtfyDTO):
    """Details about a file attached to a message."""
    name: str = Field(default="", description="Name of the attachment.")
    url: str = Field(default="", description="URL of the attachment.")
    size: Optional[int] = Field(default=None, description="Size in bytes.")
    type: Optional[str] = Field(
        default=None,
        description="MIME type; only set if the file was uploaded to the server.",
    )
    expires: Optional[int] = Field(
        default=None,
        description="Unix time stamp after which the attachment is deleted.",
    )


class NtfyMessage(NtfyDTO):
    """
    One event received from an ntfy server.

    Fields:
        id: Randomly chosen message identifier
        time: Message date and time as a Unix time stamp
        expires: Unix time stamp at which the message expires
        event: Event type (open, keepalive, message, poll_request)
        topic: Comma-separated list of topics the message belongs to
        message: Message body, only present in message events
        title: Message title
        tags: Tags that may map to emojis
        priority: 1 (min) to 5 (max); the client does not enforce a range
        click: URL opened when the notification is clicked
        actions: Action buttons displayed with the notification
        attachment: Attached file details
    """
    id: str
    time: int
    expires: Optional[int] = None
    event: EventType
    topic: str
    message: Optional[str] = None
    title: Optional[str] = None
    tags: Optional[List[str]] = None
    priority: Optional[int] = None
    click: Optional[str] = None
    icon: Optional[str] = None
    actions: Optional[List[ActionButton]] = None
    attachment: Optional[Attachment] = None

    @property
    def is_message(self) -> bool:
        return self.event == EventType.MESSAGE

    def to_json(self) -> str:
        """Serialize back to the wire format, leaving out absent fields."""
        return self.model_dump_json(exclude_none=True)


def decode_message(line: Union[str, bytes]) -> NtfyMessage:
    """
    Decode one JSON object into an NtfyMessage.

    Args:
        line: A single JSON document, e.g. one line of a /json stream

    Raises:
        DecodeError: If the text is not valid JSON or does not match the schema
    """
    try:
        return NtfyMessage.model_validate_json(line)
    except ValidationError as e:
        raw = line.decode("utf-8", errors="replace") if isinstance(line, bytes) else line
        raise DecodeError(f"Invalid ntfy message: {e}", raw=raw) from e
