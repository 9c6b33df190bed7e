"""
Publishing client for ntfy.

Usage:
    from ntfy_sdk import NtfyClient, PublishOptions

    options = PublishOptions(title="Backup", tags="floppy_disk", priority=4)
    options.add_view_action("Open logs", "https://example.com/logs")

    async with NtfyClient() as client:
        message = await client.publish("backups", "Nightly backup finished", options)
        print(message.id)
"""
import logging
from typing import Dict, Optional, Union

import httpx

from .auth import resolve_credentials
from .config import ClientConfig, get_default_config
from .exceptions import NtfyTransportError, PublishError
from .headers import PublishOptions, build_metadata
from .models import NtfyMessage, decode_message

logger = logging.getLogger(__name__)


def _header_value(value: str) -> Union[str, bytes]:
    # httpx only accepts ASCII str header values; ntfy reads raw UTF-8
    return value if value.isascii() else value.encode("utf-8")


class NtfyClient:
    """
    Stateless publisher for an ntfy server.

    Every publish() call issues exactly one POST request and decodes the
    message the server echoes back. Nothing is retried.

    Attributes:
        config: Default server and credential used when a call omits them
        timeout: HTTP request timeout in seconds
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        timeout: Optional[float] = None,
    ):
        """
        Initialize the client.

        Args:
            config: Client configuration (shared default config if not provided)
            timeout: HTTP request timeout in seconds (config.timeout if not provided)
        """
        self.config = config or get_default_config()
        self.timeout = timeout if timeout is not None else self.config.timeout
        self._http_client: Optional[httpx.AsyncClient] = None

    async def _ensure_http_client(self) -> httpx.AsyncClient:
        """Ensure HTTP client is initialized."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.timeout)
        return self._http_client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def __aenter__(self) -> "NtfyClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _build_request(
        self,
        client: httpx.AsyncClient,
        topic: str,
        message: str,
        options: Optional[PublishOptions] = None,
        authorization: Optional[str] = None,
        server_url: Optional[str] = None,
    ) -> httpx.Request:
        """Build the POST request for one message without sending it."""
        url = self.config.resolve_server(server_url) + topic
        headers: Dict[str, Union[str, bytes]] = {
            name: _header_value(value) for name, value in build_metadata(options).items()
        }
        token = self.config.resolve_token(authorization)
        if token is not None:
            headers["Authorization"] = token
        headers["Content-Type"] = "text/plain; charset=utf-8"
        return client.build_request(
            "POST",
            url,
            headers=headers,
            content=message.encode("utf-8"),
        )

    async def publish(
        self,
        topic: str,
        message: str,
        options: Optional[PublishOptions] = None,
        token: Optional[str] = None,
        server_url: Optional[str] = None,
        *,
        username: Optional[str] = None,
        password: Optional[str] = None,
    ) -> NtfyMessage:
        """
        Publish a message to a topic.

        Args:
            topic: Target topic name
            message: Plain text message body
            options: Title, tags, priority, actions and other extras
            token: Access token or complete Authorization value
            server_url: Server to publish to (config.server_url if not provided)
            username: Basic auth user, instead of a token
            password: Basic auth password, instead of a token

        Returns:
            The message as stored by the server

        Raises:
            PublishError: If the server answers with a non-success status
            NtfyTransportError: If the server cannot be reached
            DecodeError: If the response is not a valid ntfy message
        """
        client = await self._ensure_http_client()
        authorization = resolve_credentials(token, username, password)
        request = self._build_request(client, topic, message, options, authorization, server_url)

        try:
            response = await client.send(request)
        except httpx.TransportError as e:
            logger.error(f"Error publishing to {topic}: {e}")
            raise NtfyTransportError(f"Failed to publish to {topic}: {e}") from e

        if not response.is_success:
            logger.error(f"Publish to {topic} rejected: {response.status_code}")
            raise PublishError(response.status_code, response.text)

        result = decode_message(response.text)
        logger.debug(f"Published message {result.id} to {topic}")
        return result


async def publish(
    topic: str,
    message: str,
    options: Optional[PublishOptions] = None,
    token: Optional[str] = None,
    server_url: Optional[str] = None,
    *,
    username: Optional[str] = None,
    password: Optional[str] = None,
    config: Optional[ClientConfig] = None,
) -> NtfyMessage:
    """Publish one message using a short-lived NtfyClient."""
    async with NtfyClient(config) as client:
        return await client.publish(
            topic,
            message,
            options,
            token,
            server_url,
            username=username,
            password=password,
        )
