"""
Subscription listener for ntfy topics.

A Listener keeps a long-lived GET request open on ``{server}{topic}/json``,
decodes every line as an NtfyMessage and hands it to the registered message
handlers, one at a time and in arrival order.

Usage:
    listener = Listener("alerts", token="tk_...")

    @listener.on_message
    def handle(message):
        if message.is_message:
            print(message.title, message.message)

    @listener.on_disconnect
    async def lost(error):
        print(f"Connection lost: {error}")

    # Runs until listener.stop() is called
    await listener.start(reconnect=True)
"""
import asyncio
import inspect
import logging
from enum import Enum
from typing import Awaitable, Callable, List, Optional, Union

import httpx

from .auth import resolve_credentials
from .config import ClientConfig, get_default_config
from .exceptions import (
    ListenerCancelled,
    NtfyHTTPError,
    NtfyTransportError,
    StreamClosedError,
)
from .models import NtfyMessage, decode_message

logger = logging.getLogger(__name__)

# Handlers may be plain functions or coroutines
MessageHandler = Callable[[NtfyMessage], Union[None, Awaitable[None]]]
DisconnectHandler = Callable[[Optional[BaseException]], Union[None, Awaitable[None]]]


class ListenerState(str, Enum):
    IDLE = "idle"
    LISTENING = "listening"


class Listener:
    """
    Subscribes to one topic and dispatches incoming messages.

    The listener:
    - Opens one streaming connection at a time
    - Delivers each decoded message to every message handler before reading the next line
    - Optionally reconnects after a fixed delay, reporting each failure to the
      disconnect handlers
    - Stops only when stop() is called, or on the first failure without reconnect

    Attributes:
        topic: Subscribed topic
        endpoint: Full stream URL, fixed at construction
        reconnect_delay: Seconds to wait before reconnecting
    """

    def __init__(
        self,
        topic: str,
        token: Optional[str] = None,
        *,
        username: Optional[str] = None,
        password: Optional[str] = None,
        server_url: Optional[str] = None,
        config: Optional[ClientConfig] = None,
        reconnect_delay: Optional[float] = None,
    ):
        """
        Initialize the listener.

        Args:
            topic: Topic to subscribe to
            token: Access token or complete Authorization value
            username: Basic auth user, instead of a token
            password: Basic auth password, instead of a token
            server_url: Server to connect to (config.server_url if not provided)
            config: Client configuration (shared default config if not provided)
            reconnect_delay: Backoff between reconnects (config.reconnect_delay if not provided)
        """
        self.config = config or get_default_config()
        self.topic = topic
        self.endpoint = f"{self.config.resolve_server(server_url)}{topic}/json"
        self._authorization = self.config.resolve_token(
            resolve_credentials(token, username, password)
        )
        self.reconnect_delay = (
            reconnect_delay if reconnect_delay is not None else self.config.reconnect_delay
        )

        self._listening = False
        self._stop_event = asyncio.Event()
        self._stream_task: Optional[asyncio.Task] = None
        # Set while a start() call is running, including its cleanup
        self._run_finished: Optional[asyncio.Event] = None

        self._message_handlers: List[MessageHandler] = []
        self._disconnect_handlers: List[DisconnectHandler] = []

        # HTTP client (lazy initialized)
        self._http_client: Optional[httpx.AsyncClient] = None
        self._owns_http_client = False

    # =========================================================================
    # Handler registration
    # =========================================================================

    def on_message(self, func: MessageHandler) -> MessageHandler:
        """
        Decorator to register a handler for received messages.

        Usage:
            @listener.on_message
            async def handle(message):
                print(message.message)
        """
        self._message_handlers.append(func)
        logger.debug(f"Registered message handler for topic: {self.topic}")
        return func

    def on_disconnect(self, func: DisconnectHandler) -> DisconnectHandler:
        """Decorator to register a handler called with the error behind each disconnect."""
        self._disconnect_handlers.append(func)
        logger.debug(f"Registered disconnect handler for topic: {self.topic}")
        return func

    add_message_handler = on_message
    add_disconnect_handler = on_disconnect

    # =========================================================================
    # Lifecycle
    # =========================================================================

    @property
    def is_listening(self) -> bool:
        return self._listening

    @property
    def state(self) -> ListenerState:
        return ListenerState.LISTENING if self._listening else ListenerState.IDLE

    async def start(self, reconnect: bool = False) -> None:
        """
        Start listening and return when the subscription ends.

        Calling start() on a listener that is already listening does nothing.

        Args:
            reconnect: If True, reconnect after any failure except stop(). Each
                failure is passed to the disconnect handlers. If False, the
                first failure is raised to the caller.

        Raises:
            StreamClosedError: The server closed the stream (reconnect=False)
            NtfyTransportError: The connection failed (reconnect=False)
            NtfyHTTPError: The server refused the subscription (reconnect=False)
            DecodeError: A line was not a valid message (reconnect=False)
        """
        if self._listening:
            logger.warning(f"Already listening on {self.endpoint}")
            return

        # A stopped run may still be unwinding; let it finish first
        while self._run_finished is not None:
            await self._run_finished.wait()
            if self._listening:
                return

        stop_event = asyncio.Event()
        finished = asyncio.Event()
        self._stop_event = stop_event
        self._run_finished = finished
        self._listening = True
        logger.info(f"Listening on {self.endpoint}")

        try:
            while self._listening and not stop_event.is_set():
                try:
                    await self._run_connection(stop_event)
                except ListenerCancelled:
                    break
                except Exception as e:
                    if not reconnect:
                        raise
                    logger.warning(f"Disconnected from {self.endpoint}: {e}")
                    await self._notify_disconnected(e)
                    if await self._wait_backoff(stop_event):
                        break
                    logger.debug(f"Reconnecting to {self.endpoint}")
        finally:
            self._listening = False
            await self._close_http_client()
            self._run_finished = None
            finished.set()
            logger.info(f"Stopped listening on {self.endpoint}")

    def stop(self) -> None:
        """
        Ask the listener to stop.

        Does not wait for start() to return. Safe to call at any time, any
        number of times. Must be called from the listener's event loop.
        """
        self._listening = False
        self._stop_event.set()
        task = self._stream_task
        # From inside a handler the read loop ends the run once dispatch is done
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

    async def __aenter__(self) -> "Listener":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()

    # =========================================================================
    # Stream processing
    # =========================================================================

    async def _run_connection(self, stop_event: asyncio.Event) -> None:
        """Run one connection in a child task so stop() can interrupt the read."""
        task = asyncio.create_task(self._listen(stop_event))
        self._stream_task = task
        try:
            await task
        except asyncio.CancelledError:
            if stop_event.is_set():
                raise ListenerCancelled("Listener stopped") from None
            raise
        finally:
            if self._stream_task is task:
                self._stream_task = None

    async def _listen(self, stop_event: asyncio.Event) -> None:
        """
        Read the stream until it fails.

        Always ends with an exception: StreamClosedError when the server hangs
        up, ListenerCancelled when stopped, or the error that broke the stream.
        """
        client = self._ensure_http_client()
        headers = {}
        if self._authorization is not None:
            headers["Authorization"] = self._authorization

        try:
            async with client.stream("GET", self.endpoint, headers=headers) as response:
                if not response.is_success:
                    await response.aread()
                    raise NtfyHTTPError(response.status_code, response.text)

                async for line in response.aiter_lines():
                    if stop_event.is_set():
                        raise ListenerCancelled("Listener stopped")
                    if not line.strip():
                        continue
                    await self._dispatch_message(decode_message(line))
                    if stop_event.is_set():
                        raise ListenerCancelled("Listener stopped")
        except httpx.TransportError as e:
            raise NtfyTransportError(f"Connection to {self.endpoint} failed: {e}") from e

        if stop_event.is_set():
            raise ListenerCancelled("Listener stopped")
        raise StreamClosedError(f"Stream closed: {self.endpoint}")

    async def _wait_backoff(self, stop_event: asyncio.Event) -> bool:
        """Sleep for the reconnect delay. Returns True if stop() was called meanwhile."""
        try:
            await asyncio.wait_for(stop_event.wait(), timeout=self.reconnect_delay)
            return True
        except asyncio.TimeoutError:
            return stop_event.is_set() or not self._listening

    async def _dispatch_message(self, message: NtfyMessage) -> None:
        if not self._message_handlers:
            logger.debug(f"No handlers for message {message.id}")
        for handler in list(self._message_handlers):
            try:
                result = handler(message)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error(f"Error in message handler for {message.id}: {e}")

    async def _notify_disconnected(self, error: Optional[BaseException]) -> None:
        for handler in list(self._disconnect_handlers):
            try:
                result = handler(error)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error(f"Error in disconnect handler: {e}")

    # =========================================================================
    # HTTP Client Management
    # =========================================================================

    def _ensure_http_client(self) -> httpx.AsyncClient:
        """Ensure HTTP client is initialized."""
        if self._http_client is None:
            # No read timeout: the stream stays open indefinitely
            timeout = httpx.Timeout(
                connect=self.config.connect_timeout,
                read=None,
                write=30.0,
                pool=None,
            )
            self._http_client = httpx.AsyncClient(timeout=timeout)
            self._owns_http_client = True
        return self._http_client

    async def _close_http_client(self) -> None:
        if self._http_client is not None and self._owns_http_client:
            await self._http_client.aclose()
            self._http_client = None
            self._owns_http_client = False


# Name used by earlier releases of the client
Server = Listener
