"""
Client configuration for the ntfy SDK.

Each NtfyClient and Listener holds a ClientConfig. Values come from keyword
arguments, then NTFY_* environment variables (or a .env file), then the
defaults below.
"""
from typing import Optional

from pydantic import ConfigDict
from pydantic_settings import BaseSettings

from .auth import authorization_value, basic_token

DEFAULT_SERVER_URL = "https://ntfy.sh/"


class ClientConfig(BaseSettings):
    """
    Default server and credential used when a call site omits them.
    """
    model_config = ConfigDict(
        env_prefix="NTFY_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    server_url: str = DEFAULT_SERVER_URL
    # Complete Authorization value ("Basic ..." / "Bearer ...") or a bare token
    token: Optional[str] = None

    timeout: float = 30.0  # seconds, publish requests
    connect_timeout: float = 10.0  # seconds, opening the subscription stream
    reconnect_delay: float = 1.0  # seconds between reconnect attempts

    def set_server(self, url: str) -> None:
        """Replace the default server URL."""
        self.server_url = url

    def set_authentication(self, password: str, username: str = "") -> None:
        """
        Set the default credential.

        For token mode pass the access token as the password and leave the
        username blank. Passing two empty strings clears the credential.
        """
        if password == "" and username == "":
            self.token = None
        else:
            self.token = basic_token(username, password)

    def resolve_server(self, server_url: Optional[str] = None) -> str:
        """Return the effective server URL with exactly one trailing slash."""
        server = server_url if server_url is not None else self.server_url
        return server.rstrip("/") + "/"

    def resolve_token(self, authorization: Optional[str] = None) -> Optional[str]:
        """Return the effective Authorization value, explicit first."""
        if authorization is not None:
            return authorization_value(authorization)
        return authorization_value(self.token)


_default_config: Optional[ClientConfig] = None


def get_default_config() -> ClientConfig:
    """Return the shared config used when no explicit config is given."""
    global _default_config
    if _default_config is None:
        _default_config = ClientConfig()
    return _default_config


def set_server(url: str) -> None:
    """Set the server URL on the shared default config."""
    get_default_config().set_server(url)


def set_authentication(password: str, username: str = "") -> None:
    """Set the credential on the shared default config."""
    get_default_config().set_authentication(password, username)
