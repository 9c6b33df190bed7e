"""
Tests for ClientConfig and credential helpers.
"""
import base64

import pytest

from ntfy_sdk import config as config_module
from ntfy_sdk.auth import authorization_value, basic_token, resolve_credentials
from ntfy_sdk.config import DEFAULT_SERVER_URL, ClientConfig, get_default_config


def _basic(user: str, password: str) -> str:
    return "Basic " + base64.b64encode(f"{user}:{password}".encode()).decode()


class TestResolveServer:
    """Tests for server URL resolution."""

    def test_default_server(self):
        assert ClientConfig(_env_file=None).resolve_server() == "https://ntfy.sh/"
        assert DEFAULT_SERVER_URL == "https://ntfy.sh/"

    @pytest.mark.parametrize(
        "server",
        ["https://my.server:8080", "https://my.server:8080/", "https://my.server:8080//"],
    )
    def test_exactly_one_trailing_slash(self, server):
        cfg = ClientConfig(_env_file=None)
        assert cfg.resolve_server(server) == "https://my.server:8080/"

    def test_set_server_changes_default(self):
        cfg = ClientConfig(_env_file=None)
        cfg.set_server("https://my.server:8080")
        assert cfg.resolve_server() == "https://my.server:8080/"

    def test_explicit_server_wins(self):
        cfg = ClientConfig(_env_file=None, server_url="https://a.example.com")
        assert cfg.resolve_server("https://b.example.com") == "https://b.example.com/"

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("NTFY_SERVER_URL", "https://env.example.com")
        monkeypatch.setenv("NTFY_TOKEN", "tk_env")

        cfg = ClientConfig(_env_file=None)

        assert cfg.resolve_server() == "https://env.example.com/"
        assert cfg.resolve_token() == "Bearer tk_env"


class TestAuthentication:
    """Tests for credential defaults and resolution."""

    def test_no_credential_by_default(self):
        assert ClientConfig(_env_file=None).resolve_token() is None

    def test_set_authentication_with_user(self):
        cfg = ClientConfig(_env_file=None)
        cfg.set_authentication("secret", "phil")
        assert cfg.resolve_token() == _basic("phil", "secret")

    def test_set_authentication_token_mode(self):
        """A token passed as the password becomes Basic with an empty user."""
        cfg = ClientConfig(_env_file=None)
        cfg.set_authentication("tk_token")
        assert cfg.resolve_token() == _basic("", "tk_token")

    def test_clearing_authentication(self):
        cfg = ClientConfig(_env_file=None)
        cfg.set_authentication("secret", "phil")
        cfg.set_authentication("", "")
        assert cfg.resolve_token() is None

    def test_explicit_token_wins(self):
        cfg = ClientConfig(_env_file=None)
        cfg.set_authentication("secret", "phil")
        assert cfg.resolve_token("tk_abc") == "Bearer tk_abc"

    def test_authorization_value(self):
        assert authorization_value(None) is None
        assert authorization_value("tk_abc") == "Bearer tk_abc"
        assert authorization_value("Bearer tk_abc") == "Bearer tk_abc"
        assert authorization_value("Basic cGhpbDpzZWNyZXQ=") == "Basic cGhpbDpzZWNyZXQ="

    def test_short_token_is_bearer(self):
        assert authorization_value("abc") == "Bearer abc"

    def test_basic_token_utf8(self):
        assert basic_token("jörg", "pässword") == _basic("jörg", "pässword")

    def test_resolve_credentials(self):
        assert resolve_credentials() is None
        assert resolve_credentials(token="tk_abc") == "Bearer tk_abc"
        assert resolve_credentials(username="phil", password="secret") == _basic("phil", "secret")

    def test_token_and_password_conflict(self):
        with pytest.raises(ValueError):
            resolve_credentials(token="tk_abc", username="phil", password="secret")


class TestDefaultConfig:
    """Tests for the shared default config."""

    def test_default_config_is_shared(self):
        assert get_default_config() is get_default_config()

    def test_module_setters_update_default(self):
        config_module.set_server("https://shared.example.com")
        config_module.set_authentication("tk_shared")

        cfg = get_default_config()
        assert cfg.resolve_server() == "https://shared.example.com/"
        assert cfg.resolve_token() == _basic("", "tk_shared")
