"""
Shared fixtures for ntfy SDK tests.
"""
import pytest

from ntfy_sdk import config as config_module
from ntfy_sdk.config import ClientConfig


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep NTFY_* variables and the shared default config out of tests."""
    for name in ("NTFY_SERVER_URL", "NTFY_TOKEN", "NTFY_TIMEOUT", "NTFY_RECONNECT_DELAY"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config_module, "_default_config", None)


@pytest.fixture
def config():
    """Config pointing at a fake self-hosted server."""
    return ClientConfig(_env_file=None, server_url="https://ntfy.example.com")
