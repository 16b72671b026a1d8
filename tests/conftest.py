"""Shared test fixtures."""

from __future__ import annotations

import pytest

from chatadapter import config
from chatadapter.adapters.openrouter import OpenRouterAdapter
from chatadapter.config import Settings, reset_settings
from chatadapter.models import AdapterOpts

_ENV_VARS = [
    "OPEN_ROUTER_API_KEY",
    "CHATADAPTER_URL",
    "CHATADAPTER_HTTP_REFERER",
    "CHATADAPTER_X_TITLE",
    "CHATADAPTER_STREAM",
    "CHATADAPTER_MODEL",
]


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch, tmp_path):
    """Keep real env vars and config files out of tests."""
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr(config, "_DEFAULT_CONFIG_PATH", tmp_path / "config.yaml")
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def settings() -> Settings:
    return Settings(open_router_api_key="sk-or-test")


@pytest.fixture
def adapter(settings) -> OpenRouterAdapter:
    """Streaming OpenRouter adapter."""
    return OpenRouterAdapter(settings=settings)


@pytest.fixture
def blocking_adapter(settings) -> OpenRouterAdapter:
    """Non-streaming OpenRouter adapter."""
    return OpenRouterAdapter(settings=settings, opts=AdapterOpts(stream=False))
