"""Settings loading from environment variables and config files."""

from __future__ import annotations

import os
from pathlib import Path
from string import Template
from typing import Any

import yaml
from pydantic import BaseModel, Field

API_KEY_ENV_VAR = "OPEN_ROUTER_API_KEY"


class MissingAPIKeyError(Exception):
    """Raised when a header references a secret that is not configured."""

    def __init__(self, name: str = "api_key", env_var: str = API_KEY_ENV_VAR) -> None:
        self.name = name
        self.env_var = env_var
        super().__init__(
            f"No value configured for '{name}'. Set it with:\n"
            f"  export {env_var}='sk-or-...'"
        )


_DEFAULT_CONFIG_PATH = Path.home() / ".config" / "chatadapter" / "config.yaml"


class Settings(BaseModel):
    """Application settings."""

    open_router_api_key: str = Field(default="", description="OpenRouter API key")
    url: str = Field(
        default="https://openrouter.ai/api/v1/chat/completions",
        description="Chat completions endpoint",
    )
    http_referer: str = Field(
        default="https://github.com/yourusername/codecompanion.nvim",
        description="Value of the HTTP-Referer identification header",
    )
    x_title: str = Field(
        default="codecompanion.nvim",
        description="Value of the X-Title identification header",
    )
    stream: bool = Field(default=True, description="Request streamed responses")
    parameters: dict[str, Any] = Field(
        default_factory=dict,
        description="Overrides for schema parameters, e.g. {'temperature': 0.2}",
    )


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_settings(config_path: Path | None = None) -> Settings:
    """Load settings from environment variables, then overlay config file values."""
    env_values: dict[str, Any] = {}

    env_map = {
        API_KEY_ENV_VAR: "open_router_api_key",
        "CHATADAPTER_URL": "url",
        "CHATADAPTER_HTTP_REFERER": "http_referer",
        "CHATADAPTER_X_TITLE": "x_title",
    }

    for env_var, field_name in env_map.items():
        val = os.environ.get(env_var)
        if val is not None:
            env_values[field_name] = val

    stream = os.environ.get("CHATADAPTER_STREAM")
    if stream is not None:
        env_values["stream"] = _parse_bool(stream)

    # Load config file (lower priority than env vars)
    path = config_path or _DEFAULT_CONFIG_PATH
    file_values: dict[str, Any] = {}
    if path.exists():
        with open(path) as f:
            data = yaml.safe_load(f)
            if isinstance(data, dict):
                file_values = data

    merged = {**file_values, **env_values}

    model = os.environ.get("CHATADAPTER_MODEL")
    if model is not None:
        existing = merged.get("parameters") or {}
        if isinstance(existing, dict):
            merged["parameters"] = {**existing, "model": model}
        else:
            merged["parameters"] = {"model": model}

    return Settings(**merged)


def resolve_headers(
    templates: dict[str, str],
    values: dict[str, str],
    env: dict[str, str] | None = None,
) -> dict[str, str]:
    """Substitute ``${name}`` placeholders in header templates.

    Every placeholder must name a non-empty entry of *values*; otherwise
    MissingAPIKeyError is raised. *env* maps placeholder names to the
    environment variables they come from, for the error message.
    """
    env = env or {}
    resolved: dict[str, str] = {}
    for header, template in templates.items():
        tmpl = Template(template)
        for name in tmpl.get_identifiers():
            if not values.get(name):
                raise MissingAPIKeyError(name, env.get(name, API_KEY_ENV_VAR))
        resolved[header] = tmpl.substitute(values)
    return resolved


# Singleton for convenience
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Reset cached settings (useful for testing)."""
    global _settings
    _settings = None
