"""OpenRouter adapter: OpenAI-compatible handlers plus OpenRouter's schema."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from chatadapter.adapters._openai_compat import OpenAICompatibleAdapter
from chatadapter.config import API_KEY_ENV_VAR, Settings, get_settings
from chatadapter.models import AdapterFeatures, AdapterOpts, Roles
from chatadapter.schema import (
    ParameterSchema,
    SchemaEntry,
    at_most,
    between,
    non_empty,
    positive,
)

_DEFAULT_URL = "https://openrouter.ai/api/v1/chat/completions"

OPENROUTER_SCHEMA = ParameterSchema(
    [
        SchemaEntry(
            name="model",
            order=1,
            type="string",
            default="openai/gpt-3.5-turbo",
            desc="Model ID from OpenRouter (e.g., 'openai/gpt-3.5-turbo', 'anthropic/claude-2')",
            validator=non_empty,
        ),
        SchemaEntry(
            name="temperature",
            order=2,
            type="number",
            optional=True,
            default=0.7,
            desc="Sampling temperature (0-2). Higher values = more creative, lower = more focused.",
            validator=between(0, 2),
        ),
        SchemaEntry(
            name="top_p",
            order=3,
            type="number",
            optional=True,
            default=1,
            desc="Nucleus sampling: consider only top_p probability mass.",
            validator=between(0, 1),
        ),
        SchemaEntry(
            name="max_tokens",
            order=4,
            type="integer",
            optional=True,
            default=2048,
            desc="Maximum number of tokens to generate",
            validator=positive,
        ),
        SchemaEntry(
            name="stop",
            order=5,
            type="list",
            subtype="string",
            optional=True,
            default=None,
            desc="Up to 4 stop sequences",
            validator=at_most(4, "stop sequences"),
        ),
        SchemaEntry(
            name="frequency_penalty",
            order=6,
            type="number",
            optional=True,
            default=0,
            desc="Penalize new tokens based on frequency (-2 to 2)",
            validator=between(-2, 2),
        ),
        SchemaEntry(
            name="presence_penalty",
            order=7,
            type="number",
            optional=True,
            default=0,
            desc="Penalize new tokens based on presence (-2 to 2)",
            validator=between(-2, 2),
        ),
    ]
)


class OpenRouterAdapter(OpenAICompatibleAdapter):
    """OpenRouter chat completions (OpenAI-compatible)."""

    name = "openrouter"
    display_name = "OpenRouter"
    url = _DEFAULT_URL
    env = {"api_key": API_KEY_ENV_VAR}
    header_templates = {
        "Content-Type": "application/json",
        "Authorization": "Bearer ${api_key}",
    }
    roles = Roles(llm="assistant", user="user")
    # Most OpenRouter models don't take image input
    features = AdapterFeatures(text=True, tokens=True, vision=False)

    def __init__(
        self,
        api_key: str | None = None,
        *,
        settings: Settings | None = None,
        opts: AdapterOpts | None = None,
        parameter_overrides: Mapping[str, Any] | None = None,
    ) -> None:
        settings = settings or get_settings()
        if api_key is None:
            api_key = settings.open_router_api_key
        super().__init__(
            OPENROUTER_SCHEMA,
            {"api_key": api_key},
            url=settings.url,
            extra_headers={
                "HTTP-Referer": settings.http_referer,
                "X-Title": settings.x_title,
            },
            opts=opts or AdapterOpts(stream=settings.stream),
            parameter_overrides={**settings.parameters, **(parameter_overrides or {})},
        )
