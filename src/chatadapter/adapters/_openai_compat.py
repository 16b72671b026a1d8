"""Shared handler set for adapters speaking the OpenAI chat completions format."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from typing import Any

import httpx

from chatadapter.adapters.base import Chunk, prepare_data_for_json
from chatadapter.config import resolve_headers
from chatadapter.models import (
    AdapterFeatures,
    AdapterOpts,
    ChatOutput,
    ExitSignal,
    Message,
    OutputDelta,
    Roles,
)
from chatadapter.schema import ParameterSchema

logger = logging.getLogger(__name__)

MessageLike = Message | Mapping[str, Any]


def _as_message(msg: MessageLike) -> Message:
    if isinstance(msg, Message):
        return msg
    return Message.model_validate(msg)


def _text(content: Any) -> str:
    return content if isinstance(content, str) else ""


class OpenAICompatibleAdapter:
    """Base for adapters whose API uses the OpenAI /chat/completions format.

    Subclass and set ``name``, ``url``, ``env`` and ``header_templates`` to
    create a concrete adapter. Header templates may reference entries of
    ``env`` as ``${name}``; they are resolved once, here, at construction.
    """

    name: str = ""
    display_name: str = ""
    url: str = ""
    env: dict[str, str] = {}
    header_templates: dict[str, str] = {"Content-Type": "application/json"}
    roles: Roles = Roles()
    features: AdapterFeatures = AdapterFeatures()

    def __init__(
        self,
        schema: ParameterSchema,
        secrets: dict[str, str],
        *,
        url: str | None = None,
        extra_headers: dict[str, str] | None = None,
        opts: AdapterOpts | None = None,
        parameter_overrides: Mapping[str, Any] | None = None,
    ) -> None:
        self.schema = schema
        if url is not None:
            self.url = url
        self.opts = opts or AdapterOpts()
        templates = {**self.header_templates, **(extra_headers or {})}
        self.headers = resolve_headers(templates, secrets, env=self.env)
        self.parameter_overrides: dict[str, Any] = dict(parameter_overrides or {})
        self.parameters: dict[str, Any] = {}

    # -- Parameters -----------------------------------------------------------

    def resolve_parameters(self, overrides: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Refresh ``parameters`` from schema defaults and overrides.

        Raises ParameterValidationError before anything is sent if a value
        is out of range.
        """
        merged = {**self.parameter_overrides, **(overrides or {})}
        self.parameters = self.schema.resolve(merged)
        return self.parameters

    # -- Lifecycle handlers ---------------------------------------------------

    def setup(self) -> bool:
        if self.opts.stream:
            self.parameters["stream"] = True
        return True

    def form_parameters(
        self,
        params: dict[str, Any],
        messages: Sequence[MessageLike],
    ) -> dict[str, Any]:
        return params

    def form_messages(self, messages: Sequence[MessageLike]) -> dict[str, Any]:
        """Map roles to the wire format and merge adjacent same-role messages."""
        processed: list[dict[str, str]] = []

        for msg in map(_as_message, messages):
            role = self.roles.llm if msg.role == "llm" else msg.role
            content = msg.content or ""
            if processed and processed[-1]["role"] == role:
                processed[-1]["content"] += "\n\n" + content
            else:
                processed.append({"role": role, "content": content})

        return {"messages": processed}

    def tokens(self, data: Chunk | None) -> int | None:
        payload = self._decode(data)
        if payload is None:
            return None
        usage = payload.get("usage")
        if not isinstance(usage, dict):
            return None
        total = usage.get("total_tokens")
        if total is not None:
            logger.debug("Tokens: %s", total)
        return total

    def chat_output(self, data: Chunk | None) -> ChatOutput | None:
        delta = self._extract_delta(data)
        if delta is None:
            return None
        role = delta.get("role")
        return ChatOutput(
            status="success",
            output=OutputDelta(
                role=role if isinstance(role, str) else None,
                content=_text(delta.get("content")),
            ),
        )

    def inline_output(self, data: Chunk | None, context: Any = None) -> str | None:
        delta = self._extract_delta(data)
        if delta is None:
            return None
        return _text(delta.get("content"))

    def on_exit(self, data: ExitSignal | Mapping[str, Any]) -> None:
        if isinstance(data, Mapping):
            status, body = data.get("status"), data.get("body", "")
        else:
            status, body = data.status, data.body
        if isinstance(status, int) and status >= 400:
            logger.error("%s Error [%d]: %s", self.display_name or self.name, status, body)

    # -- Request description --------------------------------------------------

    def build_payload(
        self,
        messages: Sequence[MessageLike],
        overrides: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Run the host's request-building sequence and return the JSON body."""
        self.resolve_parameters(overrides)
        self.setup()
        params = self.form_parameters(self.parameters, messages)
        return {**params, **self.form_messages(messages)}

    def build_request(
        self,
        messages: Sequence[MessageLike],
        overrides: Mapping[str, Any] | None = None,
    ) -> httpx.Request:
        """Describe the outgoing call as an unsent ``httpx.Request``."""
        return httpx.Request(
            "POST",
            self.url,
            headers=self.headers,
            json=self.build_payload(messages, overrides),
        )

    # -- Chunk parsing --------------------------------------------------------

    @staticmethod
    def _decode(data: Chunk | None) -> dict[str, Any] | None:
        """Decode a chunk, or None if it is empty, partial or not an object."""
        if not data:
            return None
        try:
            payload = json.loads(prepare_data_for_json(data))
        except (ValueError, TypeError, RecursionError):
            return None
        return payload if isinstance(payload, dict) else None

    def _extract_delta(self, data: Chunk | None) -> dict[str, Any] | None:
        """First choice's ``delta`` (streaming) or ``message`` (non-streaming)."""
        payload = self._decode(data)
        if payload is None:
            return None
        choices = payload.get("choices")
        if not isinstance(choices, list) or not choices:
            return None
        choice = choices[0]
        if not isinstance(choice, dict):
            return None
        delta = choice.get("delta" if self.opts.stream else "message")
        return delta if isinstance(delta, dict) else None
