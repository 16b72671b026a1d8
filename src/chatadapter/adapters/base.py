"""Base protocol for chat adapters."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from chatadapter.models import ChatOutput, ExitSignal, Message

# A raw chunk as delivered by the host: text, or a record with a ``body``.
Chunk = str | Mapping[str, Any]


@runtime_checkable
class ChatAdapter(Protocol):
    """Interface the host drives at each point of a request's lifecycle.

    The host calls ``setup`` once, then ``form_parameters`` and
    ``form_messages`` to build the body, then feeds every response chunk to
    ``chat_output`` (or ``inline_output``) and ``tokens``, and finally
    ``on_exit``. No method performs I/O.
    """

    @property
    def name(self) -> str:
        """Adapter name, e.g. 'openrouter'."""
        ...

    def setup(self) -> bool:
        """Prepare outgoing parameters before the first request."""
        ...

    def form_parameters(
        self,
        params: dict[str, Any],
        messages: list[Message],
    ) -> dict[str, Any]:
        """Shape the generation parameters of the request body."""
        ...

    def form_messages(self, messages: list[Message]) -> dict[str, Any]:
        """Return ``{"messages": [...]}`` ready for the request body."""
        ...

    def tokens(self, data: Chunk | None) -> int | None:
        """Total token count from a chunk, or None."""
        ...

    def chat_output(self, data: Chunk | None) -> ChatOutput | None:
        """Role and content from a chunk, or None if there is nothing yet."""
        ...

    def inline_output(self, data: Chunk | None, context: Any = None) -> str | None:
        """Content string for inline edits, or None."""
        ...

    def on_exit(self, data: ExitSignal | Mapping[str, Any]) -> None:
        """Observe the final status of the exchange."""
        ...


def prepare_data_for_json(data: Chunk) -> str:
    """Strip stream framing so *data* can be handed to a JSON decoder.

    A record is unwrapped to its ``body``. For text, everything before the
    first ``{`` is dropped, so ``'data: {...}'`` becomes ``'{...}'``. Text
    without a ``{`` comes back unchanged.
    """
    if isinstance(data, Mapping):
        return data.get("body") or ""
    start = data.find("{")
    if start == -1:
        return data
    return data[start:]
