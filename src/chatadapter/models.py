"""Pydantic data models for chatadapter."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class Roles(BaseModel):
    """Maps host-facing roles to the roles sent over the wire."""

    model_config = ConfigDict(frozen=True)

    llm: str = "assistant"
    user: str = "user"


class AdapterOpts(BaseModel):
    """Behavioural options for an adapter."""

    stream: bool = Field(default=True, description="Request and parse streamed responses")


class AdapterFeatures(BaseModel):
    """Capabilities advertised to the host."""

    model_config = ConfigDict(frozen=True)

    text: bool = True
    tokens: bool = True
    vision: bool = False


class Message(BaseModel):
    """A single chat message."""

    role: str
    content: str | None = ""


class OutputDelta(BaseModel):
    """Role and content extracted from one response chunk."""

    role: str | None = None
    content: str = ""


class ChatOutput(BaseModel):
    """What ``chat_output`` hands back to the host for one chunk."""

    status: Literal["success"] = "success"
    output: OutputDelta


class ExitSignal(BaseModel):
    """Final status of an HTTP exchange, passed to ``on_exit``."""

    status: int
    body: str = ""


class ParameterValidationError(ValueError):
    """Raised when a generation parameter fails its schema check."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"Invalid value for '{name}': {reason}")
