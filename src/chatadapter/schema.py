"""Declarative schema of user-tunable generation parameters."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from chatadapter.models import ParameterValidationError

Validator = Callable[[Any], tuple[bool, str | None]]
ParamType = Literal["string", "number", "integer", "list"]


class SchemaEntry(BaseModel):
    """Description of one request parameter."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    order: int = Field(description="Display and serialization position")
    mapping: str = Field(default="parameters", description="Destination bucket")
    type: ParamType
    optional: bool = False
    default: Any = None
    desc: str = ""
    subtype: ParamType | None = Field(default=None, description="Element type for lists")
    validator: Validator | None = None


# -- Validators -------------------------------------------------------------


def between(low: float, high: float) -> Validator:
    """Inclusive range check."""

    def check(n: Any) -> tuple[bool, str | None]:
        if low <= n <= high:
            return True, None
        return False, f"Must be between {low:g} and {high:g}"

    return check


def positive(n: Any) -> tuple[bool, str | None]:
    if n > 0:
        return True, None
    return False, "Must be greater than 0"


def at_most(limit: int, noun: str) -> Validator:
    """Length check for list values."""

    def check(items: Any) -> tuple[bool, str | None]:
        if len(items) <= limit:
            return True, None
        return False, f"Maximum {limit} {noun}"

    return check


def non_empty(s: Any) -> tuple[bool, str | None]:
    if s.strip():
        return True, None
    return False, "Must not be empty"


def _check_type(value: Any, expected: str) -> bool:
    # bool is an int subclass but never a valid number here
    if isinstance(value, bool):
        return False
    if expected == "string":
        return isinstance(value, str)
    if expected == "number":
        return isinstance(value, (int, float))
    if expected == "integer":
        return isinstance(value, int)
    if expected == "list":
        return isinstance(value, (list, tuple))
    return True


_TYPE_REASONS = {
    "string": "Must be a string",
    "number": "Must be a number",
    "integer": "Must be an integer",
    "list": "Must be a list",
}


class ParameterSchema:
    """Ordered collection of schema entries with validation and merging."""

    def __init__(self, entries: Iterable[SchemaEntry]) -> None:
        self._entries: dict[str, SchemaEntry] = {}
        for entry in entries:
            if entry.name in self._entries:
                raise ValueError(f"Duplicate schema entry: {entry.name}")
            self._entries[entry.name] = entry
        orders = [e.order for e in self._entries.values()]
        if len(set(orders)) != len(orders):
            raise ValueError("Schema entry orders must be unique")

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __getitem__(self, name: str) -> SchemaEntry:
        return self._entries[name]

    def __len__(self) -> int:
        return len(self._entries)

    def entries(self) -> list[SchemaEntry]:
        """Entries sorted by ``order``."""
        return sorted(self._entries.values(), key=lambda e: e.order)

    def names(self) -> list[str]:
        return [e.name for e in self.entries()]

    def defaults(self) -> dict[str, Any]:
        """Default values in order, skipping entries without one."""
        return {e.name: e.default for e in self.entries() if e.default is not None}

    def validate(self, name: str, value: Any) -> tuple[bool, str | None]:
        """Check *value* against the entry's type and validator.

        Returns ``(True, None)`` on success or ``(False, reason)`` where
        reason is meant to be shown to the user verbatim.
        """
        entry = self._entries.get(name)
        if entry is None:
            return False, "Unknown parameter"
        if not _check_type(value, entry.type):
            return False, _TYPE_REASONS[entry.type]
        if entry.type == "list" and entry.subtype is not None:
            if not all(_check_type(item, entry.subtype) for item in value):
                return False, f"Must be a list of {entry.subtype}s"
        if entry.validator is not None:
            return entry.validator(value)
        return True, None

    def resolve(self, overrides: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Merge defaults with *overrides* into outgoing parameters.

        Every value is validated; the first failure raises
        ParameterValidationError carrying the validator's reason. Entries
        left without a value are omitted.
        """
        overrides = dict(overrides or {})
        for name in overrides:
            if name not in self._entries:
                raise ParameterValidationError(name, "Unknown parameter")

        params: dict[str, Any] = {}
        for entry in self.entries():
            value = overrides.get(entry.name, entry.default)
            if value is None:
                if not entry.optional:
                    raise ParameterValidationError(entry.name, "Required")
                continue
            ok, reason = self.validate(entry.name, value)
            if not ok:
                raise ParameterValidationError(entry.name, reason or "Invalid value")
            params[entry.name] = list(value) if entry.type == "list" else value
        return params
