"""chatadapter: OpenRouter adapter for editor chat plugins."""

from importlib.metadata import version

from chatadapter.adapters import ChatAdapter, OpenRouterAdapter, prepare_data_for_json
from chatadapter.models import (
    ChatOutput,
    ExitSignal,
    Message,
    OutputDelta,
    ParameterValidationError,
)

__version__ = version("openrouter-chat-adapter")
__all__ = [
    "ChatAdapter",
    "ChatOutput",
    "ExitSignal",
    "Message",
    "OpenRouterAdapter",
    "OutputDelta",
    "ParameterValidationError",
    "__version__",
    "prepare_data_for_json",
]
