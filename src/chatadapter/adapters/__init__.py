"""Chat adapters for chatadapter."""

from chatadapter.adapters.base import ChatAdapter, prepare_data_for_json
from chatadapter.adapters.openrouter import OpenRouterAdapter

__all__ = ["ChatAdapter", "OpenRouterAdapter", "prepare_data_for_json"]
