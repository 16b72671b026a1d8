#!/usr/bin/env python3
"""Example 1: Driving the adapter the way a chat plugin host does.

The adapter never does I/O itself. This script plays the host: it asks the
adapter for the request, sends it with httpx, feeds every streamed line to
``chat_output`` and ``tokens``, and reports the final status to ``on_exit``.

Requires OPEN_ROUTER_API_KEY.

Usage:
    python examples/01_host_loop.py "Explain list comprehensions in one line"
"""

from __future__ import annotations

import logging
import sys

import httpx
from rich.console import Console

from chatadapter import OpenRouterAdapter, ParameterValidationError

console = Console()


def main(prompt: str) -> int:
    logging.basicConfig(level=logging.INFO)
    adapter = OpenRouterAdapter()
    messages = [
        {"role": "system", "content": "You are a concise programming assistant."},
        {"role": "user", "content": prompt},
    ]

    try:
        request = adapter.build_request(messages, {"max_tokens": 256})
    except ParameterValidationError as e:
        console.print(f"[red]{e.name}: {e.reason}[/red]")
        return 1

    total_tokens = None
    with httpx.Client(timeout=120.0) as client:
        resp = client.send(request, stream=True)
        try:
            if resp.status_code >= 400:
                resp.read()
            else:
                for line in resp.iter_lines():
                    result = adapter.chat_output(line)
                    if result is not None:
                        console.print(result.output.content, end="")
                    total_tokens = adapter.tokens(line) or total_tokens
        finally:
            resp.close()
        adapter.on_exit({"status": resp.status_code, "body": resp.text if resp.is_error else ""})

    console.print()
    if total_tokens is not None:
        console.print(f"[dim]Tokens used: {total_tokens}[/dim]")
    return 0 if resp.is_success else 1


if __name__ == "__main__":
    sys.exit(main(" ".join(sys.argv[1:]) or "Say hello"))
