"""Typer CLI for chatadapter."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from chatadapter.adapters.openrouter import OPENROUTER_SCHEMA, OpenRouterAdapter
from chatadapter.config import MissingAPIKeyError, get_settings
from chatadapter.models import AdapterOpts, ParameterValidationError

app = typer.Typer(
    name="chatadapter",
    help="chatadapter: OpenRouter adapter for editor chat plugins",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console()


def _parse_assignments(pairs: list[str]) -> dict[str, Any]:
    """Parse ``NAME=VALUE`` pairs; values are read as JSON when possible."""
    values: dict[str, Any] = {}
    for pair in pairs:
        if "=" not in pair:
            raise typer.BadParameter(f"Expected NAME=VALUE, got '{pair}'")
        name, raw = pair.split("=", 1)
        try:
            values[name.strip()] = json.loads(raw)
        except json.JSONDecodeError:
            values[name.strip()] = raw
    return values


def _make_adapter(stream: bool | None = None, require_key: bool = True) -> OpenRouterAdapter:
    settings = get_settings()
    opts = AdapterOpts(stream=settings.stream if stream is None else stream)
    api_key = settings.open_router_api_key
    if not require_key:
        # decode never sends a request
        api_key = api_key or "unused"
    try:
        return OpenRouterAdapter(api_key, settings=settings, opts=opts)
    except MissingAPIKeyError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)


@app.command()
def schema() -> None:
    """List the tunable generation parameters."""
    table = Table(title="OpenRouter Parameters")
    table.add_column("#", justify="right")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Type", style="magenta", no_wrap=True)
    table.add_column("Default", style="green")
    table.add_column("Optional")
    table.add_column("Description", style="yellow")

    for entry in OPENROUTER_SCHEMA.entries():
        type_name = entry.type
        if entry.subtype:
            type_name = f"{entry.type}[{entry.subtype}]"
        table.add_row(
            str(entry.order),
            entry.name,
            type_name,
            "-" if entry.default is None else json.dumps(entry.default),
            "yes" if entry.optional else "no",
            entry.desc,
        )

    console.print(table)


@app.command()
def validate(
    params: list[str] = typer.Argument(None, help="Overrides as NAME=VALUE"),
) -> None:
    """Check parameter overrides and show the merged result."""
    overrides = {**get_settings().parameters, **_parse_assignments(params or [])}
    try:
        merged = OPENROUTER_SCHEMA.resolve(overrides)
    except ParameterValidationError as e:
        console.print(f"[red]{e.name}: {e.reason}[/red]")
        raise typer.Exit(1)

    console.print("[green]Parameters OK[/green]")
    for name, value in merged.items():
        console.print(f"  {name}: {json.dumps(value)}")


@app.command()
def payload(
    messages_file: Path = typer.Argument(help="JSON or YAML list of {role, content}"),
    param: list[str] = typer.Option(None, "--param", "-p", help="Override as NAME=VALUE"),
) -> None:
    """Print the request body that would be sent to OpenRouter."""
    if not messages_file.exists():
        console.print(f"[red]File not found: {messages_file}[/red]")
        raise typer.Exit(1)
    with open(messages_file) as f:
        messages = yaml.safe_load(f)
    if not isinstance(messages, list):
        console.print("[red]Messages file must contain a list[/red]")
        raise typer.Exit(1)

    adapter = _make_adapter()
    try:
        body = adapter.build_payload(messages, _parse_assignments(param or []))
    except ParameterValidationError as e:
        console.print(f"[red]{e.name}: {e.reason}[/red]")
        raise typer.Exit(1)

    typer.echo(json.dumps(body, indent=2))


@app.command()
def decode(
    chunk: str = typer.Argument(help="One raw response chunk, e.g. 'data: {...}'"),
    stream: bool = typer.Option(True, "--stream/--no-stream", help="Parse as a streamed delta"),
) -> None:
    """Show what the handlers extract from a single response chunk."""
    adapter = _make_adapter(stream, require_key=False)
    output = adapter.chat_output(chunk)
    tokens = adapter.tokens(chunk)

    if output is None and tokens is None:
        console.print("[dim]No output for this chunk[/dim]")
        return
    if output is not None:
        console.print(f"[bold green]Role:[/bold green] {output.output.role or '-'}")
        console.print(f"[bold green]Content:[/bold green] {escape(output.output.content)}")
    if tokens is not None:
        console.print(f"[bold green]Tokens:[/bold green] {tokens}")
