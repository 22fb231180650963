"""``awsmcp describe`` — preview a use_aws call without running it."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import click

from awsmcp.cli_commands._output import err_console, print_description


def _load_arguments(source: str) -> Any:
    if source.startswith("@"):
        return json.loads(Path(source[1:]).read_text(encoding="utf-8"))
    return json.loads(source)


@click.command()
@click.argument("arguments")
@click.option("--tool", "tool_name", default="use_aws", help="Tool name to describe.")
def describe(arguments: str, tool_name: str) -> None:
    """Describe a tool call and whether it needs acceptance.

    ARGUMENTS is the tool-call arguments object as JSON, or @FILE to read it
    from a file.
    """
    from awsmcp.protocol.errors import SerializationError
    from awsmcp.tool.handler import ToolCallHandler

    try:
        data = _load_arguments(arguments)
    except (OSError, json.JSONDecodeError) as exc:
        err_console.print(f"[red]Cannot read arguments:[/red] {exc}")
        raise SystemExit(2) from exc

    if not isinstance(data, dict):
        err_console.print("[red]Arguments must be a JSON object[/red]")
        raise SystemExit(2)

    handler = ToolCallHandler()
    try:
        description = handler.describe_call(tool_name, data)
    except SerializationError as exc:
        err_console.print(f"[red]Invalid arguments:[/red] {exc.message}")
        for error in exc.data or []:
            loc = ".".join(str(part) for part in error.get("loc", ()))
            err_console.print(f"  {loc}: {error.get('msg', '')}")
        raise SystemExit(2) from exc

    if tool_name != handler.tool_name:
        err_console.print(description)
        raise SystemExit(1)

    spec = handler.build_spec(data)
    print_description(description, requires_acceptance=handler.policy.requires_acceptance(spec))
