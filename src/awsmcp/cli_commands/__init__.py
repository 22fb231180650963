"""CLI subcommand registration."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all subcommands on the CLI group."""
    from awsmcp.cli_commands.describe import describe
    from awsmcp.cli_commands.serve import serve

    cli.add_command(serve)
    cli.add_command(describe)
