"""use_aws MCP server CLI entrypoint."""

from __future__ import annotations

import click

from awsmcp import __version__


@click.group()
@click.version_option(version=__version__, prog_name="awsmcp")
def main() -> None:
    """use_aws — the AWS CLI as an MCP tool."""


# Register subcommands
from awsmcp.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
