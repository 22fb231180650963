"""``awsmcp serve`` — run the MCP server over stdio."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import click

from awsmcp.cli_commands._output import configure_logging, err_console

logger = logging.getLogger(__name__)


@click.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML settings file.",
)
@click.option(
    "--manifest",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Capability manifest served by tools/list (default: schema.json).",
)
@click.option("--executable", default=None, help="AWS CLI executable (default: aws).")
@click.option("--timeout", type=float, default=None, help="Seconds before a command is killed.")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default=None,
    help="Logging level (default: INFO).",
)
def serve(
    config_path: Path | None,
    manifest: Path | None,
    executable: str | None,
    timeout: float | None,
    log_level: str | None,
) -> None:
    """Serve the use_aws tool on stdin/stdout."""
    from awsmcp.app import run_server
    from awsmcp.config import ConfigError, SettingsLoader, build_settings
    from awsmcp.protocol.errors import FramingError

    overrides = {
        "manifest_path": manifest,
        "executable": executable,
        "timeout": timeout,
        "log_level": log_level.upper() if log_level else None,
    }
    try:
        if config_path is not None:
            settings = SettingsLoader(config_path).load(**overrides)
        else:
            settings = build_settings(**overrides)
    except ConfigError as exc:
        err_console.print(f"[red]Configuration error:[/red] {exc}")
        raise SystemExit(2) from exc

    configure_logging(settings.log_level)
    logger.info("Starting use_aws MCP server...")

    try:
        asyncio.run(run_server(settings))
    except FramingError as exc:
        logger.error("Server error: %s", exc)
        raise SystemExit(1) from exc
    except KeyboardInterrupt:
        logger.info("Interrupted")
