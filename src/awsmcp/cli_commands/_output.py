"""Shared CLI output helpers.

Everything goes to stderr: when the server runs, stdout carries protocol
traffic only.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

console = Console()
err_console = Console(stderr=True)


def configure_logging(level: str = "INFO") -> None:
    """Route log records to stderr through Rich."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def print_description(description: str, *, requires_acceptance: bool) -> None:
    """Pretty-print a command description and its acceptance verdict."""
    console.print(description, markup=False, highlight=False)
    if requires_acceptance:
        console.print("\n[yellow]This command requires user acceptance (write operation)[/yellow]")
    else:
        console.print("\n[green]This command is read-only (no acceptance required)[/green]")
