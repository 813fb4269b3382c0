"""
Logger for session-trace commands.

Everything goes to stderr: `compile` without --output-dir writes the trace
JSON to stdout, and log lines must not corrupt it.
"""

from __future__ import annotations

import typer


class CLILogger:
    """LoggerProtocol implementation for the typer commands."""

    def __init__(self, verbose: bool = False) -> None:
        """
        Args:
            verbose: Show progress messages (-v). Warnings and errors always show.
        """
        self.verbose = verbose

    async def info(self, message: str) -> None:
        if self.verbose:
            typer.secho(f'[INFO] {message}', fg=typer.colors.BRIGHT_BLACK, err=True)

    async def warning(self, message: str) -> None:
        typer.secho(f'[WARNING] {message}', fg=typer.colors.YELLOW, err=True)

    async def error(self, message: str) -> None:
        typer.secho(f'[ERROR] {message}', fg=typer.colors.RED, err=True)
