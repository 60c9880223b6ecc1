"""charmretry CLI: inspect retry budgets and escalation decisions.

Package structure:
    cli/
    ├── __init__.py           # This file - app assembly and global options
    ├── output.py             # Rich formatting
    └── commands/
        ├── schedule.py       # schedule command
        └── decide.py         # decide, table commands
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Literal, cast

import typer
from rich.markup import escape

from charmretry import __version__
from charmretry.core.config import LogConfig
from charmretry.core.logging import configure_logging

from .commands import decide, schedule, table
from .output import console

app = typer.Typer(
    name="charmretry",
    help="Inspect transient-failure retry budgets and escalation decisions",
    add_completion=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"charmretry v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            "-L",
            help="Logging level (DEBUG, INFO, WARNING, ERROR)",
            envvar="CHARMRETRY_LOG_LEVEL",
        ),
    ] = "WARNING",
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Path for log file output",
            envvar="CHARMRETRY_LOG_FILE",
        ),
    ] = None,
    log_format: Annotated[
        str,
        typer.Option(
            "--log-format",
            help="Log format: json, console, or both",
            envvar="CHARMRETRY_LOG_FORMAT",
        ),
    ] = "console",
) -> None:
    """charmretry - retry and escalation policy for charm event handlers."""
    try:
        log_config = LogConfig(
            level=cast(Literal["DEBUG", "INFO", "WARNING", "ERROR"], log_level.upper()),
            format=cast(Literal["json", "console", "both"], log_format.lower()),
            file_path=log_file,
        )
    except ValueError as e:
        console.print(f"[red]Logging configuration error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from None

    configure_logging(
        level=log_config.level,
        format=log_config.format,
        file_path=log_config.file_path,
        max_file_size_mb=log_config.max_file_size_mb,
        backup_count=log_config.backup_count,
        include_timestamps=log_config.include_timestamps,
        include_context=log_config.include_context,
    )


app.command()(schedule)
app.command()(decide)
app.command()(table)


__all__ = ["app", "main", "console"]
