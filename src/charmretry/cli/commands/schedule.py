"""Schedule command: show delay schedules and worst-case blocking time.

Exit codes:
  0: All profiles loaded
  1: Schema errors or unknown profile
  2: File unreadable or not valid YAML
"""

from __future__ import annotations

import json
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.markup import escape

from charmretry.core.config import (
    RECOMMENDED_MAX_BLOCKING_SECONDS,
    RetryProfiles,
)
from charmretry.exceptions import RetryConfigError

from ..output import console, create_schedule_table


def schedule(
    config_file: Path = typer.Argument(
        ...,
        help="Path to YAML retry configuration",
        exists=True,
        readable=True,
    ),
    profile: str | None = typer.Option(
        None,
        "--profile",
        "-p",
        help="Only show this profile",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        "-j",
        help="Output schedules as JSON",
    ),
) -> None:
    """Show the delay schedule and worst-case blocking time per call site."""
    try:
        loaded = RetryProfiles.from_yaml(config_file)
    except RetryConfigError as e:
        console.print(f"[red]Cannot load config:[/red] {escape(str(e))}")
        raise typer.Exit(2) from None
    except ValidationError as e:
        console.print(f"[red]Invalid retry config:[/red] {escape(str(e))}")
        raise typer.Exit(1) from None

    profiles = dict(loaded.profiles)
    if profile is not None:
        try:
            profiles = {profile: loaded.get(profile)}
        except KeyError as e:
            console.print(f"[red]{escape(e.args[0])}[/red]")
            raise typer.Exit(1) from None

    if json_output:
        payload = {
            name: {
                "max_attempts": config.max_attempts,
                "delays": config.delay_schedule(),
                "worst_case_seconds": config.worst_case_blocking_seconds(),
                "within_recommendation": (
                    config.worst_case_blocking_seconds() <= RECOMMENDED_MAX_BLOCKING_SECONDS
                ),
            }
            for name, config in profiles.items()
        }
        typer.echo(json.dumps(payload, indent=2))
        return

    if not profiles:
        console.print("[yellow]No retry profiles defined[/yellow]")
        return

    console.print(create_schedule_table(profiles))
    over = [
        name
        for name, config in profiles.items()
        if config.worst_case_blocking_seconds() > RECOMMENDED_MAX_BLOCKING_SECONDS
    ]
    if over:
        console.print(
            f"[yellow]Warning:[/yellow] {', '.join(over)} can block the agent for longer "
            f"than {RECOMMENDED_MAX_BLOCKING_SECONDS:.0f}s"
        )
