"""Decide and table commands: inspect the escalation policy."""

from __future__ import annotations

import typer
from rich.table import Table

from charmretry.core.events import EventCategory, LifecyclePhase
from charmretry.execution.escalation import EscalationPolicy
from charmretry.execution.retry import TransientFailure

from ..output import console, format_action


def _sample_failure() -> TransientFailure:
    return TransientFailure(cause=ConnectionRefusedError("connection refused"), attempts=1)


def decide(
    category: EventCategory = typer.Option(
        ...,
        "--category",
        "-c",
        help="Category of the triggering event",
        case_sensitive=False,
    ),
    phase: LifecyclePhase = typer.Option(
        ...,
        "--phase",
        "-p",
        help="Lifecycle phase at handler entry",
        case_sensitive=False,
    ),
) -> None:
    """Show the action taken when transient retries are exhausted."""
    action = EscalationPolicy().escalate(_sample_failure(), category, phase)
    console.print(
        f"{category.value} during {phase.value}: {format_action(type(action).__name__)}"
    )


def table() -> None:
    """Print the full escalation decision table."""
    policy = EscalationPolicy()
    failure = _sample_failure()

    grid = Table(title="Escalation after exhausted retries")
    grid.add_column("Category", style="cyan")
    for phase in LifecyclePhase:
        grid.add_column(phase.value)

    for category in EventCategory:
        cells = [
            format_action(type(policy.escalate(failure, category, phase)).__name__)
            for phase in LifecyclePhase
        ]
        grid.add_row(category.value, *cells)

    console.print(grid)
