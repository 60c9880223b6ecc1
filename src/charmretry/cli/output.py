"""Rich output formatting for the charmretry CLI."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from charmretry.core.config import RECOMMENDED_MAX_BLOCKING_SECONDS, RetryConfig

# Shared console instance for all commands
console = Console()

ACTION_COLORS: dict[str, str] = {
    "Succeed": "green",
    "Reschedule": "yellow",
    "ReportFailure": "magenta",
    "Fatal": "red",
}


def format_duration(seconds: float | None) -> str:
    """Format a duration in seconds (e.g., "5.2s", "3m 12s", "1h 30m")."""
    if seconds is None:
        return "N/A"

    if seconds < 60:
        return f"{seconds:.1f}s"
    elif seconds < 3600:
        minutes = int(seconds // 60)
        secs = int(seconds % 60)
        return f"{minutes}m {secs}s"
    else:
        hours = int(seconds // 3600)
        minutes = int((seconds % 3600) // 60)
        return f"{hours}h {minutes}m"


def format_action(action_name: str) -> str:
    """Rich-styled escalation action name."""
    color = ACTION_COLORS.get(action_name, "white")
    return f"[{color}]{action_name}[/{color}]"


def create_schedule_table(profiles: dict[str, RetryConfig]) -> Table:
    """Table of delay schedules and worst-case blocking time per profile."""
    table = Table(title="Retry schedules", show_lines=False)
    table.add_column("Profile", style="cyan")
    table.add_column("Attempts", justify="right")
    table.add_column("Strategy")
    table.add_column("Delays")
    table.add_column("Worst case", justify="right")

    for name, config in profiles.items():
        total = config.worst_case_blocking_seconds()
        strategy = "custom" if config.backoff_fn is not None else config.strategy
        delays = ", ".join(format_duration(d) for d in config.delay_schedule()) or "-"
        worst = format_duration(total)
        if total > RECOMMENDED_MAX_BLOCKING_SECONDS:
            worst = f"[red]{worst}[/red]"
        table.add_row(name, str(config.max_attempts), strategy, delays, worst)

    return table
