"""CLI command implementations."""

from .decide import decide, table
from .schedule import schedule

__all__ = ["decide", "schedule", "table"]
