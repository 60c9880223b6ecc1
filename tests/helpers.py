"""Shared test helpers for charmretry tests."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from charmretry.core.events import EventInfo


class SleepRecorder:
    """Callable standing in for time.sleep; records every delay."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


class RecordingDispatcher:
    """Dispatcher that records the actions performed on it."""

    def __init__(self) -> None:
        self.deferred: list[EventInfo] = []
        self.failed: list[tuple[EventInfo, str]] = []

    def defer(self, event: EventInfo) -> None:
        self.deferred.append(event)

    def fail_action(self, event: EventInfo, message: str) -> None:
        self.failed.append((event, message))


def scripted(results: Iterable[Any]) -> Callable[[], Any]:
    """Build an operation that raises or returns the scripted results in order.

    Exception instances are raised, anything else is returned. The returned
    callable exposes ``calls`` with the number of invocations so far.
    """
    queue = list(results)

    def operation() -> Any:
        operation.calls += 1  # type: ignore[attr-defined]
        result = queue.pop(0)
        if isinstance(result, BaseException):
            raise result
        return result

    operation.calls = 0  # type: ignore[attr-defined]
    return operation


def always_raising(error: BaseException) -> Callable[[], Any]:
    """Build an operation that raises ``error`` on every call and counts calls."""

    def operation() -> Any:
        operation.calls += 1  # type: ignore[attr-defined]
        raise error

    operation.calls = 0  # type: ignore[attr-defined]
    return operation
