"""Backoff strategies: map a 1-indexed attempt number to a delay in seconds.

Delays are indexed by attempt rather than wall-clock time, so the same
attempt sequence always produces the same delays.
"""

from __future__ import annotations

import math
from collections.abc import Callable

BackoffFn = Callable[[int], float]
"""Maps the number of the attempt that just failed to the delay before the next."""


def _check_attempt(attempt: int) -> None:
    if attempt < 1:
        raise ValueError(f"attempt must be >= 1, got {attempt}")


def _cap(delay: float, max_delay: float | None) -> float:
    if max_delay is not None:
        return min(delay, max_delay)
    return delay


def exponential_backoff(
    base_delay: float,
    multiplier: float = 2.0,
    max_delay: float | None = None,
) -> BackoffFn:
    """``base_delay * multiplier ** (attempt - 1)``, optionally capped.

    Growth past the float range resolves to ``max_delay`` when a cap is set.
    Without a cap it is rejected with ValueError.
    """

    def backoff(attempt: int) -> float:
        _check_attempt(attempt)
        if base_delay == 0:
            return 0.0
        try:
            delay = base_delay * multiplier ** (attempt - 1)
        except OverflowError:
            delay = math.inf
        if math.isinf(delay):
            if max_delay is None:
                raise ValueError(
                    f"exponential backoff overflows at attempt {attempt}; set max_delay"
                )
            return max_delay
        return _cap(delay, max_delay)

    return backoff


def linear_backoff(base_delay: float, max_delay: float | None = None) -> BackoffFn:
    """``base_delay * attempt``, optionally capped."""

    def backoff(attempt: int) -> float:
        _check_attempt(attempt)
        return _cap(base_delay * attempt, max_delay)

    return backoff


def constant_backoff(delay: float) -> BackoffFn:
    """The same delay after every attempt."""

    def backoff(attempt: int) -> float:
        _check_attempt(attempt)
        return delay

    return backoff
