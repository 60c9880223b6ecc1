"""Retry executor: invokes a fallible operation within a retry budget.

Resilience lives entirely in retrying around the real call. There is no
"is it up?" probe before calling: the callee can disappear between probe and
use, so a probe only adds latency without removing the race.

Backoff sleeps are synchronous. The agent handles one event at a time, so a
sleeping retry blocks all event processing; keep budgets small (see
RECOMMENDED_MAX_BLOCKING_SECONDS).

Example usage:
    from charmretry.core.config import RetryConfig
    from charmretry.execution.retry import RetryExecutor, Success

    executor = RetryExecutor()
    outcome = executor.execute(
        lambda: client.get_plan(),
        RetryConfig(max_attempts=3, base_delay=1.0),
    )
    if isinstance(outcome, Success):
        plan = outcome.value
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar, Union

from charmretry.core.config import RetryConfig
from charmretry.core.errors import ErrorClassifier
from charmretry.core.logging import get_logger

_logger = get_logger("retry")

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    """The operation returned a value."""

    value: T
    attempts: int = 1
    delays: tuple[float, ...] = ()


@dataclass(frozen=True)
class TransientFailure:
    """Every attempt failed transiently; the retry budget is exhausted.

    Attributes:
        cause: Exception raised by the final attempt.
        attempts: Number of invocations made (equals max_attempts).
        delays: Delays slept between attempts.
    """

    cause: BaseException
    attempts: int
    delays: tuple[float, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class NonTransientFailure:
    """An attempt failed with a non-transient error; remaining attempts skipped."""

    cause: BaseException
    attempts: int
    delays: tuple[float, ...] = field(default_factory=tuple)


AttemptOutcome = Union[Success[Any], TransientFailure, NonTransientFailure]


class RetryExecutor:
    """Runs a fallible operation, retrying transient failures with backoff.

    Holds no state between calls; every execute() starts from attempt 1.
    """

    def __init__(
        self,
        classifier: ErrorClassifier | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the executor.

        Args:
            classifier: Decides which failures are transient. Defaults to an
                ErrorClassifier recognising connection and timeout errors.
            sleep: Blocking sleep used between attempts.
        """
        self.classifier = classifier or ErrorClassifier()
        self._sleep = sleep

    def execute(self, operation: Callable[[], T], config: RetryConfig) -> AttemptOutcome:
        """Invoke ``operation`` until success, a non-transient failure, or exhaustion.

        Only ``Exception`` subclasses are caught; KeyboardInterrupt and
        SystemExit always propagate.

        Args:
            operation: Zero-argument callable performing the real call.
            config: Retry budget for this call site.

        Returns:
            Success, NonTransientFailure (immediately, no further attempts) or
            TransientFailure (after max_attempts invocations).
        """
        delays: list[float] = []
        attempt = 1
        while True:
            try:
                value = operation()
            except Exception as exc:
                classified = self.classifier.classify(exc)
                if not classified.transient:
                    _logger.info(
                        "attempt_failed_non_transient",
                        attempt=attempt,
                        error_type=type(exc).__name__,
                        message=classified.message,
                    )
                    return NonTransientFailure(cause=exc, attempts=attempt, delays=tuple(delays))

                if attempt >= config.max_attempts:
                    _logger.warning(
                        "retry_budget_exhausted",
                        attempts=attempt,
                        error_code=classified.error_code.value,
                        message=classified.message,
                        total_delay=round(sum(delays), 2),
                    )
                    return TransientFailure(cause=exc, attempts=attempt, delays=tuple(delays))

                delay = config.delay_for(attempt)
                _logger.info(
                    "attempt_failed_transient",
                    attempt=attempt,
                    max_attempts=config.max_attempts,
                    error_code=classified.error_code.value,
                    message=classified.message,
                    delay_seconds=round(delay, 2),
                )
                self._sleep(delay)
                delays.append(delay)
                attempt += 1
                continue

            if attempt > 1:
                _logger.info("operation_recovered", attempts=attempt)
            return Success(value=value, attempts=attempt, delays=tuple(delays))
