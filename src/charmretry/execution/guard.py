"""Guarded calls: retry, escalate and act, from inside an event handler.

Composes the classifier, RetryExecutor and EscalationPolicy for one fallible
call and performs the chosen action against the dispatch loop:

- success returns the value;
- a non-transient failure re-raises the original exception unchanged;
- exhausted transient retries are escalated, then the handler either
  carries on (Succeed), reports a failed action (ReportFailure), defers the
  event (Reschedule) or raises FatalEscalationError (Fatal).

Example usage:
    result = guarded_call(
        lambda: container.replan(),
        config=RetryConfig(max_attempts=5, base_delay=2.0),
        event=EventInfo.from_name("config_changed"),
        phase=LifecyclePhase.SETUP,
        dispatcher=dispatcher,
    )
    if not result.completed:
        return  # rescheduled, reported, or waiting for a later event
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol, TypeVar, runtime_checkable

from charmretry.core.config import RetryConfig
from charmretry.core.events import EventInfo, LifecyclePhase
from charmretry.core.logging import HandlerContext, get_logger, with_context
from charmretry.exceptions import FatalEscalationError
from charmretry.execution.escalation import (
    EscalationAction,
    EscalationPolicy,
    Fatal,
    ReportFailure,
    Reschedule,
    Succeed,
)
from charmretry.execution.retry import (
    AttemptOutcome,
    NonTransientFailure,
    RetryExecutor,
    Success,
    TransientFailure,
)

_logger = get_logger("guard")

T = TypeVar("T")


@runtime_checkable
class Dispatcher(Protocol):
    """Operations the dispatch loop exposes to handlers.

    Fatal has no method here: it is signalled by raising
    FatalEscalationError out of the handler.
    """

    def defer(self, event: EventInfo) -> None:
        """Re-deliver ``event`` at some later time (at-least-once, unordered)."""
        ...

    def fail_action(self, event: EventInfo, message: str) -> None:
        """Deliver ``message`` as the explicit failure result of the request."""
        ...


@dataclass(frozen=True)
class GuardResult:
    """Result of a guarded call that did not raise.

    Attributes:
        outcome: What the retry executor returned.
        action: Escalation action performed, None when the call succeeded.
    """

    outcome: AttemptOutcome
    action: EscalationAction | None = None

    @property
    def completed(self) -> bool:
        """True if the operation itself returned a value."""
        return isinstance(self.outcome, Success)

    @property
    def value(self) -> Any:
        """The operation's return value, or None if it did not complete."""
        if isinstance(self.outcome, Success):
            return self.outcome.value
        return None


def guarded_call(
    operation: Callable[[], T],
    *,
    config: RetryConfig,
    event: EventInfo,
    phase: LifecyclePhase,
    dispatcher: Dispatcher,
    executor: RetryExecutor | None = None,
    policy: EscalationPolicy | None = None,
) -> GuardResult:
    """Run ``operation`` with retries and perform the escalation outcome.

    Args:
        operation: Zero-argument callable performing the real call.
        config: Retry budget for this call site.
        event: The triggering event; its category drives escalation.
        phase: Lifecycle phase at handler entry, supplied by the dispatch loop.
        dispatcher: Dispatch loop hooks used for Reschedule and ReportFailure.
        executor: RetryExecutor to use; defaults to one with the default
            classifier.
        policy: EscalationPolicy to use.

    Returns:
        GuardResult describing the outcome and any action taken.

    Raises:
        FatalEscalationError: If escalation selects Fatal.
        Exception: The operation's own non-transient error, unchanged.
    """
    executor = executor or RetryExecutor()
    policy = policy or EscalationPolicy()
    phase = LifecyclePhase(phase)

    ctx = HandlerContext(
        event=event.name,
        event_id=event.event_id,
        category=event.category.value,
        phase=phase.value,
    )
    with with_context(ctx):
        outcome = executor.execute(operation, config)

        if isinstance(outcome, NonTransientFailure):
            raise outcome.cause
        if isinstance(outcome, Success):
            return GuardResult(outcome=outcome)

        action = policy.escalate(outcome, event.category, phase)
        _perform(action, outcome, event, dispatcher)
        return GuardResult(outcome=outcome, action=action)


def _perform(
    action: EscalationAction,
    failure: TransientFailure,
    event: EventInfo,
    dispatcher: Dispatcher,
) -> None:
    if isinstance(action, Succeed):
        _logger.info("transient_failure_ignored_during_setup", attempts=failure.attempts)
    elif isinstance(action, ReportFailure):
        dispatcher.fail_action(event, action.message)
    elif isinstance(action, Reschedule):
        _logger.info("event_rescheduled", attempts=failure.attempts)
        dispatcher.defer(event)
    elif isinstance(action, Fatal):
        _logger.error(
            "transient_failure_fatal",
            attempts=failure.attempts,
            error_type=type(action.cause).__name__,
        )
        raise FatalEscalationError(event, action.cause, failure.attempts) from action.cause
    else:
        raise TypeError(f"unknown escalation action: {action!r}")
