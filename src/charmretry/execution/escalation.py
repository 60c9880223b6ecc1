"""Escalation policy for operations whose transient retries are exhausted.

Escalate only as far as needed to get either automatic recovery
(Reschedule, Succeed) or correct caller-visible signalling (ReportFailure).
Fatal is reserved for the case where no automatic path exists and an
operator has to look.

Decision table, evaluated top-down, first match wins:

    | Category             | Phase      | Action        |
    |----------------------|------------|---------------|
    | ACTION_REQUEST       | any        | ReportFailure |
    | NON_DEFERRABLE       | any        | Fatal         |
    | DEFERRABLE_LIFECYCLE | SETUP      | Succeed       |
    | DEFERRABLE_LIFECYCLE | otherwise  | Reschedule    |
    | DEFERRABLE_GENERIC   | any        | Reschedule    |

Reschedule re-delivers the whole event later. Nothing done earlier in the
handler is remembered, so handlers must be idempotent or perform their side
effects only after the guarded call succeeds.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from charmretry.core.events import EventCategory, LifecyclePhase
from charmretry.core.logging import get_logger
from charmretry.execution.retry import TransientFailure

_logger = get_logger("escalation")


@dataclass(frozen=True)
class Succeed:
    """Treat the failed attempt as a no-op; an equivalent event will follow."""


@dataclass(frozen=True)
class ReportFailure:
    """Return an explicit failure result to the originating request."""

    message: str
    cause: BaseException


@dataclass(frozen=True)
class Reschedule:
    """Re-queue the triggering event for a later, full re-delivery."""


@dataclass(frozen=True)
class Fatal:
    """Enter an unrecoverable error state requiring operator intervention."""

    cause: BaseException


EscalationAction = Union[Succeed, ReportFailure, Reschedule, Fatal]


def failure_message(failure: TransientFailure) -> str:
    """Caller-visible description of an exhausted transient failure."""
    cause = failure.cause
    detail = str(cause) or type(cause).__name__
    plural = "" if failure.attempts == 1 else "s"
    return f"Operation failed after {failure.attempts} attempt{plural}: {detail}"


class EscalationPolicy:
    """Chooses the terminal action for an exhausted transient failure.

    Stateless; one instance can serve every handler.
    """

    def escalate(
        self,
        failure: TransientFailure,
        category: EventCategory,
        phase: LifecyclePhase,
    ) -> EscalationAction:
        """Select the terminal action.

        Args:
            failure: The exhausted transient chain from RetryExecutor.
            category: Category of the triggering event.
            phase: Lifecycle phase at handler entry.

        Returns:
            Exactly one of Succeed, ReportFailure, Reschedule or Fatal.

        Raises:
            TypeError: If ``failure`` is not a TransientFailure.
        """
        if not isinstance(failure, TransientFailure):
            raise TypeError(
                f"escalation requires a TransientFailure, got {type(failure).__name__}"
            )

        action = self._decide(failure, EventCategory(category), LifecyclePhase(phase))
        _logger.info(
            "escalation_decided",
            action=type(action).__name__,
            category=EventCategory(category).value,
            phase=LifecyclePhase(phase).value,
            attempts=failure.attempts,
        )
        return action

    def _decide(
        self,
        failure: TransientFailure,
        category: EventCategory,
        phase: LifecyclePhase,
    ) -> EscalationAction:
        if category is EventCategory.ACTION_REQUEST:
            return ReportFailure(message=failure_message(failure), cause=failure.cause)
        if category is EventCategory.NON_DEFERRABLE:
            return Fatal(cause=failure.cause)
        if category is EventCategory.DEFERRABLE_LIFECYCLE and phase is LifecyclePhase.SETUP:
            return Succeed()
        return Reschedule()


_default_policy = EscalationPolicy()


def escalate(
    failure: TransientFailure,
    category: EventCategory,
    phase: LifecyclePhase,
) -> EscalationAction:
    """Module-level shortcut for EscalationPolicy().escalate()."""
    return _default_policy.escalate(failure, category, phase)
