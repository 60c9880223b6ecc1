"""Execution layer: retry executor, escalation policy and guarded calls."""

from charmretry.execution.escalation import (
    EscalationAction,
    EscalationPolicy,
    Fatal,
    ReportFailure,
    Reschedule,
    Succeed,
    escalate,
)
from charmretry.execution.guard import Dispatcher, GuardResult, guarded_call
from charmretry.execution.retry import (
    AttemptOutcome,
    NonTransientFailure,
    RetryExecutor,
    Success,
    TransientFailure,
)

__all__ = [
    "AttemptOutcome",
    "Dispatcher",
    "EscalationAction",
    "EscalationPolicy",
    "Fatal",
    "GuardResult",
    "NonTransientFailure",
    "ReportFailure",
    "Reschedule",
    "RetryExecutor",
    "Succeed",
    "Success",
    "TransientFailure",
    "escalate",
    "guarded_call",
]
