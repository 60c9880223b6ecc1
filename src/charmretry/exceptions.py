"""Exception hierarchy for charmretry.

All library-specific exceptions inherit from CharmRetryError, so callers can
catch broadly (CharmRetryError) or narrowly (e.g. FatalEscalationError).
Failures raised by the guarded operation itself are never wrapped in these;
non-transient errors reach the handler unchanged.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from charmretry.core.events import EventInfo


class CharmRetryError(Exception):
    """Base exception for all charmretry errors."""


class RetryConfigError(CharmRetryError, ValueError):
    """Raised when a retry configuration file cannot be read or parsed.

    Schema violations surface as pydantic ValidationError instead.
    """


class FatalEscalationError(CharmRetryError):
    """Raised when exhausted transient retries escalate to a fatal state.

    The dispatch loop must stop normal processing and surface the condition
    as requiring operator intervention. The underlying transient error is
    available both as ``cause`` and as ``__cause__``.
    """

    def __init__(
        self,
        event: EventInfo,
        cause: BaseException,
        attempts: int,
    ) -> None:
        self.event = event
        self.cause = cause
        self.attempts = attempts
        super().__init__(
            f"{event.name}: transient failure persisted after {attempts} "
            f"attempt(s) and the event cannot be rescheduled: {cause}"
        )
