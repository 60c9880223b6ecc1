"""Error codes and categories for transient-failure classification.

Error Code Taxonomy
===================

Only connectivity/availability failures of the thing being called are ever
transient. Everything else, including logic and malformed-input errors,
is NOT_TRANSIENT and propagates without retry.

    | Code | Name | Category |
    |------|------|----------|
    | E000 | NOT_TRANSIENT | non_transient |
    | E901 | CONNECTION_REFUSED | transient |
    | E902 | CONNECTION_RESET | transient |
    | E903 | TIMEOUT | transient |
    | E904 | UNREACHABLE | transient |
    | E905 | SERVICE_UNAVAILABLE | transient |
    | E909 | NETWORK_GENERIC | transient |
"""

from __future__ import annotations

from enum import Enum


class ErrorCategory(str, Enum):
    """Retry-relevant category of a failure."""

    TRANSIENT = "transient"
    """Connectivity/availability issue expected to self-resolve."""

    NON_TRANSIENT = "non_transient"
    """Any other failure; propagated immediately and unchanged."""


class ErrorCode(str, Enum):
    """Structured error codes assigned by the classifier."""

    NOT_TRANSIENT = "E000"
    CONNECTION_REFUSED = "E901"
    CONNECTION_RESET = "E902"
    TIMEOUT = "E903"
    UNREACHABLE = "E904"
    SERVICE_UNAVAILABLE = "E905"
    NETWORK_GENERIC = "E909"

    @property
    def category(self) -> ErrorCategory:
        if self is ErrorCode.NOT_TRANSIENT:
            return ErrorCategory.NON_TRANSIENT
        return ErrorCategory.TRANSIENT
