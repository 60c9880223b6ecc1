"""ErrorClassifier: labels failures as transient or non-transient.

The transient set is deliberately narrow. Only connectivity/availability
failures of the thing being called qualify: treating a logic or
malformed-input error as transient would hide a real bug behind retries.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping, Sequence

import httpx

from charmretry.core.logging import get_logger

from .codes import ErrorCategory, ErrorCode
from .models import ClassifiedError

_logger = get_logger("errors")


# =============================================================================
# Default transient exception types, most specific first.
# The first isinstance() match decides the error code.
# =============================================================================

_TYPE_CODES: tuple[tuple[type[BaseException], ErrorCode], ...] = (
    (ConnectionRefusedError, ErrorCode.CONNECTION_REFUSED),
    (ConnectionResetError, ErrorCode.CONNECTION_RESET),
    (ConnectionAbortedError, ErrorCode.CONNECTION_RESET),
    (BrokenPipeError, ErrorCode.CONNECTION_RESET),
    (TimeoutError, ErrorCode.TIMEOUT),
    (httpx.TimeoutException, ErrorCode.TIMEOUT),
    (httpx.ConnectError, ErrorCode.UNREACHABLE),
    (httpx.NetworkError, ErrorCode.NETWORK_GENERIC),
    (ConnectionError, ErrorCode.NETWORK_GENERIC),
)

DEFAULT_TRANSIENT_TYPES: tuple[type[BaseException], ...] = (
    ConnectionError,
    TimeoutError,
    httpx.NetworkError,
    httpx.TimeoutException,
)

# Message patterns, only consulted for exceptions of an inspected type
# (e.g. a client library's catch-all error class).
_DEFAULT_MESSAGE_PATTERNS: dict[ErrorCode, list[str]] = {
    ErrorCode.CONNECTION_REFUSED: [
        r"connection.?refused",
        r"ECONNREFUSED",
    ],
    ErrorCode.CONNECTION_RESET: [
        r"connection.?reset",
        r"broken.?pipe",
        r"ECONNRESET",
    ],
    ErrorCode.TIMEOUT: [
        r"timed?.?out",
        r"ETIMEDOUT",
    ],
    ErrorCode.UNREACHABLE: [
        r"network.?unreachable",
        r"no route to host",
        r"(cannot|unable to|could not) connect",
        r"socket.{0,20}not (found|available)",
        r"name.?resolution",
    ],
    ErrorCode.SERVICE_UNAVAILABLE: [
        r"service.?unavailable",
        r"temporarily unavailable",
        r"\b503\b",
    ],
}


def _compile_patterns(
    patterns: Mapping[ErrorCode, Iterable[str]],
) -> list[tuple[ErrorCode, re.Pattern[str]]]:
    compiled: list[tuple[ErrorCode, re.Pattern[str]]] = []
    for code, strings in patterns.items():
        if code is ErrorCode.NOT_TRANSIENT:
            raise ValueError("message patterns cannot map to NOT_TRANSIENT")
        regexes = list(strings)
        if regexes:
            alternation = "|".join(f"(?:{p})" for p in regexes)
            compiled.append((code, re.compile(alternation, re.IGNORECASE)))
    return compiled


def _iter_causes(error: BaseException) -> Iterator[BaseException]:
    """Yield the explicit ``raise ... from`` chain below ``error``."""
    seen = {id(error)}
    current = error.__cause__
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__


class ErrorClassifier:
    """Classifies failures raised by a fallible operation.

    Configured per call site with the error kinds that mean the callee is
    unreachable or unavailable. Classification is a pure function of the
    error; the original exception is carried through untouched.

    Example:
        classifier = ErrorClassifier(inspect_types=(pebble.APIError,))
        classified = classifier.classify(exc)
        if classified.transient:
            ...
    """

    def __init__(
        self,
        transient_types: Sequence[type[BaseException]] | None = None,
        message_patterns: Mapping[ErrorCode, Iterable[str]] | None = None,
        inspect_types: Sequence[type[BaseException]] = (),
    ) -> None:
        """Initialize the classifier.

        Args:
            transient_types: Exception types that are always transient.
                Defaults to DEFAULT_TRANSIENT_TYPES.
            message_patterns: Regexes per ErrorCode matched against the
                message of exceptions whose type is in ``inspect_types``.
                Defaults to connection refused/reset, timeouts, unreachable
                and service-unavailable wording.
            inspect_types: Exception types (typically a client's generic
                error class) whose message and ``__cause__`` chain are
                inspected. Other exceptions are never pattern-matched.
        """
        self.transient_types: tuple[type[BaseException], ...] = tuple(
            DEFAULT_TRANSIENT_TYPES if transient_types is None else transient_types
        )
        self.inspect_types: tuple[type[BaseException], ...] = tuple(inspect_types)
        self._patterns = _compile_patterns(
            _DEFAULT_MESSAGE_PATTERNS if message_patterns is None else message_patterns
        )

    def classify(self, error: BaseException) -> ClassifiedError:
        """Classify an error as transient or non-transient.

        Args:
            error: Exception raised by the fallible operation.

        Returns:
            ClassifiedError wrapping the unmodified exception.
        """
        message = str(error) or type(error).__name__
        code = self._code_for(error)

        classified = ClassifiedError(
            category=code.category,
            error_code=code,
            message=message,
            cause=error,
        )
        _logger.debug(
            "error_classified",
            category=classified.category.value,
            error_code=code.value,
            error_type=type(error).__name__,
        )
        return classified

    def is_transient(self, error: BaseException) -> bool:
        """Return True if ``error`` is a transient connectivity failure."""
        return self._code_for(error) is not ErrorCode.NOT_TRANSIENT

    def _code_for(self, error: BaseException) -> ErrorCode:
        code = self._code_for_type(error)
        if code is not None:
            return code

        if self.inspect_types and isinstance(error, self.inspect_types):
            code = self._code_for_message(str(error))
            if code is not None:
                return code
            for cause in _iter_causes(error):
                code = self._code_for_type(cause)
                if code is not None:
                    return code

        return ErrorCode.NOT_TRANSIENT

    def _code_for_type(self, error: BaseException) -> ErrorCode | None:
        if not isinstance(error, self.transient_types):
            return None
        for exc_type, code in _TYPE_CODES:
            if isinstance(error, exc_type):
                return code
        return ErrorCode.NETWORK_GENERIC

    def _code_for_message(self, message: str) -> ErrorCode | None:
        for code, pattern in self._patterns:
            if pattern.search(message):
                return code
        return None
