"""Data models for error classification."""

from __future__ import annotations

from dataclasses import dataclass

from .codes import ErrorCategory, ErrorCode


@dataclass(frozen=True)
class ClassifiedError:
    """A failure raised by a fallible operation, with its classification.

    Attributes:
        category: TRANSIENT or NON_TRANSIENT.
        error_code: Structured code describing the kind of failure.
        message: Human-readable description of the failure.
        cause: The original exception, never modified.
    """

    category: ErrorCategory
    error_code: ErrorCode
    message: str
    cause: BaseException

    @property
    def transient(self) -> bool:
        return self.category is ErrorCategory.TRANSIENT

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for logging."""
        return {
            "category": self.category.value,
            "error_code": self.error_code.value,
            "error_type": type(self.cause).__name__,
            "message": self.message,
        }
