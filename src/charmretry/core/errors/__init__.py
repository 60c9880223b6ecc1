"""Error classification and handling.

Re-exports all public symbols.
"""

from charmretry.core.errors.codes import ErrorCategory, ErrorCode
from charmretry.core.errors.models import ClassifiedError
from charmretry.core.errors.classifier import DEFAULT_TRANSIENT_TYPES, ErrorClassifier

__all__ = [
    "ClassifiedError",
    "DEFAULT_TRANSIENT_TYPES",
    "ErrorCategory",
    "ErrorClassifier",
    "ErrorCode",
]
