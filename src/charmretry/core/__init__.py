"""Core domain models: configuration, event categories and error classification."""

from charmretry.core.config import LogConfig, RetryConfig, RetryProfiles
from charmretry.core.errors import ClassifiedError, ErrorCategory, ErrorClassifier, ErrorCode
from charmretry.core.events import EventCategory, EventInfo, LifecyclePhase

__all__ = [
    "ClassifiedError",
    "ErrorCategory",
    "ErrorClassifier",
    "ErrorCode",
    "EventCategory",
    "EventInfo",
    "LifecyclePhase",
    "LogConfig",
    "RetryConfig",
    "RetryProfiles",
]
