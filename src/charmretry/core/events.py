"""Event categories and lifecycle phases consulted by the escalation policy.

The category of a triggering event is decided once, when its EventInfo is
built, instead of being probed from event attributes at escalation time.
The lifecycle phase is supplied by the dispatch loop for every handler
invocation and passed explicitly; nothing here holds process-wide state.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class EventCategory(str, Enum):
    """Kind of event that triggered a guarded operation."""

    ACTION_REQUEST = "action_request"
    """Request/response invocation expecting an explicit success/failure result."""

    DEFERRABLE_LIFECYCLE = "deferrable_lifecycle"
    """Re-queueable event followed, during setup, by an equivalent future event."""

    DEFERRABLE_GENERIC = "deferrable_generic"
    """Re-queueable event with no known future equivalent."""

    NON_DEFERRABLE = "non_deferrable"
    """Event that cannot be re-queued, typically an irreversible transition."""

    @property
    def deferrable(self) -> bool:
        return self in (EventCategory.DEFERRABLE_LIFECYCLE, EventCategory.DEFERRABLE_GENERIC)


class LifecyclePhase(str, Enum):
    """Coarse stage of the agent's life at handler entry."""

    SETUP = "setup"
    OPERATIONAL = "operational"
    TEARDOWN = "teardown"


# Lifecycle events that are re-emitted (or superseded) once setup completes
_LIFECYCLE_EVENTS = frozenset({
    "install",
    "config_changed",
    "start",
    "upgrade_charm",
    "leader_elected",
})

_LIFECYCLE_SUFFIXES = ("_pebble_ready",)

_NON_DEFERRABLE_EVENTS = frozenset({
    "stop",
    "remove",
})

_NON_DEFERRABLE_SUFFIXES = ("_relation_broken", "_storage_detaching")


def _normalize(name: str) -> str:
    return name.strip().lower().replace("-", "_")


def categorize_event(name: str) -> EventCategory:
    """Resolve the category of a well-known charm event by name.

    Hyphenated hook names ("config-changed") and event attribute names
    ("config_changed") are both accepted. Unknown events are treated as
    deferrable with no future equivalent.

    Args:
        name: Event or hook name.

    Returns:
        The EventCategory for the event.
    """
    normalized = _normalize(name)
    if not normalized:
        raise ValueError("event name must not be empty")

    if normalized.endswith("_action"):
        return EventCategory.ACTION_REQUEST
    if normalized in _NON_DEFERRABLE_EVENTS or normalized.endswith(_NON_DEFERRABLE_SUFFIXES):
        return EventCategory.NON_DEFERRABLE
    if normalized in _LIFECYCLE_EVENTS or normalized.endswith(_LIFECYCLE_SUFFIXES):
        return EventCategory.DEFERRABLE_LIFECYCLE
    return EventCategory.DEFERRABLE_GENERIC


@dataclass(frozen=True)
class EventInfo:
    """Metadata of the event that triggered a guarded operation.

    Attributes:
        name: Event name, used for logging and error messages.
        category: Category decided when the event was constructed.
        event_id: Optional delivery identifier for log correlation.
    """

    name: str
    category: EventCategory
    event_id: str | None = None

    def __post_init__(self) -> None:
        # Accept plain category values ("action_request") as well as members.
        object.__setattr__(self, "category", EventCategory(self.category))

    @classmethod
    def categorize(
        cls,
        name: str,
        *,
        is_action: bool = False,
        deferrable: bool = True,
        has_future_equivalent: bool = False,
        event_id: str | None = None,
    ) -> EventInfo:
        """Build EventInfo from explicit event traits.

        Args:
            name: Event name.
            is_action: The event is a request expecting an explicit result.
            deferrable: The event supports being re-queued.
            has_future_equivalent: An equivalent event is known to follow
                during setup.
            event_id: Optional delivery identifier.
        """
        if is_action:
            category = EventCategory.ACTION_REQUEST
        elif not deferrable:
            category = EventCategory.NON_DEFERRABLE
        elif has_future_equivalent:
            category = EventCategory.DEFERRABLE_LIFECYCLE
        else:
            category = EventCategory.DEFERRABLE_GENERIC
        return cls(name=name, category=category, event_id=event_id)

    @classmethod
    def from_name(cls, name: str, event_id: str | None = None) -> EventInfo:
        """Build EventInfo for a well-known event name via categorize_event()."""
        return cls(name=name, category=categorize_event(name), event_id=event_id)
