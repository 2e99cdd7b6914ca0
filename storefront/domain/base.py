"""Base classes for the domain layer.

Entities here are identified by catalog or session ids (plain strings).
Aggregates stamp themselves onto the events they record, so event
constructors only carry what happened.
"""

from abc import ABC
from dataclasses import dataclass, field, fields, replace
from datetime import datetime, timezone
from typing import Any, ClassVar
from uuid import UUID, uuid4


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ============================================================================
# Value Objects and Entities
# ============================================================================


@dataclass(frozen=True)
class ValueObject(ABC):
    """Immutable value compared by content."""


@dataclass
class Entity(ABC):
    """Object with a stable string identity.

    Two entities of the same class are equal when their ids match, even
    if other fields differ. A variant keeps its id while its name and
    combination are rewritten by reconciliation.

    Attributes:
        id: Identifier, unique within its kind.
    """

    id: str

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, self.__class__):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash((self.__class__.__name__, self.id))


# ============================================================================
# Aggregate Root
# ============================================================================


@dataclass(kw_only=True, eq=False)
class AggregateRoot(Entity):
    """Consistency boundary that records domain events.

    Attributes:
        version: Incremented on every state change; a save snapshot is
            current while its version equals this one.
        created_at: Creation timestamp.
        updated_at: Timestamp of the last change.
    """

    version: int = field(default=1, compare=False)
    created_at: datetime = field(default_factory=_utcnow, compare=False)
    updated_at: datetime = field(default_factory=_utcnow, compare=False)
    _events: list["DomainEvent"] = field(
        default_factory=list,
        init=False,
        repr=False,
        compare=False,
    )

    def _record_event(self, event: "DomainEvent") -> None:
        """Record an event, stamped with this aggregate's id and type."""
        self._events.append(
            replace(event, aggregate_id=self.id, aggregate_type=type(self).__name__)
        )

    def collect_events(self) -> list["DomainEvent"]:
        """Return recorded events and forget them.

        Returns:
            Events in the order they were recorded.
        """
        events, self._events = self._events, []
        return events

    def _mark_changed(self) -> None:
        self.updated_at = _utcnow()
        self.version += 1


# ============================================================================
# Domain Event
# ============================================================================


@dataclass(frozen=True)
class DomainEvent(ABC):
    """Something that happened to an aggregate.

    Subclasses set ``event_type`` and declare their payload as dataclass
    fields. Tuple fields serialize as lists.

    Attributes:
        event_id: Unique id of this occurrence.
        occurred_at: When it happened.
        aggregate_id: Id of the recording aggregate.
        aggregate_type: Class name of the recording aggregate.
    """

    event_type: ClassVar[str]

    _ENVELOPE: ClassVar[frozenset[str]] = frozenset(
        {"event_id", "occurred_at", "aggregate_id", "aggregate_type"}
    )

    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=_utcnow)
    aggregate_id: str = ""
    aggregate_type: str = ""

    def payload(self) -> dict[str, Any]:
        """Event-specific fields."""
        data: dict[str, Any] = {}
        for f in fields(self):
            if f.name in self._ENVELOPE:
                continue
            value = getattr(self, f.name)
            data[f.name] = list(value) if isinstance(value, tuple) else value
        return data

    def to_dict(self) -> dict[str, Any]:
        """Serialize the event for logging.

        Returns:
            Envelope fields plus a ``payload`` mapping.
        """
        return {
            "event_id": str(self.event_id),
            "event_type": self.event_type,
            "occurred_at": self.occurred_at.isoformat(),
            "aggregate_id": self.aggregate_id,
            "aggregate_type": self.aggregate_type,
            "payload": self.payload(),
        }
