"""
In-process event store.

Keeps events in a plain list, for local development without MongoDB
(EVENT_STORE_BACKEND=memory) and for tests. Contents are lost on restart.
"""

# Standard library imports
from typing import Any, List, Mapping, Optional

# External package imports
from bson import ObjectId

# Local application imports
from ...domain.repositories.event_repository import EventRepository, RECENT_EVENTS_LIMIT
from ...domain.models.event import Event, normalize_event_name
from ...domain.models.event_params import EventParams
from ...utils.datetime_utils import utc_now


class InMemoryEventRepository(EventRepository):
    """List-backed implementation of EventRepository"""

    def __init__(self) -> None:
        self._events: List[Event] = []

    async def append(self, name: str, params: Optional[Mapping[str, Any]] = None) -> Event:
        name = normalize_event_name(name)
        created_at = utc_now()
        # createdAt never goes backwards, even if the wall clock does
        if self._events and created_at < self._events[-1].created_at:
            created_at = self._events[-1].created_at

        event = Event(
            id=str(ObjectId()),
            name=name,
            params=EventParams(params),
            created_at=created_at,
        )
        self._events.append(event)
        return event

    async def recent(self, limit: int = RECENT_EVENTS_LIMIT) -> List[Event]:
        limit = max(1, int(limit))
        return list(reversed(self._events[-limit:]))

    def __len__(self) -> int:
        return len(self._events)
