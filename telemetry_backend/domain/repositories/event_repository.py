from abc import ABC, abstractmethod
from typing import Any, List, Mapping, Optional

from ..models.event import Event

# Capacity bound of the query endpoint. The read path only ever exposes the
# newest slice of the stream; there is no pagination cursor.
RECENT_EVENTS_LIMIT = 100


class EventRepository(ABC):
    """Repository interface - append-only durable store for events"""

    @abstractmethod
    async def append(self, name: str, params: Optional[Mapping[str, Any]] = None) -> Event:
        """
        Persist a new event and return it with the store-assigned id and createdAt.

        Raises:
            ValidationError: if name is missing or blank
            PersistenceError: if the storage operation fails
        """
        pass

    @abstractmethod
    async def recent(self, limit: int = RECENT_EVENTS_LIMIT) -> List[Event]:
        """
        Return up to limit most recently created events, newest first.

        Raises:
            PersistenceError: if the storage operation fails
        """
        pass

    async def ensure_indexes(self) -> None:
        """Prepare the underlying storage (no-op unless the backend needs it)"""
        return None
