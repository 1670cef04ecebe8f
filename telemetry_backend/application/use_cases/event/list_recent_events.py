from typing import List

from ....domain.repositories.event_repository import EventRepository, RECENT_EVENTS_LIMIT
from ....application.dto.event_dto import EventResponse


class ListRecentEventsUseCase:
    """Query: the newest slice of the event stream, newest first"""

    def __init__(self, event_repository: EventRepository) -> None:
        self._event_repository = event_repository

    async def execute(self) -> List[EventResponse]:
        events = await self._event_repository.recent(RECENT_EVENTS_LIMIT)
        return [
            EventResponse(
                id=e.id or "",
                name=e.name,
                params=e.params.to_dict(),
                created_at=e.created_at,
                updated_at=e.updated_at or e.created_at,
            )
            for e in events
        ]
