from typing import TYPE_CHECKING

from ...domain.repositories.event_repository import EventRepository
from ...application.use_cases.event.log_event import LogEventUseCase
from ...application.use_cases.event.list_recent_events import ListRecentEventsUseCase

if TYPE_CHECKING:
    from ..base_container import BaseContainer


class EventsProvider:
    """Events use case provider - registers all event-related use cases"""

    @staticmethod
    def register(container: "BaseContainer") -> None:
        container.register_factory(
            LogEventUseCase,
            lambda: LogEventUseCase(event_repository=container.get(EventRepository)),
        )

        container.register_factory(
            ListRecentEventsUseCase,
            lambda: ListRecentEventsUseCase(event_repository=container.get(EventRepository)),
        )
