from .log_event import LogEventUseCase
from .list_recent_events import ListRecentEventsUseCase

__all__ = [
    "LogEventUseCase",
    "ListRecentEventsUseCase",
]
