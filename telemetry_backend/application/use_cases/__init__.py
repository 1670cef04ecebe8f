from .event import (
    LogEventUseCase,
    ListRecentEventsUseCase,
)

__all__ = [
    "LogEventUseCase",
    "ListRecentEventsUseCase",
]
