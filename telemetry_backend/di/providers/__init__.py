from .database_provider import DatabaseProvider
from .repository_provider import RepositoryProvider
from .events_provider import EventsProvider


__all__ = [
    "DatabaseProvider",
    "RepositoryProvider",
    "EventsProvider",
]
