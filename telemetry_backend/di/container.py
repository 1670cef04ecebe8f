# Local application imports
from .base_container import BaseContainer
from .providers import (
    DatabaseProvider,
    EventsProvider,
    RepositoryProvider,
)


class DIContainer(BaseContainer):
    """
    Application container for the events API.

    Wiring runs once, at construction:
    1. DatabaseProvider - Mongo database and events collection (skipped for the memory backend)
    2. RepositoryProvider - the EventRepository for EVENT_STORE_BACKEND
    3. EventsProvider - ingestion and query use cases over that repository
    """

    def __init__(self) -> None:
        super().__init__()
        self.setup()

    def setup(self) -> None:
        DatabaseProvider.register(self)
        RepositoryProvider.register(self)
        EventsProvider.register(self)


_container: DIContainer | None = None


def get_container() -> DIContainer:
    """
    Return the process-wide container, building it on first use.
    """
    global _container
    if _container is None:
        _container = DIContainer()
    return _container


def reset_container() -> None:
    """Drop the process-wide container; the next get_container() rebuilds it."""
    global _container
    _container = None
