from typing import TYPE_CHECKING

from ...core.config import get_settings
from ...infrastructure.db.mongo_connection import get_database, get_event_collection

if TYPE_CHECKING:
    from ..base_container import BaseContainer

MEMORY_BACKEND = "memory"


class DatabaseProvider:
    """Centralized database connection provider - single source of truth for all DB connections"""

    @staticmethod
    def register(container: "BaseContainer") -> None:
        """
        Register the database and the events collection in the container.
        Nothing is registered when events are kept in process memory.
        """
        if get_settings().event_store_backend == MEMORY_BACKEND:
            return

        container.register_singleton("database", get_database())
        container.register_singleton("event_collection", get_event_collection())
