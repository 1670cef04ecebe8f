import logging
from typing import TYPE_CHECKING

from ...core.config import get_settings
from ...domain.repositories.event_repository import EventRepository
from ...infrastructure.db.memory_event_repository import InMemoryEventRepository
from ...infrastructure.db.mongo_event_repository import MongoEventRepository
from .database_provider import MEMORY_BACKEND

if TYPE_CHECKING:
    from ..base_container import BaseContainer

logger = logging.getLogger(__name__)


class RepositoryProvider:
    """Repository registration provider - wires domain interfaces to infrastructure implementations"""

    @staticmethod
    def register(container: "BaseContainer") -> None:
        """
        Register the event repository for the configured backend.
        """
        if get_settings().event_store_backend == MEMORY_BACKEND:
            logger.warning("Events are stored in process memory and will not survive a restart")
            container.register_singleton(EventRepository, InMemoryEventRepository())
            return

        container.register_singleton(
            EventRepository,
            MongoEventRepository(event_collection=container.get("event_collection")),
        )
