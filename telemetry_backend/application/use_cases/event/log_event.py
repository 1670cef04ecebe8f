import logging
from typing import Any, Mapping, Optional

from ....domain.repositories.event_repository import EventRepository
from ....domain.models.event import normalize_event_name

logger = logging.getLogger(__name__)


class LogEventUseCase:
    """Ingestion: validate one incoming event and append it to the store"""

    def __init__(self, event_repository: EventRepository) -> None:
        self._event_repository = event_repository

    async def execute(self, name: Any, params: Optional[Any] = None) -> None:
        """
        Persist one event.

        Args:
            name: Event kind as received (must be a non-blank string)
            params: Free-form parameters; anything but an object is treated as empty

        Raises:
            ValidationError: if name is missing or blank (nothing is persisted)
            PersistenceError: if the store fails
        """
        name = normalize_event_name(name)
        if not isinstance(params, Mapping):
            params = {}

        event = await self._event_repository.append(name, params)
        logger.debug(f"Logged event {event.name} ({event.id})")
