# Standard library imports
import logging
from typing import Any, List, Mapping, Optional

# External package imports
from bson.errors import BSONError
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import DESCENDING
from pymongo.errors import PyMongoError

# Local application imports
from ...domain.repositories.event_repository import EventRepository, RECENT_EVENTS_LIMIT
from ...domain.models.event import Event, normalize_event_name
from ...domain.models.event_params import EventParams
from ...domain.constants import EventFields
from ...domain.exceptions import PersistenceError
from ...utils.datetime_utils import ensure_utc, utc_now
from .mongo_connection import get_event_collection

logger = logging.getLogger(__name__)


class MongoEventRepository(EventRepository):
    """MongoDB implementation of EventRepository"""

    def __init__(self, event_collection: Optional[AsyncIOMotorCollection] = None) -> None:
        self.event_collection = event_collection if event_collection is not None else get_event_collection()

    async def append(self, name: str, params: Optional[Mapping[str, Any]] = None) -> Event:
        name = normalize_event_name(name)
        params = EventParams(params).to_dict()
        created_at = utc_now()

        doc = {
            EventFields.NAME: name,
            EventFields.PARAMS: params,
            EventFields.CREATED_AT: created_at,
            EventFields.UPDATED_AT: created_at,
        }

        try:
            result = await self.event_collection.insert_one(doc)
        except (PyMongoError, BSONError, OverflowError) as e:
            # Params that cannot be encoded as BSON (e.g. ints beyond 8 bytes) fail here too
            raise PersistenceError(f"Failed to insert event '{name}': {e}", operation="append") from e

        return Event(
            id=str(result.inserted_id),
            name=name,
            params=EventParams(params),
            created_at=created_at,
            updated_at=created_at,
        )

    async def recent(self, limit: int = RECENT_EVENTS_LIMIT) -> List[Event]:
        limit = max(1, int(limit))
        cursor = (
            self.event_collection.find({})
            .sort([(EventFields.CREATED_AT, DESCENDING), (EventFields.MONGO_ID, DESCENDING)])
            .limit(limit)
        )

        try:
            docs = await cursor.to_list(length=limit)
        except PyMongoError as e:
            raise PersistenceError(f"Failed to fetch recent events: {e}", operation="recent") from e

        events: List[Event] = []
        for doc in docs:
            event = self._document_to_event(doc)
            if event is not None:
                events.append(event)
        return events

    async def ensure_indexes(self) -> None:
        try:
            await self.event_collection.create_index([(EventFields.CREATED_AT, DESCENDING)])
        except PyMongoError as e:
            raise PersistenceError(f"Failed to create events index: {e}", operation="ensure_indexes") from e

    def _document_to_event(self, doc: dict) -> Optional[Event]:
        name = doc.get(EventFields.NAME)
        if not isinstance(name, str) or not name.strip():
            # Written outside this service; the store never accepts a blank name
            logger.warning(f"Skipping event document {doc.get(EventFields.MONGO_ID)} without a name")
            return None

        created_at = ensure_utc(doc.get(EventFields.CREATED_AT)) or utc_now()
        return Event(
            id=str(doc.get(EventFields.MONGO_ID)),
            name=name,
            params=EventParams(doc.get(EventFields.PARAMS)),
            created_at=created_at,
            updated_at=ensure_utc(doc.get(EventFields.UPDATED_AT)) or created_at,
        )
