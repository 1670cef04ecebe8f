from .mongo_connection import get_database, get_event_collection, close_database
from .mongo_event_repository import MongoEventRepository
from .memory_event_repository import InMemoryEventRepository

__all__ = [
    "get_database",
    "get_event_collection",
    "close_database",
    "MongoEventRepository",
    "InMemoryEventRepository",
]
