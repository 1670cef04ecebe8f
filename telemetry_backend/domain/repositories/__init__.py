from .event_repository import EventRepository, RECENT_EVENTS_LIMIT

__all__ = ["EventRepository", "RECENT_EVENTS_LIMIT"]
