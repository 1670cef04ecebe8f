from .event_tracker import EventTracker, UserIdStore

__all__ = ["EventTracker", "UserIdStore"]
