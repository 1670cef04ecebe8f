"""Constants for domain model field names"""

from .event_fields import EventFields

__all__ = [
    "EventFields",
]
