"""External service clients for communicating with external systems"""

from .events_api_client import EventsApiClient

__all__ = [
    "EventsApiClient",
]
