from .event_dto import EventResponse, ErrorResponse

__all__ = [
    "EventResponse",
    "ErrorResponse",
]
