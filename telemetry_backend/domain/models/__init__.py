from .event import Event, EventNames, normalize_event_name
from .event_params import EventParams, ParamKeys, ScalarValue
from .event_record import EventRecord, records_from_payload

__all__ = [
    "Event",
    "EventNames",
    "normalize_event_name",
    "EventParams",
    "ParamKeys",
    "ScalarValue",
    "EventRecord",
    "records_from_payload",
]
