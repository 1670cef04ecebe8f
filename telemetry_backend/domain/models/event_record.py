# Standard library imports
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Mapping, Optional, Sequence

# Local application imports
from ...utils.datetime_utils import coerce_timestamp
from .event_params import EventParams


@dataclass(frozen=True)
class EventRecord:
    """
    Client-side view of an event, as seen by the aggregator.

    Records come either from the events API (carrying createdAt) or from
    the local fallback cache, where locally buffered events carry a
    timestamp instead. Both are treated as equivalent for windowing.
    """

    name: str
    params: EventParams = field(default_factory=EventParams)
    created_at: Optional[datetime] = None
    timestamp: Optional[datetime] = None
    id: Optional[str] = None

    @property
    def effective_time(self) -> Optional[datetime]:
        return self.created_at or self.timestamp

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "EventRecord":
        name = raw.get("name")
        record_id = raw.get("_id", raw.get("id"))
        return cls(
            name=name if isinstance(name, str) else "",
            params=EventParams(raw.get("params")),
            created_at=coerce_timestamp(raw.get("createdAt")),
            timestamp=coerce_timestamp(raw.get("timestamp")),
            id=str(record_id) if record_id is not None else None,
        )


def records_from_payload(payload: Sequence[Any]) -> List[EventRecord]:
    """Convert raw JSON items into records, skipping anything that is not an object."""
    return [EventRecord.from_dict(item) for item in payload if isinstance(item, Mapping)]
