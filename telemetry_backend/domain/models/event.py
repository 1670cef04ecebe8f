# Standard library imports
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

# Local application imports
from ..exceptions import ValidationError
from .event_params import EventParams


class EventNames:
    """Event kinds the aggregator interprets"""

    PAGE_VIEW = "page_view"
    BUTTON_CLICK = "button_click"


def normalize_event_name(name: Any) -> str:
    """
    Trim an incoming event name and reject anything unusable.

    Raises:
        ValidationError: if name is missing, not a string, or blank
    """
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Missing event name")
    return name.strip()


@dataclass(frozen=True)
class Event:
    """
    Pure domain model for a persisted Event - immutable once stored.

    id and created_at are assigned by the durable store.
    """

    id: Optional[str]
    name: str
    created_at: datetime
    params: EventParams = field(default_factory=EventParams)
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        """Business validations"""
        object.__setattr__(self, "name", normalize_event_name(self.name))
        if not isinstance(self.params, EventParams):
            object.__setattr__(self, "params", EventParams(self.params))
        if self.updated_at is None:
            object.__setattr__(self, "updated_at", self.created_at)
