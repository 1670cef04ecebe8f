"""
Aggregation of the latest event slice into a dashboard snapshot.

build_snapshot() is a pure function of (events, now): every cycle
recomputes the whole snapshot from scratch, nothing is carried over.
"""

# -----------------------------------------------------------------------------
# Standard library
# -----------------------------------------------------------------------------
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

# -----------------------------------------------------------------------------
# Application
# -----------------------------------------------------------------------------
from ...domain.models.event import EventNames
from ...domain.models.event_params import ParamKeys
from ...domain.models.event_record import EventRecord
from ...utils.datetime_utils import ensure_utc

UNKNOWN = "unknown"
DEFAULT_ACTIVE_WINDOW = timedelta(minutes=5)


class EventSource(str, Enum):
    """Where the events behind a snapshot came from"""

    AUTHORITATIVE = "authoritative"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class FetchResult:
    """Event set of one poll cycle, tagged with its provenance"""

    source: EventSource
    events: List[EventRecord] = field(default_factory=list)

    @property
    def is_fallback(self) -> bool:
        return self.source is EventSource.FALLBACK


@dataclass(frozen=True)
class PageCount:
    path: str
    count: int


@dataclass(frozen=True)
class ButtonCount:
    button: str
    from_path: str
    count: int


@dataclass(frozen=True)
class AnalyticsSnapshot:
    """Everything the dashboard renders for one cycle"""

    computed_at: datetime
    source: EventSource
    pages: List[PageCount] = field(default_factory=list)
    buttons: List[ButtonCount] = field(default_factory=list)
    active_views: int = 0
    unique_users: int = 0
    total_events: int = 0
    active_window: timedelta = DEFAULT_ACTIVE_WINDOW
    latest: List[EventRecord] = field(default_factory=list)

    @property
    def page_rows(self) -> List[Tuple[str, int]]:
        return [(row.path, row.count) for row in self.pages]

    @property
    def button_rows(self) -> List[Tuple[str, str, int]]:
        return [(row.button, row.from_path, row.count) for row in self.buttons]


# -----------------------------------------------------------------------------
# Grouping helpers
# -----------------------------------------------------------------------------


def _ranked(counts: Dict) -> List[Tuple]:
    # sorted() is stable, so ties keep first-seen order
    return sorted(counts.items(), key=lambda item: item[1], reverse=True)


def count_pages(events: Iterable[EventRecord]) -> List[PageCount]:
    """Group page_view events by path (path, then page_path, then "unknown")."""
    counts: Dict[str, int] = {}
    for event in events:
        if event.name != EventNames.PAGE_VIEW:
            continue
        path = event.params.text(ParamKeys.PATH, ParamKeys.PAGE_PATH, default=UNKNOWN)
        counts[path] = counts.get(path, 0) + 1
    return [PageCount(path=path, count=count) for path, count in _ranked(counts)]


def count_buttons(events: Iterable[EventRecord]) -> List[ButtonCount]:
    """Group button_click events by (button, from)."""
    counts: Dict[Tuple[str, str], int] = {}
    for event in events:
        if event.name != EventNames.BUTTON_CLICK:
            continue
        key = (
            event.params.text(ParamKeys.BUTTON, default=UNKNOWN),
            event.params.text(ParamKeys.FROM, default=UNKNOWN),
        )
        counts[key] = counts.get(key, 0) + 1
    return [
        ButtonCount(button=button, from_path=from_path, count=count)
        for (button, from_path), count in _ranked(counts)
    ]


def count_active_views(
    events: Iterable[EventRecord],
    now: datetime,
    window: timedelta = DEFAULT_ACTIVE_WINDOW,
) -> int:
    """
    Count page_view events whose effective timestamp lies less than
    window before now. Events without a usable timestamp never count.
    """
    now = ensure_utc(now)
    active = 0
    for event in events:
        if event.name != EventNames.PAGE_VIEW:
            continue
        seen_at = event.effective_time
        if seen_at is not None and now - seen_at < window:
            active += 1
    return active


def count_unique_users(events: Iterable[EventRecord]) -> int:
    """Distinct non-empty uid values; events without a uid are not a user."""
    return len({uid for uid in (e.params.text(ParamKeys.UID) for e in events) if uid})


# -----------------------------------------------------------------------------
# Snapshot
# -----------------------------------------------------------------------------


def build_snapshot(
    events: Sequence[EventRecord],
    now: datetime,
    source: EventSource = EventSource.AUTHORITATIVE,
    active_window: timedelta = DEFAULT_ACTIVE_WINDOW,
    latest_limit: Optional[int] = 20,
) -> AnalyticsSnapshot:
    """
    Compute the full dashboard snapshot for one event set.

    Args:
        events: Event slice of the current cycle
        now: Wall-clock time of the computation
        source: Provenance of the event slice
        active_window: Trailing window for active_views
        latest_limit: How many events to keep for the latest-events feed (None keeps all)
    """
    events = list(events)
    latest = events if latest_limit is None else events[:latest_limit]
    return AnalyticsSnapshot(
        computed_at=ensure_utc(now),
        source=source,
        pages=count_pages(events),
        buttons=count_buttons(events),
        active_views=count_active_views(events, now, active_window),
        unique_users=count_unique_users(events),
        total_events=len(events),
        active_window=active_window,
        latest=list(latest),
    )
