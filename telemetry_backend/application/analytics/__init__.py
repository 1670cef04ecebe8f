from .aggregation import (
    AnalyticsSnapshot,
    ButtonCount,
    EventSource,
    FetchResult,
    PageCount,
    build_snapshot,
)
from .aggregator import AggregatorState, EventAggregator

__all__ = [
    "AnalyticsSnapshot",
    "ButtonCount",
    "EventSource",
    "FetchResult",
    "PageCount",
    "build_snapshot",
    "AggregatorState",
    "EventAggregator",
]
