"""
Plain-text rendering of analytics snapshots.

Mirrors the admin dashboard panels: headline numbers, "Top Pages",
"Button Clicks" and the latest events feed.
"""
from typing import List, Optional, Sequence

from ..application.analytics.aggregation import AnalyticsSnapshot, EventSource
from ..domain.models.event_record import EventRecord
from ..utils.datetime_utils import to_iso


def _table(headers: Sequence[str], rows: Sequence[Sequence[object]], empty: str) -> List[str]:
    if not rows:
        return [empty]
    cells = [[str(value) for value in row] for row in rows]
    widths = [
        max(len(header), *(len(row[i]) for row in cells))
        for i, header in enumerate(headers)
    ]
    lines = ["  ".join(h.ljust(w) for h, w in zip(headers, widths)).rstrip()]
    lines.append("  ".join("-" * w for w in widths))
    lines.extend("  ".join(c.ljust(w) for c, w in zip(row, widths)).rstrip() for row in cells)
    return lines


def render_snapshot(snapshot: Optional[AnalyticsSnapshot]) -> str:
    """Render a snapshot; None means the first cycle has not finished yet."""
    if snapshot is None:
        return "Loading analytics…"

    minutes = int(snapshot.active_window.total_seconds() // 60)
    lines = [
        "Real-Time Analytics",
        f"Active Views ({minutes} min): {snapshot.active_views}",
        f"Total Unique Users:   {snapshot.unique_users}",
        f"Events analysed:      {snapshot.total_events}",
    ]
    if snapshot.source is EventSource.FALLBACK:
        lines.append("Source: local cache")
    lines.append("")
    lines.append("Top Pages")
    lines.extend(_table(("Path", "Views"), snapshot.page_rows, "No data"))
    lines.append("")
    lines.append("Button Clicks")
    lines.extend(_table(("Button", "From Path", "Clicks"), snapshot.button_rows, "No clicks yet"))
    return "\n".join(lines)


def render_feed(events: Sequence[EventRecord]) -> str:
    """Latest events, one line each: name and time seen."""
    if not events:
        return "No events logged yet."
    lines = ["Latest Analytics Events"]
    for event in events:
        seen_at = to_iso(event.effective_time) or "-"
        lines.append(f"{event.name or '?'} ({seen_at})")
    return "\n".join(lines)
