"""Polling aggregator: periodically pulls the latest events and recomputes the dashboard snapshot."""
import asyncio
import logging
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Callable, Optional

from ...core.config import get_settings
from ...domain.exceptions import NetworkError
from ...domain.models.event_record import records_from_payload
from ...infrastructure.cache.fallback_cache import LocalFallbackCache
from ...infrastructure.external.events_api_client import EventsApiClient
from ...utils.datetime_utils import utc_now
from .aggregation import AnalyticsSnapshot, EventSource, FetchResult, build_snapshot

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[AnalyticsSnapshot], Any]


class AggregatorState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    REFRESHING = "refreshing"


class EventAggregator:
    """
    Keeps an up-to-date AnalyticsSnapshot of the latest events.

    Each cycle tries the events API first; on any NetworkError it reads
    the local fallback cache instead, without surfacing an error. Only the
    very first cycle leaves the aggregator without a snapshot (LOADING);
    later cycles refresh in the background while the previous snapshot
    stays readable (REFRESHING).

    Polling runs on a single asyncio ticker. A tick that fires while a
    cycle is still pending is skipped, so requests never overlap.
    """

    def __init__(
        self,
        events_client: EventsApiClient,
        fallback_cache: LocalFallbackCache,
        poll_interval: Optional[float] = None,
        active_window: Optional[timedelta] = None,
        clock: Callable[[], datetime] = utc_now,
        on_snapshot: Optional[SnapshotListener] = None,
    ) -> None:
        """
        Initialize aggregator.

        Args:
            events_client: Client for the events API (authoritative source)
            fallback_cache: Local cache used when the events API is unreachable
            poll_interval: Seconds between ticks. If None, reads from env.
            active_window: Trailing window for active views. If None, reads from env.
            clock: Source of the current wall-clock time
            on_snapshot: Called with every newly computed snapshot
        """
        settings = get_settings()
        self.events_client = events_client
        self.fallback_cache = fallback_cache
        self.poll_interval = (
            poll_interval if poll_interval is not None else settings.analytics_poll_interval_sec
        )
        self.active_window = (
            active_window
            if active_window is not None
            else timedelta(minutes=settings.analytics_active_window_min)
        )
        self._clock = clock
        self._on_snapshot = on_snapshot

        self._state = AggregatorState.IDLE
        self._snapshot: Optional[AnalyticsSnapshot] = None
        self._cycle_running = False
        self._ticker: Optional[asyncio.Task] = None
        self._cycle_task: Optional[asyncio.Task] = None

    @property
    def state(self) -> AggregatorState:
        return self._state

    @property
    def snapshot(self) -> Optional[AnalyticsSnapshot]:
        """Latest snapshot, or None until the first cycle completes"""
        return self._snapshot

    @property
    def is_ready(self) -> bool:
        return self._snapshot is not None

    @property
    def is_running(self) -> bool:
        return self._ticker is not None and not self._ticker.done()

    @property
    def cycle_in_flight(self) -> bool:
        return self._cycle_running or (self._cycle_task is not None and not self._cycle_task.done())

    # ------------------------------------------------------------------
    # One cycle
    # ------------------------------------------------------------------

    async def acquire(self) -> FetchResult:
        """
        Get this cycle's event set.

        The authoritative fetch always comes first. Only a successful fetch
        updates the fallback cache; a fallback read never writes it.
        """
        try:
            payload = await self.events_client.fetch_recent()
        except NetworkError as e:
            logger.warning(f"Events API unavailable, using local fallback cache: {e}")
            cached = await self.fallback_cache.read()
            return FetchResult(source=EventSource.FALLBACK, events=records_from_payload(cached))

        await self.fallback_cache.write(payload)
        return FetchResult(source=EventSource.AUTHORITATIVE, events=records_from_payload(payload))

    async def refresh(self) -> Optional[AnalyticsSnapshot]:
        """
        Run one cycle and replace the snapshot.

        Returns:
            The new snapshot, or None if another cycle was already in flight
        """
        if self._cycle_running:
            logger.debug("Analytics cycle already in flight, skipping")
            return None

        self._cycle_running = True
        self._state = AggregatorState.LOADING if self._snapshot is None else AggregatorState.REFRESHING
        try:
            result = await self.acquire()
            snapshot = build_snapshot(
                result.events,
                now=self._clock(),
                source=result.source,
                active_window=self.active_window,
            )
            self._snapshot = snapshot
        finally:
            self._state = AggregatorState.READY if self._snapshot is not None else AggregatorState.IDLE
            self._cycle_running = False

        logger.debug(
            f"Analytics snapshot from {snapshot.source.value}: {snapshot.total_events} events, "
            f"{snapshot.active_views} active views"
        )
        if self._on_snapshot is not None:
            self._on_snapshot(snapshot)
        return snapshot

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start polling: one cycle immediately, then one per poll_interval."""
        if self.is_running:
            return
        self._ticker = asyncio.create_task(self._tick_loop())
        logger.info(f"Analytics aggregator started (every {self.poll_interval}s)")

    async def stop(self) -> None:
        """
        Cancel the ticker. A cycle already in flight is allowed to finish,
        but no further cycle starts.
        """
        ticker, self._ticker = self._ticker, None
        if ticker is None:
            return
        ticker.cancel()
        try:
            await ticker
        except asyncio.CancelledError:
            pass
        logger.info("Analytics aggregator stopped")

    async def __aenter__(self) -> "EventAggregator":
        self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()

    async def _tick_loop(self) -> None:
        while True:
            self._on_tick()
            await asyncio.sleep(self.poll_interval)

    def _on_tick(self) -> None:
        if self.cycle_in_flight:
            logger.debug("Previous analytics cycle still pending, skipping tick")
            return
        self._cycle_task = asyncio.create_task(self._run_cycle())

    async def _run_cycle(self) -> None:
        try:
            await self.refresh()
        except Exception as e:
            logger.error(f"Analytics cycle failed: {e}", exc_info=True)
