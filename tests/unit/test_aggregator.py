"""
Unit tests for EventAggregator (dual-source acquisition, state machine, polling).
"""
import asyncio
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from telemetry_backend.application.analytics.aggregation import EventSource, build_snapshot
from telemetry_backend.application.analytics.aggregator import AggregatorState, EventAggregator
from telemetry_backend.domain.exceptions import NetworkError
from telemetry_backend.domain.models.event_record import records_from_payload
from telemetry_backend.utils.datetime_utils import to_iso

NOW = datetime(2025, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


def _payload(*paths, minutes_ago=1):
    created = to_iso(NOW - timedelta(minutes=minutes_ago))
    return [
        {"_id": str(i), "name": "page_view", "params": {"path": p}, "createdAt": created}
        for i, p in enumerate(paths)
    ]


def _aggregator(client, cache, **kwargs):
    kwargs.setdefault("poll_interval", 10)
    return EventAggregator(events_client=client, fallback_cache=cache, clock=lambda: NOW, **kwargs)


class TestAcquire:
    """Authoritative fetch first, fallback cache on failure"""

    @pytest.mark.asyncio
    async def test_success_is_authoritative_and_cached(self, fallback_cache):
        payload = _payload("/a", "/b")
        client = AsyncMock()
        client.fetch_recent.return_value = payload
        aggregator = _aggregator(client, fallback_cache)

        result = await aggregator.acquire()

        assert result.source is EventSource.AUTHORITATIVE
        assert not result.is_fallback
        assert [e.params["path"] for e in result.events] == ["/a", "/b"]
        assert await fallback_cache.read() == payload

    @pytest.mark.asyncio
    async def test_failure_reads_fallback_cache(self, fallback_cache):
        cached = _payload("/cached")
        await fallback_cache.write(cached)
        client = AsyncMock()
        client.fetch_recent.side_effect = NetworkError("unreachable")
        aggregator = _aggregator(client, fallback_cache)

        result = await aggregator.acquire()

        assert result.is_fallback
        assert [e.params["path"] for e in result.events] == ["/cached"]

    @pytest.mark.asyncio
    async def test_fallback_read_never_writes_cache(self):
        cache = MagicMock()
        cache.read = AsyncMock(return_value=[])
        cache.write = AsyncMock()
        client = AsyncMock()
        client.fetch_recent.side_effect = NetworkError("unreachable")

        await _aggregator(client, cache).acquire()

        cache.read.assert_awaited_once()
        cache.write.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failure_with_empty_cache_gives_empty_snapshot(self, fallback_cache):
        client = AsyncMock()
        client.fetch_recent.side_effect = NetworkError("unreachable")
        aggregator = _aggregator(client, fallback_cache)

        snapshot = await aggregator.refresh()

        assert snapshot.source is EventSource.FALLBACK
        assert snapshot.total_events == 0
        assert snapshot.page_rows == []


class TestRefresh:
    """One cycle: snapshot replacement and state transitions"""

    @pytest.mark.asyncio
    async def test_first_cycle_idle_loading_ready(self, fallback_cache):
        states = []
        aggregator = None

        async def fetch():
            states.append(aggregator.state)
            return _payload("/a")

        client = MagicMock()
        client.fetch_recent = fetch
        aggregator = _aggregator(client, fallback_cache)

        assert aggregator.state is AggregatorState.IDLE
        assert not aggregator.is_ready
        await aggregator.refresh()

        assert states == [AggregatorState.LOADING]
        assert aggregator.state is AggregatorState.READY
        assert aggregator.is_ready

    @pytest.mark.asyncio
    async def test_later_cycles_refresh_without_dropping_snapshot(self, fallback_cache):
        observed = []
        aggregator = None

        async def fetch():
            observed.append((aggregator.state, aggregator.snapshot))
            return _payload("/a")

        client = MagicMock()
        client.fetch_recent = fetch
        aggregator = _aggregator(client, fallback_cache)

        first = await aggregator.refresh()
        await aggregator.refresh()

        assert observed[1] == (AggregatorState.REFRESHING, first)
        assert aggregator.state is AggregatorState.READY

    @pytest.mark.asyncio
    async def test_snapshot_replaced_not_accumulated(self, fallback_cache):
        client = AsyncMock()
        client.fetch_recent.return_value = _payload("/a", "/a")
        aggregator = _aggregator(client, fallback_cache)

        for _ in range(3):
            snapshot = await aggregator.refresh()

        assert snapshot.page_rows == [("/a", 2)]

    @pytest.mark.asyncio
    async def test_repeated_failures_match_cache_aggregation(self, fallback_cache):
        cached = _payload("/a", "/a", "/b")
        await fallback_cache.write(cached)
        client = AsyncMock()
        client.fetch_recent.side_effect = NetworkError("unreachable")
        aggregator = _aggregator(client, fallback_cache)

        expected = build_snapshot(records_from_payload(cached), NOW, source=EventSource.FALLBACK)
        snapshots = [await aggregator.refresh() for _ in range(3)]

        assert all(s == expected for s in snapshots)
        assert await fallback_cache.read() == cached

    @pytest.mark.asyncio
    async def test_recovers_after_outage(self, fallback_cache):
        client = AsyncMock()
        client.fetch_recent.side_effect = [NetworkError("down"), _payload("/back")]
        aggregator = _aggregator(client, fallback_cache)

        assert (await aggregator.refresh()).source is EventSource.FALLBACK
        recovered = await aggregator.refresh()
        assert recovered.source is EventSource.AUTHORITATIVE
        assert recovered.page_rows == [("/back", 1)]

    @pytest.mark.asyncio
    async def test_concurrent_refresh_is_skipped(self, fallback_cache):
        release = asyncio.Event()
        calls = []

        async def slow_fetch():
            calls.append(1)
            await release.wait()
            return _payload("/a")

        client = MagicMock()
        client.fetch_recent = slow_fetch
        aggregator = _aggregator(client, fallback_cache)

        first = asyncio.create_task(aggregator.refresh())
        await asyncio.sleep(0)
        assert aggregator.cycle_in_flight
        assert await aggregator.refresh() is None

        release.set()
        assert (await first) is not None
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_listener_receives_snapshot(self, fallback_cache):
        client = AsyncMock()
        client.fetch_recent.return_value = _payload("/a")
        received = []
        aggregator = _aggregator(client, fallback_cache, on_snapshot=received.append)

        snapshot = await aggregator.refresh()

        assert received == [snapshot]

    @pytest.mark.asyncio
    async def test_active_window_uses_clock(self, fallback_cache):
        client = AsyncMock()
        client.fetch_recent.return_value = _payload("/a", minutes_ago=4) + _payload("/b", minutes_ago=6)
        aggregator = _aggregator(client, fallback_cache, active_window=timedelta(minutes=5))

        snapshot = await aggregator.refresh()

        assert snapshot.active_views == 1


class TestPolling:
    """Ticker start/stop and tick skipping"""

    @pytest.mark.asyncio
    async def test_polls_until_stopped(self, fallback_cache):
        client = AsyncMock()
        client.fetch_recent.return_value = _payload("/a")
        aggregator = _aggregator(client, fallback_cache, poll_interval=0.01)

        async with aggregator:
            assert aggregator.is_running
            await asyncio.sleep(0.08)

        assert not aggregator.is_running
        calls_at_stop = client.fetch_recent.await_count
        assert calls_at_stop >= 2

        await asyncio.sleep(0.05)
        assert client.fetch_recent.await_count == calls_at_stop

    @pytest.mark.asyncio
    async def test_tick_skipped_while_cycle_pending(self, fallback_cache):
        release = asyncio.Event()
        calls = []

        async def slow_fetch():
            calls.append(1)
            await release.wait()
            return _payload("/a")

        client = MagicMock()
        client.fetch_recent = slow_fetch
        aggregator = _aggregator(client, fallback_cache, poll_interval=0.01)

        aggregator.start()
        await asyncio.sleep(0.08)
        assert len(calls) == 1

        await aggregator.stop()
        release.set()
        await asyncio.sleep(0.01)
        assert aggregator.is_ready
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_cycle_errors_do_not_stop_polling(self, fallback_cache):
        client = AsyncMock()
        client.fetch_recent.return_value = _payload("/a")
        received = []

        def listener(snapshot):
            received.append(snapshot)
            if len(received) == 1:
                raise RuntimeError("render failed")

        aggregator = _aggregator(client, fallback_cache, poll_interval=0.01, on_snapshot=listener)

        async with aggregator:
            await asyncio.sleep(0.06)

        assert len(received) >= 2

    @pytest.mark.asyncio
    async def test_stop_without_start_is_noop(self, fallback_cache):
        aggregator = _aggregator(AsyncMock(), fallback_cache)
        await aggregator.stop()
        assert not aggregator.is_running
