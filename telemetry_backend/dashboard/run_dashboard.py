"""
Dashboard runner
----------------

Polls the events API through an EventAggregator and prints each new
snapshot. Falls back to the local cache while the API is unreachable.
Stops on Ctrl+C.
"""

# -----------------------------------------------------------------------------
# Standard library
# -----------------------------------------------------------------------------
import asyncio
import logging

# -----------------------------------------------------------------------------
# Third-party
# -----------------------------------------------------------------------------
from dotenv import load_dotenv

# -----------------------------------------------------------------------------
# Application
# -----------------------------------------------------------------------------
from ..application.analytics.aggregation import AnalyticsSnapshot
from ..application.analytics.aggregator import EventAggregator
from ..core.config import get_settings
from ..infrastructure.cache.fallback_cache import LocalFallbackCache
from ..infrastructure.cache.local_storage import LocalKeyValueStore
from ..infrastructure.external.events_api_client import EventsApiClient
from ..infrastructure.http_client_factory import close_shared_http_client
from .presenter import render_feed, render_snapshot

logger = logging.getLogger(__name__)


def print_snapshot(snapshot: AnalyticsSnapshot) -> None:
    print(render_snapshot(snapshot))
    print()
    print(render_feed(snapshot.latest))
    print("=" * 60)


async def run() -> None:
    settings = get_settings()
    aggregator = EventAggregator(
        events_client=EventsApiClient(),
        fallback_cache=LocalFallbackCache(LocalKeyValueStore(settings.telemetry_cache_dir)),
        on_snapshot=print_snapshot,
    )

    try:
        async with aggregator:
            # Runs until cancelled (Ctrl+C)
            await asyncio.Event().wait()
    finally:
        await close_shared_http_client()


def main() -> None:
    load_dotenv()
    logging.basicConfig(
        level=get_settings().log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    print(render_snapshot(None))
    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        logger.info("Dashboard stopped")


if __name__ == "__main__":
    main()
