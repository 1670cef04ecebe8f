"""Local fallback cache for events, used when the events API is unreachable."""
import asyncio
import json
import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping

from ...utils.datetime_utils import to_iso
from .local_storage import LocalKeyValueStore

logger = logging.getLogger(__name__)

EVENTS_CACHE_KEY = "vw_events"
MAX_CACHED_EVENTS = 100


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return to_iso(value)
    if isinstance(value, Mapping):
        return dict(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class LocalFallbackCache:
    """
    Best-effort copy of previously seen events.

    Holds the last payload fetched from the events API, plus events the
    local tracker buffered while offline. It is not a source of truth: the
    content may be stale or incomplete, and reading never fails.
    """

    def __init__(
        self,
        store: LocalKeyValueStore,
        key: str = EVENTS_CACHE_KEY,
        max_records: int = MAX_CACHED_EVENTS,
    ):
        """
        Initialize fallback cache.

        Args:
            store: Local key/value storage holding the slot
            key: Fixed slot name
            max_records: How many locally buffered events prepend() keeps
        """
        self.store = store
        self.key = key
        self.max_records = max_records
        # Serializes updates of the slot; prepend is a read-modify-write
        self._write_lock = asyncio.Lock()

    async def read(self) -> List[Dict[str, Any]]:
        """
        Return whatever was last cached, or an empty list if nothing is.
        """
        return await asyncio.to_thread(self._read_sync)

    async def write(self, records: Iterable[Mapping[str, Any]]) -> bool:
        """
        Replace the cached snapshot.

        Returns:
            True if the snapshot was stored, False if it could not be
        """
        records = list(records)
        async with self._write_lock:
            return await asyncio.to_thread(self._write_sync, records)

    async def prepend(self, record: Mapping[str, Any]) -> bool:
        """
        Buffer one locally originated event in front of the cached ones,
        keeping only the newest max_records.
        """
        async with self._write_lock:
            return await asyncio.to_thread(self._prepend_sync, record)

    def _read_sync(self) -> List[Dict[str, Any]]:
        try:
            raw = self.store.get_item(self.key)
        except (OSError, ValueError) as e:
            logger.warning(f"Fallback cache unreadable, treating as empty: {e}")
            return []

        if not raw:
            return []

        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.warning(f"Fallback cache is corrupt, treating as empty: {e}")
            return []

        if not isinstance(data, list):
            logger.warning("Fallback cache does not hold a list, treating as empty")
            return []

        return [item for item in data if isinstance(item, dict)]

    def _write_sync(self, records: List[Mapping[str, Any]]) -> bool:
        try:
            payload = json.dumps(records, default=_json_default, ensure_ascii=False)
            self.store.set_item(self.key, payload)
        except (OSError, TypeError, ValueError) as e:
            logger.warning(f"Failed to write fallback cache: {e}")
            return False

        logger.debug(f"Fallback cache updated with {len(records)} record(s)")
        return True

    def _prepend_sync(self, record: Mapping[str, Any]) -> bool:
        records: List[Mapping[str, Any]] = self._read_sync()
        records.insert(0, dict(record))
        return self._write_sync(records[: self.max_records])
