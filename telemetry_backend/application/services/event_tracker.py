"""Client-side event producer: ships interactions to the events API and buffers them locally."""
import logging
import secrets
import time
from typing import Any, Mapping, Optional

from ...domain.exceptions import NetworkError
from ...domain.models.event import EventNames
from ...domain.models.event_params import ParamKeys
from ...infrastructure.cache.fallback_cache import LocalFallbackCache
from ...infrastructure.cache.local_storage import LocalKeyValueStore
from ...infrastructure.external.events_api_client import EventsApiClient
from ...utils.datetime_utils import to_epoch_millis, utc_now

logger = logging.getLogger(__name__)

USER_ID_KEY = "vw_uid"


def _base36(value: int) -> str:
    digits = "0123456789abcdefghijklmnopqrstuvwxyz"
    out = ""
    while True:
        value, rem = divmod(value, 36)
        out = digits[rem] + out
        if value == 0:
            return out


class UserIdStore:
    """Anonymous, stable client user id kept in a local slot"""

    def __init__(self, store: LocalKeyValueStore, key: str = USER_ID_KEY):
        self.store = store
        self.key = key
        self._cached: Optional[str] = None

    def get_user_id(self) -> str:
        """
        Return the stored user id, creating one on first use.

        If the slot cannot be read or written the id still stays stable
        for the lifetime of this object.
        """
        if self._cached:
            return self._cached

        uid: Optional[str] = None
        try:
            uid = (self.store.get_item(self.key) or "").strip() or None
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read user id slot: {e}")

        if uid is None:
            uid = secrets.token_hex(4) + _base36(int(time.time() * 1000))
            try:
                self.store.set_item(self.key, uid)
            except OSError as e:
                logger.warning(f"Could not persist user id: {e}")

        self._cached = uid
        return uid


class EventTracker:
    """
    Records user interactions.

    Each event is posted to the ingestion endpoint (fire-and-forget:
    delivery failures are logged and dropped) and also prepended to the
    local fallback cache with a local timestamp, so the dashboard has
    data even when the backend is down.
    """

    def __init__(
        self,
        events_client: EventsApiClient,
        fallback_cache: LocalFallbackCache,
        user_ids: UserIdStore,
    ) -> None:
        self.events_client = events_client
        self.fallback_cache = fallback_cache
        self.user_ids = user_ids

    async def track(self, name: str, params: Optional[Mapping[str, Any]] = None) -> bool:
        """
        Record one event.

        Args:
            name: Event kind, e.g. "page_view"
            params: Free-form parameters; uid is added when absent

        Returns:
            True if the events API accepted the event, False otherwise
        """
        params = dict(params or {})
        if ParamKeys.UID not in params:
            params[ParamKeys.UID] = self.user_ids.get_user_id()

        delivered = True
        try:
            await self.events_client.send_event(name, params)
        except NetworkError as e:
            delivered = False
            logger.debug(f"Event {name} not delivered, kept locally only: {e}")

        await self.fallback_cache.prepend(
            {"name": name, "params": params, "timestamp": to_epoch_millis(utc_now())}
        )
        return delivered

    async def page_view(self, path: str) -> bool:
        return await self.track(EventNames.PAGE_VIEW, {ParamKeys.PATH: path})

    async def button_click(self, button: str, from_path: str, to: str = "") -> bool:
        return await self.track(
            EventNames.BUTTON_CLICK,
            {ParamKeys.BUTTON: button, ParamKeys.FROM: from_path, ParamKeys.TO: to},
        )
