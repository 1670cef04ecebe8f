# Standard library imports
import logging
from typing import Any, Dict, List, Mapping, Optional

# External package imports
import httpx

# Local application imports
from ...core.config import get_settings
from ...domain.exceptions import NetworkError
from ..http_client_factory import get_shared_http_client

logger = logging.getLogger(__name__)

EVENTS_PATH = "/api/events"


class EventsApiClient:
    """
    HTTP client for the events API, used by client-side components.

    Every failure (transport error, non-2xx status, undecodable body) is
    reported as NetworkError so callers only have one thing to recover from.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """
        Initialize events API client.

        Args:
            base_url: Base URL of the events API. If None, reads from env.
            http_client: AsyncClient to use. If None, the shared pooled client is used.
        """
        settings = get_settings()
        self.base_url = (base_url or settings.events_api_url).rstrip("/")
        self._http_client = http_client

    @property
    def events_url(self) -> str:
        return f"{self.base_url}{EVENTS_PATH}"

    def _client(self) -> httpx.AsyncClient:
        return self._http_client if self._http_client is not None else get_shared_http_client()

    async def fetch_recent(self) -> List[Dict[str, Any]]:
        """
        Fetch the most recent events (newest first) from the query endpoint.

        Returns:
            Raw event objects exactly as the API returned them

        Raises:
            NetworkError: if the events API is unreachable or answers with an error
        """
        try:
            response = await self._client().get(self.events_url)
        except httpx.HTTPError as e:
            raise NetworkError(
                f"Events API unreachable at {self.events_url}: {e}", url=self.events_url
            ) from e

        if not response.is_success:
            raise NetworkError(
                f"Events API returned {response.status_code}",
                url=self.events_url,
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise NetworkError(
                "Events API returned a non-JSON body",
                url=self.events_url,
                status_code=response.status_code,
            ) from e

        if not isinstance(payload, list):
            raise NetworkError(
                "Events API returned an unexpected payload",
                url=self.events_url,
                status_code=response.status_code,
            )

        return [item for item in payload if isinstance(item, dict)]

    async def send_event(self, name: str, params: Optional[Mapping[str, Any]] = None) -> None:
        """
        Post one event to the ingestion endpoint.

        Raises:
            NetworkError: if the event could not be delivered
        """
        body = {"name": name, "params": dict(params or {})}
        try:
            response = await self._client().post(self.events_url, json=body)
        except httpx.HTTPError as e:
            raise NetworkError(
                f"Events API unreachable at {self.events_url}: {e}", url=self.events_url
            ) from e

        if not response.is_success:
            raise NetworkError(
                f"Events API rejected event '{name}' with {response.status_code}",
                url=self.events_url,
                status_code=response.status_code,
            )
