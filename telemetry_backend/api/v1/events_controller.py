"""
Events API: ingest one client-side event, list the most recent events.
"""

# -----------------------------------------------------------------------------
# Standard library
# -----------------------------------------------------------------------------
import logging
from typing import Any, Dict, List, Mapping

# -----------------------------------------------------------------------------
# Third-party
# -----------------------------------------------------------------------------
from fastapi import APIRouter, Request, Response, status
from fastapi.responses import JSONResponse

# -----------------------------------------------------------------------------
# Application
# -----------------------------------------------------------------------------
from ...application.dto.event_dto import ErrorResponse, EventResponse
from ...application.use_cases.event.list_recent_events import ListRecentEventsUseCase
from ...application.use_cases.event.log_event import LogEventUseCase
from ...di.container import get_container
from ...domain.exceptions import PersistenceError, ValidationError

# -----------------------------------------------------------------------------
# Logging and router
# -----------------------------------------------------------------------------
logger = logging.getLogger(__name__)
router = APIRouter(tags=["events"])

MISSING_NAME_ERROR = "Missing event name"
LOG_FAILED_ERROR = "Failed to log event"
FETCH_FAILED_ERROR = "Failed to fetch events"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def _read_payload(request: Request) -> Dict[str, Any]:
    try:
        body = await request.json()
    except ValueError:
        return {}
    return dict(body) if isinstance(body, Mapping) else {}


@router.post(
    "",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def log_event(request: Request) -> Response:
    """
    Log one client-side event.

    Expected payload structure:
    {
        "name": "button_click",
        "params": {"button": "quote", "from": "/services", "uid": "..."}
    }

    The body is read leniently: a missing, malformed or non-object body
    is treated as {} and rejected for its missing name.
    """
    payload = await _read_payload(request)
    container = get_container()
    use_case = container.get(LogEventUseCase)

    try:
        await use_case.execute(name=payload.get("name"), params=payload.get("params"))
    except ValidationError as e:
        logger.info(f"Rejected event: {e}")
        return _error(status.HTTP_400_BAD_REQUEST, MISSING_NAME_ERROR)
    except PersistenceError as e:
        logger.error(f"{LOG_FAILED_ERROR}: {e}", exc_info=True)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, LOG_FAILED_ERROR)

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "",
    response_model=List[EventResponse],
    responses={500: {"model": ErrorResponse}},
)
async def list_events():
    """
    Latest 100 events, newest first. The limit is fixed; there is no paging.
    """
    container = get_container()
    use_case = container.get(ListRecentEventsUseCase)

    try:
        return await use_case.execute()
    except PersistenceError as e:
        logger.error(f"{FETCH_FAILED_ERROR}: {e}", exc_info=True)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, FETCH_FAILED_ERROR)
