from fastapi import APIRouter

from ...utils.datetime_utils import to_iso, utc_now

router = APIRouter(tags=["health"])


@router.get("/health")
async def health():
    return {
        "status": "OK",
        "message": "Helicopter Services API is running",
        "timestamp": to_iso(utc_now()),
    }
