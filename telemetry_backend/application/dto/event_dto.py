from datetime import datetime
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field


class EventResponse(BaseModel):
    """One stored event as returned by GET /api/events"""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    name: str
    params: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")


class ErrorResponse(BaseModel):
    error: str
