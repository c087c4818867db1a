"""Pydantic schemas for activity endpoints."""

from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ..models.user_activity import ActivityType


class UserActivityResponse(BaseModel):
    """One entry of the caller's activity history.

    All fields are read-only.
    """
    id: UUID
    type: ActivityType
    description: str
    document_id: Optional[UUID] = Field(None, description="Related document, may no longer exist")
    metadata: Optional[Dict[str, Any]] = Field(None, validation_alias="metadata_json")
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
