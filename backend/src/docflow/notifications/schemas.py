"""Pydantic schemas for notification endpoints."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ..models.notification import NotificationType


class NotificationResponse(BaseModel):
    """A notification addressed to the caller"""
    id: UUID
    message: str
    type: NotificationType
    related_id: Optional[UUID] = Field(None, description="Related document ID")
    read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NotificationListResponse(BaseModel):
    items: List[NotificationResponse]
    unread: int


class MarkReadRequest(BaseModel):
    """Body of PATCH /notifications"""
    read: bool = True

    model_config = ConfigDict(extra='forbid')


class MarkReadResponse(BaseModel):
    updated: int
