"""Notification endpoints.

Every authenticated user sees only their own notifications.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth.dependencies import CurrentActor
from ..config import get_settings
from ..database import get_db
from .schemas import MarkReadRequest, MarkReadResponse, NotificationListResponse, NotificationResponse
from .service import list_notifications, mark_all_read

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=NotificationListResponse)
def get_notifications(
    actor: CurrentActor,
    db: Annotated[Session, Depends(get_db)],
):
    """Most recent notifications of the caller, newest first."""
    notifications = list_notifications(db, actor.id, limit=get_settings().NOTIFICATION_LIMIT)
    items = [NotificationResponse.model_validate(n) for n in notifications]
    return NotificationListResponse(items=items, unread=sum(1 for n in items if not n.read))


@router.patch("", response_model=MarkReadResponse)
def update_notifications(
    body: MarkReadRequest,
    actor: CurrentActor,
    db: Annotated[Session, Depends(get_db)],
):
    """Set the read flag on all of the caller's notifications."""
    updated = mark_all_read(db, actor.id, read=body.read)
    return MarkReadResponse(updated=updated)
