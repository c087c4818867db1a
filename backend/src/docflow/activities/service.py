"""User activity logging service.

Central place for appending UserActivity entries. Entries are written inside
the caller's transaction so an activity exists exactly when the action it
describes was committed.
"""

from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models.user_activity import UserActivity, ActivityType


def log_user_activity(
    db: Session,
    user_id: UUID,
    type: ActivityType,
    description: str,
    document_id: Optional[UUID] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> UserActivity:
    """Append an activity entry to the current transaction.

    All parameters are stored as-is. Does not commit.

    Args:
        db: Database session
        user_id: User who performed the action
        type: Activity kind (UPLOAD, SUBMIT, APPROVE, ...)
        description: Free-text description
        document_id: Related document, if any
        metadata: Additional context as JSON (e.g. {"from_status": "SUBMITTED"})

    Returns:
        UserActivity: The pending activity entry

    Example:
        log_user_activity(
            db=db,
            user_id=actor.id,
            type=ActivityType.APPROVE,
            description="approved document: QM Manual",
            document_id=document.id,
        )
    """
    entry = UserActivity(
        user_id=user_id,
        type=type.value,
        description=description,
        document_id=document_id,
        metadata_json=metadata,
    )
    db.add(entry)
    db.flush()
    return entry


def list_user_activities(
    db: Session,
    user_id: UUID,
    types: Optional[List[ActivityType]] = None,
    limit: int = 50,
) -> List[UserActivity]:
    """Recent activity of a user, newest first, optionally filtered by type."""
    stmt = select(UserActivity).where(UserActivity.user_id == user_id)
    if types:
        stmt = stmt.where(UserActivity.type.in_([t.value for t in types]))
    stmt = stmt.order_by(UserActivity.created_at.desc()).limit(limit)
    return list(db.scalars(stmt))
