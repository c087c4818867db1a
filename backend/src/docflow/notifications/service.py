"""Notification service.

Creates notifications as part of a caller-owned transaction and serves the
recipient's inbox. Notifications are never deleted here; only the read flag
changes after creation.
"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from ..domain.documents.document_status import DocumentStatus
from ..models.notification import Notification, NotificationType


# Severity of the creator's notification for each status a review can produce
NOTIFICATION_TYPE_BY_STATUS = {
    DocumentStatus.PENDING: NotificationType.INFO,
    DocumentStatus.APPROVED: NotificationType.SUCCESS,
    DocumentStatus.REJECTED: NotificationType.ERROR,
}


def notification_type_for(status: DocumentStatus) -> NotificationType:
    """Severity for a review outcome (INFO for anything unmapped)."""
    return NOTIFICATION_TYPE_BY_STATUS.get(status, NotificationType.INFO)


def review_message(title: str, status: DocumentStatus) -> str:
    """Message shown to the document creator after a review.

    Example:
        >>> review_message("QM Manual", DocumentStatus.APPROVED)
        'Your document "QM Manual" has been approved'
    """
    if status is DocumentStatus.PENDING:
        return (
            f'Your document "{title}" has been approved by a manager '
            f'and is pending standardization review'
        )
    return f'Your document "{title}" has been {status.value.lower()}'


def create_notification(
    db: Session,
    user_id: UUID,
    message: str,
    type: NotificationType = NotificationType.INFO,
    related_id: Optional[UUID] = None,
) -> Notification:
    """Add a notification to the current transaction.

    Does not commit; the caller owns the unit of work.

    Args:
        db: Database session
        user_id: Recipient
        message: Text shown to the recipient
        type: Severity
        related_id: Related document ID

    Returns:
        Notification: The pending notification row
    """
    notification = Notification(
        user_id=user_id,
        message=message,
        type=type.value,
        related_id=related_id,
        read=False,
    )
    db.add(notification)
    db.flush()  # Surface constraint errors inside the caller's transaction
    return notification


def list_notifications(db: Session, user_id: UUID, limit: int = 50) -> List[Notification]:
    """Most recent notifications for a recipient, newest first."""
    stmt = (
        select(Notification)
        .where(Notification.user_id == user_id)
        .order_by(Notification.created_at.desc())
        .limit(limit)
    )
    return list(db.scalars(stmt))


def mark_all_read(db: Session, user_id: UUID, read: bool = True) -> int:
    """Set the read flag on all of a recipient's notifications.

    Returns:
        int: Number of rows updated
    """
    result = db.execute(
        update(Notification)
        .where(Notification.user_id == user_id)
        .values(read=read)
    )
    db.commit()
    return result.rowcount
