"""Notification SQLAlchemy model"""

import enum
import uuid

from sqlalchemy import Column, Text, ForeignKey, Boolean, DateTime, Uuid, CheckConstraint, Index
from sqlalchemy.orm import relationship

from .base import Base, utcnow


class NotificationType(str, enum.Enum):
    """Severity shown to the recipient"""
    SUCCESS = "SUCCESS"
    WARNING = "WARNING"
    ERROR = "ERROR"
    INFO = "INFO"


class Notification(Base):
    """Notification addressed to a single user.

    Created by workflow transitions for the document creator. Only the read
    flag changes after creation.
    """
    __tablename__ = "notification"
    __table_args__ = (
        CheckConstraint(
            "type IN ('SUCCESS', 'WARNING', 'ERROR', 'INFO')",
            name="ck_notification_type"
        ),
        Index("ix_notification_user_id_created_at", "user_id", "created_at"),
        Index("ix_notification_related_id", "related_id"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(Text, nullable=False, default=NotificationType.INFO.value)
    related_id = Column(Uuid, nullable=True)  # Related document, not enforced
    read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Relationships
    user = relationship("User")
