"""UserActivity SQLAlchemy model"""

import enum
import uuid

from sqlalchemy import Column, Text, ForeignKey, DateTime, Uuid, Index
from sqlalchemy.orm import relationship

from .base import Base, PortableJSONB, utcnow


class ActivityType(str, enum.Enum):
    """Kinds of user actions recorded in the activity log"""
    UPLOAD = "UPLOAD"
    SUBMIT = "SUBMIT"
    UPDATE = "UPDATE"
    APPROVE = "APPROVE"
    REJECT = "REJECT"
    DELETE = "DELETE"


class UserActivity(Base):
    """UserActivity model - append-only log of what each user did.

    Entries are never updated or deleted by the application. document_id is
    kept as a plain reference so entries survive document deletion.
    """
    __tablename__ = "user_activity"
    __table_args__ = (
        Index("ix_user_activity_user_id_created_at", "user_id", "created_at"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    type = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    document_id = Column(Uuid, nullable=True)
    metadata_json = Column(PortableJSONB, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Relationships
    user = relationship("User")
