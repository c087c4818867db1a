"""Approval SQLAlchemy model"""

import uuid

from sqlalchemy import Column, Text, ForeignKey, DateTime, Uuid, Index
from sqlalchemy.orm import relationship

from .base import Base, utcnow


class Approval(Base):
    """Approval model - append-only review history of a document.

    One row per executed review transition. `status` holds the document
    status the transition produced (PENDING, APPROVED or REJECTED), not the
    reviewer's APPROVE/REJECT keyword. Rows are never updated.
    """
    __tablename__ = "approval"
    __table_args__ = (
        Index("ix_approval_document_id_created_at", "document_id", "created_at"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    document_id = Column(Uuid, ForeignKey("document.id", ondelete="CASCADE"), nullable=False)
    approver_id = Column(Uuid, ForeignKey("user.id", ondelete="RESTRICT"), nullable=False)
    status = Column(Text, nullable=False)
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Relationships
    document = relationship("Document", back_populates="approvals")
    approver = relationship("User")
