"""Document SQLAlchemy model

Document represents an uploaded file moving through the approval workflow.
"""

import uuid

from sqlalchemy import Column, Text, ForeignKey, BigInteger, Integer, DateTime, Uuid, CheckConstraint, Index
from sqlalchemy.orm import relationship

from ..domain.documents.document_status import DocumentStatus
from .base import Base, utcnow


class Document(Base):
    """Document model for approval-tracked files.

    The status column is written only by the workflow transitions in
    docflow.documents (review transitions and submission). Other code paths
    must treat it as read-only.
    """
    __tablename__ = "document"
    __table_args__ = (
        CheckConstraint(
            "status IN ('DRAFTED', 'SUBMITTED', 'PENDING', 'APPROVED', 'REJECTED')",
            name="ck_document_status"
        ),
        Index("ix_document_status", "status"),
        Index("ix_document_creator_id", "creator_id"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    file_path = Column(Text, nullable=False)  # Storage key of the stored file
    file_type = Column(Text, nullable=True)  # pdf | doc | docx
    file_size = Column(BigInteger, nullable=True)
    status = Column(Text, nullable=False, default=DocumentStatus.SUBMITTED.value)
    version = Column(Integer, nullable=False, default=1)
    creator_id = Column(Uuid, ForeignKey("user.id", ondelete="RESTRICT"), nullable=False)
    uploaded_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    # Relationships
    creator = relationship("User")
    approvals = relationship(
        "Approval",
        back_populates="document",
        order_by="Approval.created_at.desc()",
        passive_deletes=True,
    )

    @property
    def status_enum(self) -> DocumentStatus:
        return DocumentStatus(self.status)
