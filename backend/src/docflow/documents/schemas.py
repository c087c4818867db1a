"""Pydantic schemas for the Documents API"""

from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ..domain.documents.document_status import ApprovalAction, DocumentStatus


# ============================================================================
# Document Schemas
# ============================================================================

class DocumentResponse(BaseModel):
    """Response schema for a document"""
    id: UUID
    title: str
    description: Optional[str] = None
    file_path: str
    file_type: Optional[str] = None
    file_size: Optional[int] = None
    status: DocumentStatus
    version: int
    creator_id: UUID
    uploaded_at: datetime
    updated_at: datetime
    allowed_actions: List[ApprovalAction] = Field(
        default_factory=list,
        description="Review actions the caller may take right now",
    )

    model_config = ConfigDict(from_attributes=True)


class DocumentListResponse(BaseModel):
    """Response for GET /documents"""
    items: List[DocumentResponse]
    total: int
    limit: int
    offset: int


class DocumentUpdate(BaseModel):
    """Schema for PATCH /documents/{id}; status is not editable"""
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    description: Optional[str] = None

    model_config = ConfigDict(extra='forbid')


class DocumentStatsResponse(BaseModel):
    """Document counts per status"""
    total: int
    by_status: Dict[DocumentStatus, int]


# ============================================================================
# Approval Schemas
# ============================================================================

class ApprovalResponse(BaseModel):
    """One entry of a document's review history.

    status is the document status the review produced.
    """
    id: UUID
    document_id: UUID
    approver_id: UUID
    status: DocumentStatus
    comment: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TransitionRequest(BaseModel):
    """Body of POST /documents/{id}/approval"""
    action: ApprovalAction = Field(..., description="APPROVE or REJECT")
    comment: Optional[str] = Field(None, max_length=5000)

    model_config = ConfigDict(
        extra='forbid',
        json_schema_extra={"example": {"action": "APPROVE", "comment": "Checked against QM-12"}},
    )


class TransitionResponse(BaseModel):
    """Result of a committed review"""
    document: DocumentResponse
    approval: ApprovalResponse
