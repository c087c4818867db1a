"""Documents API Router

Thin HTTP translation of the document workflow:

- POST   /documents                      upload (ADMIN)
- GET    /documents                      list, optional status filter
- GET    /documents/stats                counts per status
- GET    /documents/{id}                 detail
- GET    /documents/{id}/download        stored file, attachment or inline
- PATCH  /documents/{id}                 edit title/description (ADMIN)
- DELETE /documents/{id}                 administrative delete (ADMIN)
- POST   /documents/{id}/submit          DRAFTED -> SUBMITTED (ADMIN)
- POST   /documents/{id}/approval        approve/reject (role decided by the engine)
- GET    /documents/{id}/approvals       review history, newest first

Workflow errors propagate to the DocumentWorkflowError handler in main.py,
which renders {"error": code, "message": text}.
"""

import logging
from io import BytesIO
from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile, status
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from ..auth.actor import Actor
from ..auth.dependencies import CurrentActor, require_role
from ..auth.roles import UserRole
from ..config import get_settings
from ..database import get_db
from ..dependencies import get_storage
from ..domain.documents.approval_engine import allowed_actions
from ..domain.documents.document_status import DocumentStatus
from ..domain.documents.validation import mime_type_for
from ..models.document import Document
from ..storage.ports import DocumentStoragePort
from .schemas import (
    ApprovalResponse,
    DocumentListResponse,
    DocumentResponse,
    DocumentStatsResponse,
    DocumentUpdate,
    TransitionRequest,
    TransitionResponse,
)
from .service import DocumentService, download_name
from .transition import request_transition, submit_document

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["Documents"])


def _to_response(document: Document, actor: Actor) -> DocumentResponse:
    response = DocumentResponse.model_validate(document)
    response.allowed_actions = allowed_actions(actor.role, document.status_enum)
    return response


@router.post("", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
async def upload_document(
    file: Annotated[UploadFile, File(...)],
    title: Annotated[str, Form(...)],
    actor: Annotated[Actor, Depends(require_role(UserRole.ADMIN))],
    db: Annotated[Session, Depends(get_db)],
    storage: Annotated[DocumentStoragePort, Depends(get_storage)],
    description: Annotated[Optional[str], Form()] = None,
    initial_status: Annotated[DocumentStatus, Form(alias="status")] = DocumentStatus.SUBMITTED,
):
    """Upload a PDF/DOC/DOCX file as a new document.

    The document starts as SUBMITTED unless status=DRAFTED is sent.

    Example:
        curl -X POST https://docflow.example.com/api/v1/documents \\
             -H "Authorization: Bearer $TOKEN" \\
             -F "file=@manual.pdf" -F "title=QM Manual" -F "status=DRAFTED"
    """
    content = await file.read()

    service = DocumentService(db, storage)
    document = service.upload_document(
        actor=actor,
        file=BytesIO(content),
        file_name=file.filename or "",
        content_type=file.content_type or "",
        size_bytes=len(content),
        title=title,
        description=description,
        initial_status=initial_status,
        max_size=get_settings().MAX_UPLOAD_SIZE_BYTES,
    )
    return _to_response(document, actor)


@router.get("", response_model=DocumentListResponse)
def list_documents(
    actor: CurrentActor,
    db: Annotated[Session, Depends(get_db)],
    status_filter: Annotated[Optional[DocumentStatus], Query(alias="status")] = None,
    limit: Annotated[int, Query(ge=1, le=100)] = 50,
    offset: Annotated[int, Query(ge=0)] = 0,
):
    """List documents, newest upload first."""
    documents, total = DocumentService(db).list_documents(
        status=status_filter, limit=limit, offset=offset
    )
    return DocumentListResponse(
        items=[_to_response(d, actor) for d in documents],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/stats", response_model=DocumentStatsResponse)
def document_stats(
    actor: CurrentActor,
    db: Annotated[Session, Depends(get_db)],
):
    """Document counts per status."""
    counts = DocumentService(db).status_counts()
    total = counts.pop("TOTAL")
    return DocumentStatsResponse(total=total, by_status=counts)


@router.get("/{document_id}", response_model=DocumentResponse)
def get_document(
    document_id: UUID,
    actor: CurrentActor,
    db: Annotated[Session, Depends(get_db)],
):
    """Get a document including the review actions open to the caller."""
    document = DocumentService(db).get_document(document_id)
    return _to_response(document, actor)


def _iter_file(stream, chunk_size: int = 64 * 1024):
    try:
        while chunk := stream.read(chunk_size):
            yield chunk
    finally:
        stream.close()


@router.get("/{document_id}/download")
def download_document(
    document_id: UUID,
    actor: CurrentActor,
    db: Annotated[Session, Depends(get_db)],
    storage: Annotated[DocumentStoragePort, Depends(get_storage)],
    inline: bool = False,
):
    """Stream the stored file of a document.

    Reviewers read the file before deciding. With inline=true the browser is
    asked to display it instead of saving it.

    Raises:
        404: Document or its stored file not found
    """
    document, stream = DocumentService(db, storage).open_file(document_id)
    disposition = "inline" if inline else "attachment"
    filename = download_name(document.file_path)

    logger.info(
        f"Document downloaded: {filename}",
        extra={"document_id": document_id, "actor_id": actor.id},
    )
    return StreamingResponse(
        _iter_file(stream),
        media_type=mime_type_for(document.file_type),
        headers={"Content-Disposition": f'{disposition}; filename="{filename}"'},
    )


@router.patch("/{document_id}", response_model=DocumentResponse)
def update_document(
    document_id: UUID,
    update_data: DocumentUpdate,
    actor: Annotated[Actor, Depends(require_role(UserRole.ADMIN))],
    db: Annotated[Session, Depends(get_db)],
):
    """Edit title/description of a DRAFTED or SUBMITTED document."""
    document = DocumentService(db).update_metadata(
        actor=actor,
        document_id=document_id,
        title=update_data.title,
        description=update_data.description,
    )
    return _to_response(document, actor)


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_document(
    document_id: UUID,
    actor: Annotated[Actor, Depends(require_role(UserRole.ADMIN))],
    db: Annotated[Session, Depends(get_db)],
    storage: Annotated[DocumentStoragePort, Depends(get_storage)],
):
    """Delete a document with its approvals and notifications, in any status."""
    DocumentService(db, storage).delete_document(actor, document_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{document_id}/submit", response_model=DocumentResponse)
def submit(
    document_id: UUID,
    actor: CurrentActor,
    db: Annotated[Session, Depends(get_db)],
):
    """Hand a DRAFTED document to the managers (DRAFTED -> SUBMITTED)."""
    document = submit_document(db, document_id, actor_id=actor.id, actor_role=actor.role)
    return _to_response(document, actor)


@router.post(
    "/{document_id}/approval",
    response_model=TransitionResponse,
    summary="Approve or reject a document",
    description="""
    Apply a review to a document. Whether the caller's role may act on the
    document's current status is decided by the approval engine:

    - SUBMITTED: MANAGER approves (-> PENDING) or rejects (-> REJECTED)
    - PENDING: STANDARDIZATION approves (-> APPROVED) or rejects (-> REJECTED)

    **Errors:**
    - 404: Document not found
    - 403: Another role reviews documents in this status
    - 409: Status admits no review, or it changed concurrently
    - 500: Nothing was saved; safe to retry
    """,
)
def review_document(
    document_id: UUID,
    request: TransitionRequest,
    actor: CurrentActor,
    db: Annotated[Session, Depends(get_db)],
):
    result = request_transition(
        db,
        document_id=document_id,
        actor_id=actor.id,
        actor_role=actor.role,
        action=request.action,
        comment=request.comment,
    )
    return TransitionResponse(
        document=_to_response(result.document, actor),
        approval=ApprovalResponse.model_validate(result.approval),
    )


@router.get("/{document_id}/approvals", response_model=list[ApprovalResponse])
def list_approvals(
    document_id: UUID,
    actor: CurrentActor,
    db: Annotated[Session, Depends(get_db)],
):
    """Review history of a document, newest first."""
    approvals = DocumentService(db).list_approvals(document_id)
    return [ApprovalResponse.model_validate(a) for a in approvals]
