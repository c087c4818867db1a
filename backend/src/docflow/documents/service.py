"""Document service - upload, metadata edits, deletion and read queries.

Status changes are not made here; they go through documents.transition.
"""

import logging
from pathlib import PurePosixPath
from typing import BinaryIO, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import delete, desc, func, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..activities.service import log_user_activity
from ..auth.actor import Actor
from ..auth.roles import Capability, UserRole, has_capability
from ..domain.documents.document_status import DocumentStatus, INITIAL_STATUSES, EDITABLE_STATUSES
from ..domain.documents.validation import (
    file_type_for,
    is_supported_mime_type,
    unique_storage_name,
    validate_file_size,
    validate_filename,
)
from ..models.approval import Approval
from ..models.base import utcnow
from ..models.document import Document
from ..models.notification import Notification
from ..models.user_activity import ActivityType
from ..observability.context import bind_log_context
from ..observability.metrics import documents_uploaded_total, documents_deleted_total
from ..storage.ports import DocumentStoragePort, StorageError
from .errors import (
    DocumentNotFoundError,
    DocumentWorkflowError,
    InvalidDocumentStateError,
    TransitionForbiddenError,
    TransitionPersistenceError,
)

logger = logging.getLogger(__name__)


class UploadValidationError(DocumentWorkflowError):
    """Uploaded file or form fields were rejected."""
    status_code = 400
    error_code = "validation_error"


class StoredFileMissingError(DocumentWorkflowError):
    """Document exists but its stored file is gone."""
    status_code = 404
    error_code = "not_found"


def download_name(storage_key: str) -> str:
    """Client-facing file name: the stored name without its timestamp prefix."""
    name = PurePosixPath(storage_key).name
    prefix, sep, rest = name.partition("-")
    if sep and prefix.isdigit() and rest:
        return rest
    return name


def _require(actor: Actor, capability: Capability, verb: str) -> None:
    if not has_capability(actor.role, capability):
        raise TransitionForbiddenError(
            f"{UserRole.ADMIN.value} role required to {verb} documents",
            required_role=UserRole.ADMIN,
        )


class DocumentService:
    """Service for document operations outside the review transitions."""

    def __init__(self, db: Session, storage: Optional[DocumentStoragePort] = None):
        self.db = db
        self.storage = storage

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_document(self, document_id: UUID) -> Document:
        """Get a document by ID.

        Raises:
            DocumentNotFoundError: If no such document exists
        """
        bind_log_context(document_id=document_id)
        document = self.db.query(Document).filter(Document.id == document_id).first()
        if document is None:
            raise DocumentNotFoundError(document_id)
        return document

    def list_documents(
        self,
        status: Optional[DocumentStatus] = None,
        creator_id: Optional[UUID] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[Document], int]:
        """List documents, newest upload first.

        Returns:
            Tuple of (documents, total count before pagination)
        """
        query = self.db.query(Document)

        if status:
            query = query.filter(Document.status == status.value)

        if creator_id:
            query = query.filter(Document.creator_id == creator_id)

        total = query.count()
        documents = query.order_by(desc(Document.uploaded_at)).limit(limit).offset(offset).all()
        return documents, total

    def list_approvals(self, document_id: UUID) -> List[Approval]:
        """Review history of a document, newest first."""
        self.get_document(document_id)
        return (
            self.db.query(Approval)
            .filter(Approval.document_id == document_id)
            .order_by(desc(Approval.created_at))
            .all()
        )

    def status_counts(self) -> Dict[str, int]:
        """Number of documents per status plus the overall total."""
        rows = (
            self.db.query(Document.status, func.count(Document.id))
            .group_by(Document.status)
            .all()
        )
        counts = {status.value: 0 for status in DocumentStatus}
        for status, count in rows:
            counts[status] = count
        counts["TOTAL"] = sum(count for _status, count in rows)
        return counts

    def open_file(self, document_id: UUID) -> Tuple[Document, BinaryIO]:
        """Open the stored file behind a document.

        Returns:
            Tuple of (document, readable stream); the caller closes the stream

        Raises:
            DocumentNotFoundError: No such document
            StoredFileMissingError: The document row exists but its file does not
            DocumentWorkflowError: Storage backend failure
        """
        document = self.get_document(document_id)
        missing = StoredFileMissingError(f"File for document {document_id} not found in storage")
        try:
            if not self.storage.exists(document.file_path):
                raise missing
            stream = self.storage.retrieve_file(document.file_path)
        except FileNotFoundError as e:
            # removed between the existence check and the open
            raise missing from e
        except StorageError as e:
            logger.error("Storage error during download", extra={"document_id": document_id}, exc_info=True)
            raise DocumentWorkflowError("Failed to read stored file") from e
        return document, stream

    # ------------------------------------------------------------------
    # Upload
    # ------------------------------------------------------------------

    def upload_document(
        self,
        actor: Actor,
        file: BinaryIO,
        file_name: str,
        content_type: str,
        size_bytes: int,
        title: str,
        description: Optional[str] = None,
        initial_status: DocumentStatus = DocumentStatus.SUBMITTED,
        max_size: int = 5 * 1024 * 1024,
    ) -> Document:
        """Store an uploaded file and register it as a new document.

        Args:
            actor: Uploader (must be ADMIN)
            file: File contents
            file_name: Original client file name
            content_type: Declared MIME type
            size_bytes: Declared size
            title: Document title
            description: Optional description
            initial_status: DRAFTED or SUBMITTED
            max_size: Size limit in bytes

        Returns:
            Document: The committed document

        Raises:
            TransitionForbiddenError: Actor may not upload
            UploadValidationError: File or fields rejected
            TransitionPersistenceError: Database failure (stored file removed)
        """
        _require(actor, Capability.UPLOAD_DOCUMENTS, "upload")

        if not title or not title.strip():
            raise UploadValidationError("Title is required")

        if initial_status not in INITIAL_STATUSES:
            raise UploadValidationError(
                f"Documents can only be created as DRAFTED or SUBMITTED (got {initial_status.value})"
            )

        is_valid, error = validate_filename(file_name)
        if not is_valid:
            raise UploadValidationError(error)

        if not is_supported_mime_type(content_type):
            raise UploadValidationError(
                f"Unsupported file type: {content_type}. Only PDF, DOC and DOCX are allowed"
            )

        is_valid, error = validate_file_size(size_bytes, max_size)
        if not is_valid:
            raise UploadValidationError(error)

        try:
            stored = self.storage.store_file(file, unique_storage_name(file_name), content_type)
        except StorageError as e:
            logger.error(f"Failed to store upload {file_name}", exc_info=True)
            raise TransitionPersistenceError("Failed to store uploaded file") from e

        document = Document(
            title=title.strip(),
            description=description or "",
            file_path=stored.storage_key,
            file_type=file_type_for(content_type),
            file_size=stored.size_bytes,
            status=initial_status.value,
            version=1,
            creator_id=actor.id,
        )

        try:
            self.db.add(document)
            self.db.flush()
            log_user_activity(
                db=self.db,
                user_id=actor.id,
                type=ActivityType.UPLOAD,
                description=f"uploaded document: {document.title}",
                document_id=document.id,
                metadata={"status": initial_status.value, "file_type": document.file_type},
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Failed to register uploaded document", exc_info=True)
            self._discard_file(stored.storage_key)
            raise TransitionPersistenceError("Failed to save document; please retry") from e

        self.db.refresh(document)
        documents_uploaded_total.labels(status=initial_status.value).inc()
        logger.info(
            f"Document uploaded: {document.title}",
            extra={"document_id": document.id, "actor_id": actor.id, "to_status": document.status},
        )
        return document

    # ------------------------------------------------------------------
    # Metadata edit
    # ------------------------------------------------------------------

    def update_metadata(
        self,
        actor: Actor,
        document_id: UUID,
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Document:
        """Edit title/description while the document has not entered review.

        The status column is never written here. The UPDATE is conditioned on
        the status still being editable, so a review committed after our read
        makes the edit fail instead of landing on a document under review.

        Raises:
            TransitionForbiddenError: Actor may not edit
            DocumentNotFoundError: No such document
            InvalidDocumentStateError: Document is PENDING or terminal, or
                entered review while the edit was in flight
        """
        _require(actor, Capability.EDIT_DOCUMENTS, "edit")

        document = self.get_document(document_id)
        current_status = DocumentStatus(document.status)
        if current_status not in EDITABLE_STATUSES:
            raise InvalidDocumentStateError(
                f"Only DRAFTED or SUBMITTED documents can be edited (current: {current_status.value})",
                current_status=current_status,
            )

        changes = {}
        if title is not None:
            if not title.strip():
                raise UploadValidationError("Title cannot be empty")
            changes["title"] = title.strip()
        if description is not None:
            changes["description"] = description

        if not changes:
            return document

        try:
            result = self.db.execute(
                update(Document)
                .where(
                    Document.id == document_id,
                    Document.status.in_([s.value for s in EDITABLE_STATUSES]),
                )
                .values(**changes, updated_at=utcnow())
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                self.db.rollback()
                logger.info(
                    "Metadata edit refused; document entered review concurrently",
                    extra={"document_id": document_id, "actor_id": actor.id},
                )
                raise InvalidDocumentStateError(
                    f"Document {document_id} is no longer editable; it was changed by another request"
                )
            log_user_activity(
                db=self.db,
                user_id=actor.id,
                type=ActivityType.UPDATE,
                description=f"updated document: {changes.get('title', document.title)}",
                document_id=document.id,
                metadata={"fields": sorted(changes)},
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Failed to update document metadata", exc_info=True)
            raise TransitionPersistenceError("Failed to update document; no changes were saved") from e

        self.db.refresh(document)
        return document

    # ------------------------------------------------------------------
    # Administrative delete
    # ------------------------------------------------------------------

    def delete_document(self, actor: Actor, document_id: UUID) -> None:
        """Delete a document with its approvals and notifications.

        Unconditional on status. Database rows go in one transaction; the
        stored file is removed after commit and a failure there is logged
        without undoing the delete.

        Raises:
            TransitionForbiddenError: Actor may not delete
            DocumentNotFoundError: No such document
            TransitionPersistenceError: Database failure; nothing deleted
        """
        _require(actor, Capability.DELETE_DOCUMENTS, "delete")

        document = self.get_document(document_id)
        storage_key = document.file_path
        title = document.title
        status = document.status

        try:
            self.db.execute(delete(Approval).where(Approval.document_id == document_id))
            self.db.execute(delete(Notification).where(Notification.related_id == document_id))
            self.db.execute(delete(Document).where(Document.id == document_id))
            log_user_activity(
                db=self.db,
                user_id=actor.id,
                type=ActivityType.DELETE,
                description=f"deleted document: {title}",
                document_id=document_id,
                metadata={"status": status},
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Failed to delete document", extra={"document_id": document_id}, exc_info=True)
            raise TransitionPersistenceError("Failed to delete document; nothing was removed") from e

        documents_deleted_total.inc()
        logger.info(f"Document deleted: {title}", extra={"document_id": document_id, "actor_id": actor.id})

        if self.storage is not None:
            self._discard_file(storage_key)

    def _discard_file(self, storage_key: str) -> None:
        try:
            self.storage.delete_file(storage_key)
        except StorageError:
            logger.warning(f"Could not remove stored file {storage_key}", exc_info=True)
