"""Transition executor for document reviews and submission.

Applies an approval-engine decision as one unit of work. A review writes four
things that together mean "this transition happened":

    1. document.status (guarded: only if still equal to the status read)
    2. an Approval row
    3. a Notification for the document creator
    4. a UserActivity row for the reviewer

All four commit together or not at all. The guarded update makes the
read-decide-write sequence behave as if serialized per document: when two
reviewers race from the same status, the second update matches no row and
the request fails with InvalidState instead of overwriting.

The executor never reads ambient session state; the actor's id and role are
explicit parameters.
"""

import logging
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..activities.service import log_user_activity
from ..auth.roles import UserRole, Capability, has_capability
from ..domain.documents.approval_engine import decide, TransitionDecision
from ..domain.documents.document_status import ApprovalAction, DocumentStatus
from ..models.approval import Approval
from ..models.base import utcnow
from ..models.document import Document
from ..models.user_activity import ActivityType
from ..notifications.service import create_notification, notification_type_for, review_message
from ..observability.context import bind_log_context
from ..observability.metrics import document_transitions_total
from .errors import (
    DocumentNotFoundError,
    InvalidDocumentStateError,
    TransitionConflictError,
    TransitionForbiddenError,
    TransitionPersistenceError,
    error_for_decision,
)

logger = logging.getLogger(__name__)


@dataclass
class TransitionResult:
    """Outcome of a committed review transition."""
    document: Document
    approval: Approval


def load_document(db: Session, document_id: UUID) -> Optional[Document]:
    """Read a document straight from the database.

    populate_existing overwrites any stale copy held in the session identity
    map, so decisions are always made against the committed status.
    """
    stmt = (
        select(Document)
        .where(Document.id == document_id)
        .execution_options(populate_existing=True)
    )
    return db.execute(stmt).scalar_one_or_none()


def guarded_status_update(
    db: Session,
    document_id: UUID,
    expected_status: DocumentStatus,
    new_status: DocumentStatus,
) -> None:
    """Conditionally move a document from expected_status to new_status.

    Raises:
        TransitionConflictError: The row no longer has expected_status
    """
    result = db.execute(
        update(Document)
        .where(
            Document.id == document_id,
            Document.status == expected_status.value,
        )
        .values(status=new_status.value, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        raise TransitionConflictError(document_id, expected_status)


def _record_review(
    db: Session,
    document: Document,
    decision: TransitionDecision,
    actor_id: UUID,
    comment: Optional[str],
) -> Approval:
    """Stage the full review write group in the current transaction."""
    new_status = decision.new_status

    guarded_status_update(db, document.id, decision.current_status, new_status)

    approval = Approval(
        document_id=document.id,
        approver_id=actor_id,
        status=new_status.value,
        comment=comment,
    )
    db.add(approval)
    db.flush()

    create_notification(
        db=db,
        user_id=document.creator_id,
        message=review_message(document.title, new_status),
        type=notification_type_for(new_status),
        related_id=document.id,
    )

    if decision.action is ApprovalAction.APPROVE:
        activity_type, verb = ActivityType.APPROVE, "approved"
    else:
        activity_type, verb = ActivityType.REJECT, "rejected"

    log_user_activity(
        db=db,
        user_id=actor_id,
        type=activity_type,
        description=f"{verb} document: {document.title}",
        document_id=document.id,
        metadata={
            "approval_id": str(approval.id),
            "from_status": decision.current_status.value,
            "to_status": new_status.value,
        },
    )

    return approval


def request_transition(
    db: Session,
    document_id: UUID,
    actor_id: UUID,
    actor_role: UserRole,
    action: ApprovalAction,
    comment: Optional[str] = None,
) -> TransitionResult:
    """Approve or reject a document on behalf of an actor.

    Args:
        db: Database session (no transaction of the caller may be pending)
        document_id: Document to act on
        actor_id: Reviewer's user ID
        actor_role: Reviewer's role as verified by the identity provider
        action: APPROVE or REJECT
        comment: Optional reviewer comment stored on the Approval

    Returns:
        TransitionResult: Refreshed document and the created Approval

    Raises:
        DocumentNotFoundError: Document does not exist (no writes)
        TransitionForbiddenError: Role cannot act on this status (no writes)
        InvalidDocumentStateError: Status admits no review, or the status
            changed under us (no writes)
        TransitionPersistenceError: Storage failure; everything rolled back

    Example:
        result = request_transition(
            db=db,
            document_id=UUID("..."),
            actor_id=actor.id,
            actor_role=actor.role,
            action=ApprovalAction.APPROVE,
            comment="Looks good",
        )
    """
    bind_log_context(document_id=document_id)
    log_extra = {"document_id": document_id, "actor_id": actor_id, "action": action.value}

    try:
        document = load_document(db, document_id)
    except SQLAlchemyError as e:
        db.rollback()
        document_transitions_total.labels(action=action.value, result="error").inc()
        logger.error("Failed to load document for transition", extra=log_extra, exc_info=True)
        raise TransitionPersistenceError("Failed to load document; please retry") from e

    if document is None:
        db.rollback()
        document_transitions_total.labels(action=action.value, result="not_found").inc()
        raise DocumentNotFoundError(document_id)

    decision = decide(actor_role, DocumentStatus(document.status), action)
    if not decision.allowed:
        db.rollback()
        error = error_for_decision(decision)
        document_transitions_total.labels(action=action.value, result=error.error_code).inc()
        logger.info(
            f"Transition refused: {decision.message}",
            extra={**log_extra, "from_status": decision.current_status.value},
        )
        raise error

    try:
        approval = _record_review(db, document, decision, actor_id, comment)
        db.commit()
    except TransitionConflictError:
        db.rollback()
        document_transitions_total.labels(action=action.value, result="conflict").inc()
        logger.warning(
            "Transition lost race; document status changed concurrently",
            extra={**log_extra, "from_status": decision.current_status.value},
        )
        raise
    except SQLAlchemyError as e:
        db.rollback()
        document_transitions_total.labels(action=action.value, result="error").inc()
        logger.error("Transition write group failed; rolled back", extra=log_extra, exc_info=True)
        raise TransitionPersistenceError(
            "Failed to record document transition; no changes were saved"
        ) from e
    except Exception:
        db.rollback()
        raise

    db.refresh(document)
    document_transitions_total.labels(action=action.value, result="success").inc()
    logger.info(
        f"Document {decision.current_status.value} -> {decision.new_status.value}",
        extra={
            **log_extra,
            "from_status": decision.current_status.value,
            "to_status": decision.new_status.value,
        },
    )
    return TransitionResult(document=document, approval=approval)


def submit_document(
    db: Session,
    document_id: UUID,
    actor_id: UUID,
    actor_role: UserRole,
) -> Document:
    """Hand a DRAFTED document to reviewers (DRAFTED → SUBMITTED).

    Status update and SUBMIT activity commit together, guarded the same way
    as review transitions.

    Raises:
        TransitionForbiddenError: Actor may not submit documents
        DocumentNotFoundError: Document does not exist
        InvalidDocumentStateError: Document is not DRAFTED
        TransitionPersistenceError: Storage failure; everything rolled back
    """
    action = "SUBMIT"
    bind_log_context(document_id=document_id)
    log_extra = {"document_id": document_id, "actor_id": actor_id, "action": action}

    if not has_capability(actor_role, Capability.SUBMIT_DOCUMENTS):
        document_transitions_total.labels(action=action, result="forbidden").inc()
        raise TransitionForbiddenError(
            f"{UserRole.ADMIN.value} role required to submit documents",
            required_role=UserRole.ADMIN,
        )

    try:
        document = load_document(db, document_id)
    except SQLAlchemyError as e:
        db.rollback()
        document_transitions_total.labels(action=action, result="error").inc()
        logger.error("Failed to load document for submission", extra=log_extra, exc_info=True)
        raise TransitionPersistenceError("Failed to load document; please retry") from e

    if document is None:
        db.rollback()
        document_transitions_total.labels(action=action, result="not_found").inc()
        raise DocumentNotFoundError(document_id)

    current_status = DocumentStatus(document.status)
    if current_status is not DocumentStatus.DRAFTED:
        db.rollback()
        document_transitions_total.labels(action=action, result="invalid_state").inc()
        raise InvalidDocumentStateError(
            f"Only DRAFTED documents can be submitted (current: {current_status.value})",
            current_status=current_status,
        )

    try:
        guarded_status_update(db, document.id, DocumentStatus.DRAFTED, DocumentStatus.SUBMITTED)
        log_user_activity(
            db=db,
            user_id=actor_id,
            type=ActivityType.SUBMIT,
            description=f"submitted document: {document.title}",
            document_id=document.id,
            metadata={"from_status": DocumentStatus.DRAFTED.value, "to_status": DocumentStatus.SUBMITTED.value},
        )
        db.commit()
    except TransitionConflictError:
        db.rollback()
        document_transitions_total.labels(action=action, result="conflict").inc()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        document_transitions_total.labels(action=action, result="error").inc()
        logger.error("Submission failed; rolled back", extra=log_extra, exc_info=True)
        raise TransitionPersistenceError("Failed to submit document; no changes were saved") from e

    db.refresh(document)
    document_transitions_total.labels(action=action, result="success").inc()
    logger.info("Document DRAFTED -> SUBMITTED", extra=log_extra)
    return document
