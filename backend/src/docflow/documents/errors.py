"""Document workflow errors.

Each error carries the HTTP status and error code the API layer renders.
The approval engine itself never raises; these are raised by the workflow
operations that act on its decisions.
"""

from typing import Optional
from uuid import UUID

from ..auth.roles import UserRole
from ..domain.documents.approval_engine import RejectionReason, TransitionDecision
from ..domain.documents.document_status import DocumentStatus


class DocumentWorkflowError(Exception):
    """Base class for document workflow failures."""
    status_code = 500
    error_code = "internal_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class DocumentNotFoundError(DocumentWorkflowError):
    """Referenced document does not exist. Not retried."""
    status_code = 404
    error_code = "not_found"

    def __init__(self, document_id: UUID):
        super().__init__(f"Document {document_id} not found")
        self.document_id = document_id


class TransitionForbiddenError(DocumentWorkflowError):
    """Actor's role has no authority over the document's current status."""
    status_code = 403
    error_code = "forbidden"

    def __init__(self, message: str, required_role: Optional[UserRole] = None):
        super().__init__(message)
        self.required_role = required_role


class InvalidDocumentStateError(DocumentWorkflowError):
    """Document status does not admit the requested action.

    Covers terminal statuses, DRAFTED documents and lost races. Callers may
    re-read the document and decide whether to retry.
    """
    status_code = 409
    error_code = "invalid_state"

    def __init__(self, message: str, current_status: Optional[DocumentStatus] = None):
        super().__init__(message)
        self.current_status = current_status


class TransitionConflictError(InvalidDocumentStateError):
    """Status changed between read and guarded write (race lost)."""

    def __init__(self, document_id: UUID, expected_status: DocumentStatus):
        super().__init__(
            f"Document {document_id} is no longer {expected_status.value}; "
            f"it was changed by another request",
            current_status=None,
        )
        self.document_id = document_id
        self.expected_status = expected_status


class TransitionPersistenceError(DocumentWorkflowError):
    """Storage failure inside an atomic write group.

    Everything was rolled back, so retrying the whole request is safe.
    """
    status_code = 500
    error_code = "internal_error"


def error_for_decision(decision: TransitionDecision) -> DocumentWorkflowError:
    """Translate an engine rejection into the matching workflow error."""
    if decision.reason is RejectionReason.WRONG_ROLE:
        return TransitionForbiddenError(decision.message, required_role=decision.required_role)
    return InvalidDocumentStateError(decision.message, current_status=decision.current_status)
