"""Document workflow: review transitions, submission, upload and deletion"""

from .errors import (
    DocumentWorkflowError,
    DocumentNotFoundError,
    TransitionForbiddenError,
    InvalidDocumentStateError,
    TransitionConflictError,
    TransitionPersistenceError,
)
from .transition import request_transition, submit_document, TransitionResult

__all__ = [
    "DocumentWorkflowError",
    "DocumentNotFoundError",
    "TransitionForbiddenError",
    "InvalidDocumentStateError",
    "TransitionConflictError",
    "TransitionPersistenceError",
    "request_transition",
    "submit_document",
    "TransitionResult",
]
