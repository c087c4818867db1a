"""Documents domain - approval lifecycle, decision engine, upload validation"""

from .document_status import (
    DocumentStatus,
    ApprovalAction,
    INITIAL_STATUSES,
    TERMINAL_STATUSES,
    EDITABLE_STATUSES,
    is_terminal,
)
from .approval_engine import (
    RejectionReason,
    TransitionDecision,
    APPROVAL_TRANSITIONS,
    decide,
    required_role_for,
    allowed_actions,
)
from .validation import (
    is_supported_mime_type,
    file_type_for,
    mime_type_for,
    validate_file_size,
    validate_filename,
    sanitize_filename,
    unique_storage_name,
    SUPPORTED_MIME_TYPES,
)

__all__ = [
    "DocumentStatus",
    "ApprovalAction",
    "INITIAL_STATUSES",
    "TERMINAL_STATUSES",
    "EDITABLE_STATUSES",
    "is_terminal",
    "RejectionReason",
    "TransitionDecision",
    "APPROVAL_TRANSITIONS",
    "decide",
    "required_role_for",
    "allowed_actions",
    "is_supported_mime_type",
    "file_type_for",
    "mime_type_for",
    "validate_file_size",
    "validate_filename",
    "sanitize_filename",
    "unique_storage_name",
    "SUPPORTED_MIME_TYPES",
]
