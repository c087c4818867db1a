"""DocumentStatus enum for the document approval lifecycle

State flow:
    DRAFTED → SUBMITTED → PENDING → APPROVED
                  ↓           ↓
               REJECTED    REJECTED

Upload creates DRAFTED or SUBMITTED. APPROVED and REJECTED are terminal.
"""

from enum import Enum
from typing import FrozenSet


class DocumentStatus(str, Enum):
    """Document approval status.

    Values are stored as TEXT in the database and must match exactly.
    """
    DRAFTED = "DRAFTED"        # Uploaded, not yet handed to reviewers
    SUBMITTED = "SUBMITTED"    # Awaiting manager review
    PENDING = "PENDING"        # Manager approved, awaiting standardization
    APPROVED = "APPROVED"      # Terminal success
    REJECTED = "REJECTED"      # Terminal rejection


class ApprovalAction(str, Enum):
    """Outcome a reviewer requests for a document."""
    APPROVE = "APPROVE"
    REJECT = "REJECT"


# Statuses a document may be created with at upload time
INITIAL_STATUSES: FrozenSet[DocumentStatus] = frozenset({
    DocumentStatus.DRAFTED,
    DocumentStatus.SUBMITTED,
})

# No further approval transition is legal from these
TERMINAL_STATUSES: FrozenSet[DocumentStatus] = frozenset({
    DocumentStatus.APPROVED,
    DocumentStatus.REJECTED,
})

# Metadata may still be edited while the document has not entered review
EDITABLE_STATUSES: FrozenSet[DocumentStatus] = frozenset({
    DocumentStatus.DRAFTED,
    DocumentStatus.SUBMITTED,
})


def is_terminal(status: DocumentStatus) -> bool:
    """Check whether a status ends the approval lifecycle

    Example:
        >>> is_terminal(DocumentStatus.REJECTED)
        True
        >>> is_terminal(DocumentStatus.PENDING)
        False
    """
    return status in TERMINAL_STATUSES
