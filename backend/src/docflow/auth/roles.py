"""User roles and capability matrix for DocFlow.

Roles:
- ADMIN: Uploads, edits, submits and deletes documents
- MANAGER: First-stage review of SUBMITTED documents
- STANDARDIZATION: Final review of PENDING documents

Capability Matrix:
┌──────────────────────┬───────┬─────────┬─────────────────┐
│ Capability           │ ADMIN │ MANAGER │ STANDARDIZATION │
├──────────────────────┼───────┼─────────┼─────────────────┤
│ Upload Documents     │   ✓   │         │                 │
│ Edit Documents       │   ✓   │         │                 │
│ Submit Documents     │   ✓   │         │                 │
│ Delete Documents     │   ✓   │         │                 │
└──────────────────────┴───────┴─────────┴─────────────────┘

Reviewers hold no capabilities here: which review a role may perform on
which status is decided by domain.documents.approval_engine.
"""

from enum import Enum
from typing import Dict, FrozenSet


class UserRole(str, Enum):
    """User roles in DocFlow.

    Values are stored as TEXT in the database and must match exactly.
    """
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    STANDARDIZATION = "STANDARDIZATION"


class Capability(str, Enum):
    """Coarse-grained actions gated by role."""
    UPLOAD_DOCUMENTS = "UPLOAD_DOCUMENTS"
    EDIT_DOCUMENTS = "EDIT_DOCUMENTS"
    SUBMIT_DOCUMENTS = "SUBMIT_DOCUMENTS"
    DELETE_DOCUMENTS = "DELETE_DOCUMENTS"


ROLE_CAPABILITIES: Dict[UserRole, FrozenSet[Capability]] = {
    UserRole.ADMIN: frozenset({
        Capability.UPLOAD_DOCUMENTS,
        Capability.EDIT_DOCUMENTS,
        Capability.SUBMIT_DOCUMENTS,
        Capability.DELETE_DOCUMENTS,
    }),
    UserRole.MANAGER: frozenset(),
    UserRole.STANDARDIZATION: frozenset(),
}


def has_capability(user_role: UserRole, capability: Capability) -> bool:
    """Check if a role grants a capability.

    Args:
        user_role: The role of the current actor
        capability: The capability required for the action

    Returns:
        True if the role grants the capability, False otherwise

    Examples:
        >>> has_capability(UserRole.ADMIN, Capability.UPLOAD_DOCUMENTS)
        True
        >>> has_capability(UserRole.MANAGER, Capability.DELETE_DOCUMENTS)
        False
    """
    return capability in ROLE_CAPABILITIES.get(user_role, frozenset())
