"""Approval engine - role-gated decision function for document reviews.

Single source of truth for which role may move a document from which status
and where it lands. Pure: no I/O, no mutable state, safe to call from any
number of concurrent requests.

Transition table:
    SUBMITTED + MANAGER         + APPROVE → PENDING
    SUBMITTED + MANAGER         + REJECT  → REJECTED
    PENDING   + STANDARDIZATION + APPROVE → APPROVED
    PENDING   + STANDARDIZATION + REJECT  → REJECTED
    anything else                         → illegal

Illegal requests are classified as:
    WRONG_ROLE   - the status is under review, but by another role
    WRONG_STATUS - the status accepts no review at all (DRAFTED, APPROVED,
                   REJECTED), whatever the role
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from ...auth.roles import UserRole
from .document_status import ApprovalAction, DocumentStatus


class RejectionReason(str, Enum):
    """Why the engine refused a requested transition."""
    WRONG_ROLE = "WRONG_ROLE"
    WRONG_STATUS = "WRONG_STATUS"


# (current status, role, action) -> resulting status
APPROVAL_TRANSITIONS: Dict[Tuple[DocumentStatus, UserRole, ApprovalAction], DocumentStatus] = {
    (DocumentStatus.SUBMITTED, UserRole.MANAGER, ApprovalAction.APPROVE): DocumentStatus.PENDING,
    (DocumentStatus.SUBMITTED, UserRole.MANAGER, ApprovalAction.REJECT): DocumentStatus.REJECTED,
    (DocumentStatus.PENDING, UserRole.STANDARDIZATION, ApprovalAction.APPROVE): DocumentStatus.APPROVED,
    (DocumentStatus.PENDING, UserRole.STANDARDIZATION, ApprovalAction.REJECT): DocumentStatus.REJECTED,
}

# Derived from APPROVAL_TRANSITIONS: the one role reviewing each actionable status
REVIEWER_BY_STATUS: Dict[DocumentStatus, UserRole] = {
    status: role for (status, role, _action) in APPROVAL_TRANSITIONS
}


@dataclass(frozen=True)
class TransitionDecision:
    """Verdict of the approval engine for one request.

    Exactly one of new_status / reason is set.

    Attributes:
        current_status: Status the decision was made against
        role: Role of the requesting actor
        action: Requested outcome
        new_status: Resulting status when the transition is legal
        reason: Rejection reason when it is not
        required_role: Role that could act on current_status, if any
    """
    current_status: DocumentStatus
    role: UserRole
    action: ApprovalAction
    new_status: Optional[DocumentStatus] = None
    reason: Optional[RejectionReason] = None
    required_role: Optional[UserRole] = None

    @property
    def allowed(self) -> bool:
        return self.new_status is not None

    @property
    def message(self) -> str:
        """Human readable explanation suitable for API error responses."""
        if self.allowed:
            return (
                f"{self.role.value} may {self.action.value.lower()} "
                f"{self.current_status.value} documents "
                f"({self.current_status.value} -> {self.new_status.value})"
            )
        if self.reason is RejectionReason.WRONG_ROLE:
            return (
                f"{self.required_role.value} role required to act on "
                f"{self.current_status.value} documents"
            )
        return f"{self.current_status.value} documents cannot be approved or rejected"


def required_role_for(status: DocumentStatus) -> Optional[UserRole]:
    """Get the role that reviews documents in a given status.

    Returns:
        The reviewing role, or None when the status accepts no review

    Example:
        >>> required_role_for(DocumentStatus.SUBMITTED)
        <UserRole.MANAGER: 'MANAGER'>
        >>> required_role_for(DocumentStatus.DRAFTED) is None
        True
    """
    return REVIEWER_BY_STATUS.get(status)


def decide(
    role: UserRole,
    current_status: DocumentStatus,
    action: ApprovalAction
) -> TransitionDecision:
    """Decide whether a role may apply an action to a document status.

    Never raises for illegal input; the verdict is returned as a value.

    Args:
        role: Role of the requesting actor
        current_status: Document status as read from the store
        action: APPROVE or REJECT

    Returns:
        TransitionDecision: new_status set if legal, reason set otherwise

    Example:
        >>> decide(UserRole.MANAGER, DocumentStatus.SUBMITTED, ApprovalAction.APPROVE).new_status
        <DocumentStatus.PENDING: 'PENDING'>
        >>> decide(UserRole.STANDARDIZATION, DocumentStatus.SUBMITTED, ApprovalAction.APPROVE).reason
        <RejectionReason.WRONG_ROLE: 'WRONG_ROLE'>
    """
    new_status = APPROVAL_TRANSITIONS.get((current_status, role, action))
    if new_status is not None:
        return TransitionDecision(
            current_status=current_status,
            role=role,
            action=action,
            new_status=new_status,
            required_role=role,
        )

    required_role = required_role_for(current_status)
    if required_role is None:
        # DRAFTED and terminal statuses: no role may act, no partial legality
        reason = RejectionReason.WRONG_STATUS
    else:
        reason = RejectionReason.WRONG_ROLE

    return TransitionDecision(
        current_status=current_status,
        role=role,
        action=action,
        reason=reason,
        required_role=required_role,
    )


def allowed_actions(role: UserRole, current_status: DocumentStatus) -> List[ApprovalAction]:
    """List the review actions a role may take on a document right now.

    Used by read endpoints so clients do not re-derive role logic.

    Example:
        >>> allowed_actions(UserRole.STANDARDIZATION, DocumentStatus.PENDING)
        [<ApprovalAction.APPROVE: 'APPROVE'>, <ApprovalAction.REJECT: 'REJECT'>]
        >>> allowed_actions(UserRole.ADMIN, DocumentStatus.PENDING)
        []
    """
    return [action for action in ApprovalAction if decide(role, current_status, action).allowed]
