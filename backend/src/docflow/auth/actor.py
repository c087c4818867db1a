"""Authenticated actor passed explicitly into workflow operations."""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from .roles import UserRole


@dataclass(frozen=True)
class Actor:
    """Identity of the user performing a request.

    Attributes:
        id: User ID (token subject)
        role: Role claimed by the verified token
        email: Email claim, informational only
    """
    id: UUID
    role: UserRole
    email: Optional[str] = None
