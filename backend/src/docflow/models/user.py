"""User SQLAlchemy model"""

import re
import uuid

from sqlalchemy import Column, Text, DateTime, Uuid, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import validates

from .base import Base, utcnow


class User(Base):
    """User referenced by documents, approvals, notifications and activities.

    Identity and sessions are issued elsewhere; this table only keeps the
    people the workflow points at. Role values mirror auth.roles.UserRole.
    """
    __tablename__ = "user"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(Text, nullable=False)
    name = Column(Text, nullable=True)
    role = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        CheckConstraint(
            "role IN ('ADMIN', 'MANAGER', 'STANDARDIZATION')",
            name='ck_user_role'
        ),
        UniqueConstraint('email', name='uq_user_email'),
    )

    @validates('email')
    def validate_email(self, key, value):
        """Basic email format validation"""
        if not re.match(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$', value):
            raise ValueError("Invalid email format")
        return value.lower()
