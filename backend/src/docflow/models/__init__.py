"""SQLAlchemy Models for DocFlow"""

from .base import Base
from .user import User
from .document import Document
from .approval import Approval
from .notification import Notification, NotificationType
from .user_activity import UserActivity, ActivityType

__all__ = [
    "Base",
    "User",
    "Document",
    "Approval",
    "Notification",
    "NotificationType",
    "UserActivity",
    "ActivityType",
]
