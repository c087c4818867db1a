"""Per-user activity history"""

from .service import log_user_activity, list_user_activities

__all__ = ["log_user_activity", "list_user_activities"]
