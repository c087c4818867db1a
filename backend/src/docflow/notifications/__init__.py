"""Notifications for document creators"""

from .service import create_notification, list_notifications, mark_all_read

__all__ = ["create_notification", "list_notifications", "mark_all_read"]
