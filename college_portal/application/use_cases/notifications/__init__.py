"""Use cases for publishing, listing and tracking notifications."""

from .count_unread_notifications import count_unread_notifications
from .create_notification import create_notification
from .delete_notification import delete_notification
from .get_notification import get_notification
from .get_notification_stats import NotificationStats, get_notification_stats
from .list_notifications import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    NotificationFilters,
    NotificationPage,
    ViewerNotification,
    list_notifications,
)
from .mark_notification_read import mark_notification_read
from .update_notification import update_notification
from .upload_attachments import MAX_ATTACHMENTS, AttachmentUpload, upload_attachments

__all__ = [
    "AttachmentUpload",
    "MAX_ATTACHMENTS",
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "NotificationFilters",
    "NotificationPage",
    "NotificationStats",
    "ViewerNotification",
    "count_unread_notifications",
    "create_notification",
    "delete_notification",
    "get_notification",
    "get_notification_stats",
    "list_notifications",
    "mark_notification_read",
    "update_notification",
    "upload_attachments",
]
