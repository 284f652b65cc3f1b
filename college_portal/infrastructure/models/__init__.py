"""ORM models used by the application infrastructure."""

from .notification import (
    NotificationAttachmentModel,
    NotificationModel,
    NotificationReadModel,
)
from .user import UserModel

__all__ = [
    "NotificationAttachmentModel",
    "NotificationModel",
    "NotificationReadModel",
    "UserModel",
]
