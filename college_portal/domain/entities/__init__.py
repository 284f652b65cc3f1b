"""Domain entities exposed by the application."""

from .notification import (
    AUDIENCE_ADMIN,
    AUDIENCE_ALL,
    AUDIENCE_BY_ROLE,
    AUDIENCE_STUDENTS,
    AUDIENCE_TEACHERS,
    MAX_SEMESTER,
    MIN_SEMESTER,
    NOTIFICATION_PRIORITIES,
    NOTIFICATION_TYPES,
    PRIORITY_RANK,
    ROLE_BY_AUDIENCE,
    TARGET_AUDIENCES,
    Attachment,
    Notification,
    ReadReceipt,
)
from .user import ROLE_ADMIN, ROLE_STUDENT, ROLE_TEACHER, USER_ROLES, User, Viewer

__all__ = [
    "AUDIENCE_ADMIN",
    "AUDIENCE_ALL",
    "AUDIENCE_BY_ROLE",
    "AUDIENCE_STUDENTS",
    "AUDIENCE_TEACHERS",
    "Attachment",
    "MAX_SEMESTER",
    "MIN_SEMESTER",
    "NOTIFICATION_PRIORITIES",
    "NOTIFICATION_TYPES",
    "Notification",
    "PRIORITY_RANK",
    "ROLE_ADMIN",
    "ROLE_BY_AUDIENCE",
    "ROLE_STUDENT",
    "ROLE_TEACHER",
    "ReadReceipt",
    "TARGET_AUDIENCES",
    "USER_ROLES",
    "User",
    "Viewer",
]
