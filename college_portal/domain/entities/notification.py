"""Domain entity representing a targeted portal notification."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

NOTIFICATION_TYPES = ("general", "academic", "event", "urgent", "maintenance")
NOTIFICATION_PRIORITIES = ("low", "medium", "high", "critical")
PRIORITY_RANK = {priority: rank for rank, priority in enumerate(NOTIFICATION_PRIORITIES)}

AUDIENCE_ALL = "all"
AUDIENCE_STUDENTS = "students"
AUDIENCE_TEACHERS = "teachers"
AUDIENCE_ADMIN = "admin"
TARGET_AUDIENCES = (AUDIENCE_ALL, AUDIENCE_STUDENTS, AUDIENCE_TEACHERS, AUDIENCE_ADMIN)

# Users carry a singular role while notifications target plural audiences.
AUDIENCE_BY_ROLE = {
    "student": AUDIENCE_STUDENTS,
    "teacher": AUDIENCE_TEACHERS,
    "admin": AUDIENCE_ADMIN,
}
ROLE_BY_AUDIENCE = {audience: role for role, audience in AUDIENCE_BY_ROLE.items()}

MIN_SEMESTER = 1
MAX_SEMESTER = 8


@dataclass(frozen=True)
class Attachment:
    """File metadata produced by the storage collaborator."""

    file_name: str
    file_url: str
    file_type: str | None = None
    file_size: int | None = None


@dataclass(frozen=True)
class ReadReceipt:
    """Marks the moment a user first read a notification."""

    user_id: int
    read_at: datetime


@dataclass
class Notification:
    """Announcement published by a teacher or admin to a targeted audience."""

    id: int | None
    title: str
    message: str
    created_by: int
    notification_type: str = "general"
    priority: str = "medium"
    target_audience: list[str] = field(default_factory=lambda: [AUDIENCE_ALL])
    target_departments: list[str] = field(default_factory=list)
    target_semesters: list[int] = field(default_factory=list)
    expires_at: datetime | None = None
    is_active: bool = True
    attachments: list[Attachment] = field(default_factory=list)
    read_by: list[ReadReceipt] = field(default_factory=list)
    view_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None
    created_by_name: str | None = None

    @property
    def priority_rank(self) -> int:
        return PRIORITY_RANK.get(self.priority, -1)


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
    "ROLE_BY_AUDIENCE",
    "ReadReceipt",
    "TARGET_AUDIENCES",
]
