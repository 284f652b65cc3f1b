"""Domain entity representing a portal user."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

ROLE_STUDENT = "student"
ROLE_TEACHER = "teacher"
ROLE_ADMIN = "admin"
USER_ROLES = (ROLE_STUDENT, ROLE_TEACHER, ROLE_ADMIN)


@dataclass(frozen=True)
class Viewer:
    """Identity attributes of the user making a request.

    Passed explicitly to every targeting and read-tracking call.
    """

    id: int
    role: str
    department: str | None = None
    semester: int | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @property
    def is_student(self) -> bool:
        return self.role == ROLE_STUDENT


@dataclass
class User:
    """Core attributes describing a portal user."""

    id: int | None
    name: str
    email: str
    password: str
    role: str
    department: str | None = None
    semester: int | None = None
    is_email_verified: bool = False
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def has_role(self, role: str) -> bool:
        """Return ``True`` when the user's role matches ``role``."""

        return self.role.lower() == role.lower()

    def is_admin(self) -> bool:
        """Return ``True`` when the user is an administrator."""

        return self.has_role(ROLE_ADMIN)

    def can_publish_notifications(self) -> bool:
        return self.has_role(ROLE_TEACHER) or self.is_admin()

    def as_viewer(self) -> Viewer:
        if self.id is None:
            raise ValueError("Only persisted users can act as viewers")
        # Semester is only meaningful for students.
        semester = self.semester if self.has_role(ROLE_STUDENT) else None
        return Viewer(
            id=self.id,
            role=self.role.lower(),
            department=self.department,
            semester=semester,
        )


__all__ = [
    "ROLE_ADMIN",
    "ROLE_STUDENT",
    "ROLE_TEACHER",
    "USER_ROLES",
    "User",
    "Viewer",
]
