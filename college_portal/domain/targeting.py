"""Visibility rules deciding which viewers can see a notification."""

from __future__ import annotations

from collections.abc import Collection
from datetime import datetime

from college_portal.domain.entities import (
    AUDIENCE_ALL,
    AUDIENCE_BY_ROLE,
    Notification,
    Viewer,
)
from college_portal.utils import from_storage, portal_now


def is_visible(
    notification: Notification, viewer: Viewer, *, now: datetime | None = None
) -> bool:
    """Return ``True`` when ``viewer`` may see ``notification``.

    Inactive or expired notifications are hidden from everyone. Admins skip the
    audience, department and semester checks; every other viewer must satisfy
    all three.
    """

    if not is_live(notification, now=now):
        return False
    if viewer.is_admin:
        return True
    return (
        matches_audience(notification.target_audience, viewer)
        and matches_department(notification.target_departments, viewer)
        and matches_semester(notification.target_semesters, viewer)
    )


def is_live(notification: Notification, *, now: datetime | None = None) -> bool:
    """Return ``True`` when ``notification`` is active and not yet expired."""

    if not notification.is_active:
        return False
    if notification.expires_at is None:
        return True
    current = from_storage(now) if now is not None else portal_now()
    return from_storage(notification.expires_at) > current


def matches_audience(target_audience: Collection[str], viewer: Viewer) -> bool:
    _require_collection("target_audience", target_audience)
    if AUDIENCE_ALL in target_audience:
        return True
    audience = AUDIENCE_BY_ROLE.get(viewer.role)
    return audience is not None and audience in target_audience


def matches_department(target_departments: Collection[str], viewer: Viewer) -> bool:
    _require_collection("target_departments", target_departments)
    if not target_departments:
        return True
    return viewer.department is not None and viewer.department in target_departments


def matches_semester(target_semesters: Collection[int], viewer: Viewer) -> bool:
    _require_collection("target_semesters", target_semesters)
    if not target_semesters:
        return True
    # Semester targeting only narrows students.
    if not viewer.is_student:
        return True
    return viewer.semester is not None and viewer.semester in target_semesters


def _require_collection(name: str, value: object) -> None:
    if isinstance(value, (str, bytes)) or not isinstance(value, Collection):
        raise TypeError(f"{name} must be a collection, got {type(value).__name__}")


__all__ = [
    "is_live",
    "is_visible",
    "matches_audience",
    "matches_department",
    "matches_semester",
]
