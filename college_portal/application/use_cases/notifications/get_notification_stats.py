"""Use case summarising notification activity for administrators."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from sqlalchemy.orm import Session

from college_portal.domain.entities import Viewer
from college_portal.domain.exceptions import ForbiddenError
from college_portal.infrastructure.repositories import NotificationRepository
from college_portal.utils import portal_now

RECENT_WINDOW = timedelta(days=30)


@dataclass(frozen=True)
class NotificationStats:
    total: int
    active: int
    expired: int
    recent: int
    by_type: list[tuple[str, int]]
    by_priority: list[tuple[str, int]]


def get_notification_stats(session: Session, *, viewer: Viewer) -> NotificationStats:
    if not viewer.is_admin:
        raise ForbiddenError("Admin access required")

    now = portal_now()
    repository = NotificationRepository(session)
    return NotificationStats(
        total=repository.count(),
        active=repository.count(is_active=True),
        expired=repository.count(expired_before=now),
        recent=repository.count(created_since=now - RECENT_WINDOW),
        by_type=repository.count_by_type(),
        by_priority=repository.count_by_priority(),
    )
