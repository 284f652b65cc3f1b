"""Use case for listing the notifications visible to a viewer."""

from __future__ import annotations

import math
from dataclasses import dataclass

from sqlalchemy.orm import Session

from college_portal.domain.entities import (
    NOTIFICATION_PRIORITIES,
    NOTIFICATION_TYPES,
    Notification,
    Viewer,
)
from college_portal.domain.exceptions import FieldError, ValidationError
from college_portal.domain.read_tracking import is_read
from college_portal.domain.targeting import is_visible
from college_portal.infrastructure.repositories import NotificationRepository
from college_portal.utils import portal_now

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 50


@dataclass(frozen=True)
class NotificationFilters:
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE
    notification_type: str | None = None
    priority: str | None = None
    unread_only: bool = False


@dataclass(frozen=True)
class ViewerNotification:
    """A notification together with the viewer's read state."""

    notification: Notification
    is_read: bool


@dataclass(frozen=True)
class NotificationPage:
    items: list[ViewerNotification]
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.total else 0

    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev_page(self) -> bool:
        return self.page > 1


def list_notifications(
    session: Session,
    *,
    viewer: Viewer,
    filters: NotificationFilters | None = None,
) -> NotificationPage:
    """Return one page of notifications visible to ``viewer``.

    Notifications are ordered by priority (critical first) and then newest
    first. Every notification on the returned page gets one more view.
    """

    filters = filters or NotificationFilters()
    _validate_filters(filters)

    now = portal_now()
    repository = NotificationRepository(session)
    candidates = repository.list_live(
        now=now,
        notification_type=filters.notification_type,
        priority=filters.priority,
        unread_by=viewer.id if filters.unread_only else None,
        receipts_for=viewer.id,
    )
    visible = [
        notification
        for notification in candidates
        if is_visible(notification, viewer, now=now)
    ]
    # Stable sort keeps the newest-first order within each priority.
    visible.sort(key=lambda notification: notification.priority_rank, reverse=True)

    start = (filters.page - 1) * filters.limit
    page_items = visible[start : start + filters.limit]
    repository.increment_view_counts(notification.id for notification in page_items)

    return NotificationPage(
        items=[
            ViewerNotification(notification=item, is_read=is_read(item, viewer.id))
            for item in page_items
        ],
        page=filters.page,
        limit=filters.limit,
        total=len(visible),
    )


def _validate_filters(filters: NotificationFilters) -> None:
    errors: list[FieldError] = []
    if filters.page < 1:
        errors.append(FieldError("page", "Page must be a positive integer"))
    if not 1 <= filters.limit <= MAX_PAGE_SIZE:
        errors.append(FieldError("limit", f"Limit must be between 1 and {MAX_PAGE_SIZE}"))
    if filters.notification_type is not None and filters.notification_type not in NOTIFICATION_TYPES:
        errors.append(FieldError("type", "Invalid notification type"))
    if filters.priority is not None and filters.priority not in NOTIFICATION_PRIORITIES:
        errors.append(FieldError("priority", "Invalid priority"))
    if errors:
        raise ValidationError(errors)
