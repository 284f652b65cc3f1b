"""Ownership checks shared by notification use cases."""

from __future__ import annotations

from sqlalchemy.orm import Session

from college_portal.domain.entities import Notification, Viewer
from college_portal.domain.exceptions import ForbiddenError, NotFoundError
from college_portal.infrastructure.repositories import NotificationRepository


def load_notification(repository: NotificationRepository, notification_id: int) -> Notification:
    notification = repository.get(notification_id)
    if notification is None:
        raise NotFoundError("Notification not found")
    return notification


def can_manage(notification: Notification, actor: Viewer) -> bool:
    """Return ``True`` when ``actor`` created ``notification`` or is an admin."""

    return actor.is_admin or notification.created_by == actor.id


def load_managed_notification(
    session: Session, notification_id: int, actor: Viewer
) -> tuple[NotificationRepository, Notification]:
    repository = NotificationRepository(session)
    notification = load_notification(repository, notification_id)
    if not can_manage(notification, actor):
        raise ForbiddenError("Access denied")
    return repository, notification
