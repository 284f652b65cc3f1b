"""Use case for recording that a viewer read a notification."""

from sqlalchemy.orm import Session

from college_portal.domain.entities import Viewer
from college_portal.domain.read_tracking import is_read
from college_portal.infrastructure.repositories import NotificationRepository

from .access import load_notification


def mark_notification_read(session: Session, notification_id: int, *, viewer: Viewer) -> bool:
    """Record the first read of ``notification_id`` by ``viewer``.

    Returns ``True`` when a new receipt was stored and ``False`` when the
    viewer had already read the notification.
    """

    repository = NotificationRepository(session)
    notification = load_notification(repository, notification_id)
    if is_read(notification, viewer.id):
        return False
    return repository.add_read_receipt(notification_id, user_id=viewer.id)
