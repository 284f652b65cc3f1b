"""Use case for retrieving a single notification."""

from sqlalchemy.orm import Session

from college_portal.domain.entities import Viewer
from college_portal.domain.exceptions import ForbiddenError
from college_portal.domain.read_tracking import is_read
from college_portal.domain.targeting import is_visible
from college_portal.infrastructure.repositories import NotificationRepository

from .access import can_manage, load_notification
from .list_notifications import ViewerNotification


def get_notification(
    session: Session, notification_id: int, *, viewer: Viewer
) -> ViewerNotification:
    """Return the notification with the viewer's read state or raise an error."""

    notification = load_notification(NotificationRepository(session), notification_id)
    if not (can_manage(notification, viewer) or is_visible(notification, viewer)):
        raise ForbiddenError("Access denied")
    return ViewerNotification(
        notification=notification, is_read=is_read(notification, viewer.id)
    )
