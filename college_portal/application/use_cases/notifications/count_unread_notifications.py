"""Use case for counting unread notifications visible to a viewer."""

from sqlalchemy.orm import Session

from college_portal.domain.entities import Viewer
from college_portal.domain.targeting import is_visible
from college_portal.infrastructure.repositories import NotificationRepository
from college_portal.utils import portal_now


def count_unread_notifications(session: Session, *, viewer: Viewer) -> int:
    """Return how many visible notifications ``viewer`` has not read yet."""

    now = portal_now()
    candidates = NotificationRepository(session).list_live(
        now=now, unread_by=viewer.id, receipts_for=viewer.id
    )
    return sum(1 for notification in candidates if is_visible(notification, viewer, now=now))
