"""Use case for deleting notifications."""

import logging

from sqlalchemy.orm import Session

from college_portal.domain.entities import Viewer

from .access import load_managed_notification

logger = logging.getLogger(__name__)


def delete_notification(session: Session, notification_id: int, *, actor: Viewer) -> None:
    """Permanently remove a notification created by ``actor`` (or any, for admins)."""

    repository, _ = load_managed_notification(session, notification_id, actor)
    repository.delete(notification_id)
    logger.info("Notification %s deleted by user %s", notification_id, actor.id)
