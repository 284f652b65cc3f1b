"""Use case for publishing a new notification."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime
from typing import Protocol

from sqlalchemy.orm import Session

from college_portal.config import get_settings
from college_portal.domain.entities import (
    AUDIENCE_ALL,
    ROLE_ADMIN,
    ROLE_TEACHER,
    Attachment,
    Notification,
    Viewer,
)
from college_portal.domain.exceptions import ForbiddenError
from college_portal.infrastructure.repositories import NotificationRepository
from college_portal.utils import portal_now

from .validators import validate_notification_fields

logger = logging.getLogger(__name__)


class DispatchScheduler(Protocol):
    def enqueue(self, notification_id: int) -> object: ...


def create_notification(
    session: Session,
    *,
    creator: Viewer,
    title: str,
    message: str,
    notification_type: str = "general",
    priority: str = "medium",
    target_audience: Sequence[str] | None = None,
    target_departments: Sequence[str] | None = None,
    target_semesters: Sequence[int] | None = None,
    expires_at: datetime | None = None,
    attachments: Sequence[Attachment] | None = None,
    dispatch_queue: DispatchScheduler | None = None,
) -> Notification:
    """Persist a notification and schedule the email fan-out to its audience.

    The email fan-out is handed to ``dispatch_queue`` and never awaited, so the
    result only reflects validation and persistence.
    """

    if creator.role not in (ROLE_TEACHER, ROLE_ADMIN):
        raise ForbiddenError("Only teachers and admins can publish notifications")

    cleaned = validate_notification_fields(
        {
            "title": title,
            "message": message,
            "notification_type": notification_type,
            "priority": priority,
            "target_audience": [AUDIENCE_ALL] if target_audience is None else target_audience,
            "target_departments": list(target_departments or []),
            "target_semesters": list(target_semesters or []),
            "expires_at": expires_at,
        }
    )

    notification = Notification(
        id=None,
        created_by=creator.id,
        attachments=list(attachments or []),
        created_at=portal_now(),
        **cleaned,
    )
    saved = NotificationRepository(session).create(notification)
    logger.info(
        "Notification %s created by user %s for %s",
        saved.id,
        creator.id,
        ", ".join(saved.target_audience),
    )

    if not get_settings().enable_email_notifications:
        logger.info("Email notifications disabled; skipping dispatch for %s", saved.id)
    elif dispatch_queue is None:
        logger.warning(
            "No dispatch queue available; notification %s will not be emailed", saved.id
        )
    elif saved.id is not None:
        dispatch_queue.enqueue(saved.id)

    return saved
