"""Use case for editing an existing notification."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import replace
from typing import Any

from sqlalchemy.orm import Session

from college_portal.domain.entities import Attachment, Notification, Viewer

from .access import load_managed_notification
from .validators import validate_notification_fields

UPDATABLE_FIELDS = (
    "title",
    "message",
    "notification_type",
    "priority",
    "is_active",
    "expires_at",
    "target_audience",
    "target_departments",
    "target_semesters",
)


def update_notification(
    session: Session,
    notification_id: int,
    *,
    actor: Viewer,
    changes: Mapping[str, Any],
    new_attachments: Sequence[Attachment] | None = None,
) -> Notification:
    """Apply ``changes`` to a notification owned by ``actor`` (or any, for admins).

    ``changes`` holds only the fields the client sent; an explicit ``None`` for
    ``expires_at`` removes the expiry. New attachments are appended.
    """

    unknown = set(changes) - set(UPDATABLE_FIELDS)
    if unknown:
        raise ValueError(f"Unsupported notification fields: {', '.join(sorted(unknown))}")

    repository, current = load_managed_notification(session, notification_id, actor)
    cleaned = validate_notification_fields(changes)

    updated = replace(current, **cleaned)
    if new_attachments:
        updated = replace(updated, attachments=[*current.attachments, *new_attachments])
    return repository.update(updated)
