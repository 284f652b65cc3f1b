"""Per-user read state of notifications."""

from __future__ import annotations

from college_portal.domain.entities import Notification


def is_read(notification: Notification, user_id: int) -> bool:
    """Return ``True`` when ``user_id`` has a read receipt on ``notification``."""

    return any(receipt.user_id == user_id for receipt in notification.read_by)


__all__ = ["is_read"]
