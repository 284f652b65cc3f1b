"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Iterable

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, lazyload

from college_portal.domain.entities import Attachment, Notification, ReadReceipt
from college_portal.infrastructure.models import (
    NotificationAttachmentModel,
    NotificationModel,
    NotificationReadModel,
)
from college_portal.utils import from_storage, portal_now, to_storage


class NotificationRepository:
    """Provide CRUD operations for :class:`Notification` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, notification_id: int) -> Notification | None:
        model = self.session.get(NotificationModel, notification_id)
        return self._to_entity(model) if model else None

    def list_live(
        self,
        *,
        now: datetime | None = None,
        notification_type: str | None = None,
        priority: str | None = None,
        unread_by: int | None = None,
        receipts_for: int | None = None,
    ) -> Sequence[Notification]:
        """Return active, unexpired notifications newest first.

        ``unread_by`` excludes notifications already read by that user. With
        ``receipts_for`` each result carries only that user's read receipt
        instead of every receipt.
        """

        current = to_storage(now or portal_now())
        query = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.is_active.is_(True))
            .filter(
                or_(
                    NotificationModel.expires_at.is_(None),
                    NotificationModel.expires_at > current,
                )
            )
        )
        if notification_type is not None:
            query = query.filter(NotificationModel.notification_type == notification_type)
        if priority is not None:
            query = query.filter(NotificationModel.priority == priority)
        if unread_by is not None:
            query = query.filter(
                ~NotificationModel.read_receipts.any(
                    NotificationReadModel.user_id == unread_by
                )
            )
        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        if receipts_for is None:
            return [self._to_entity(model) for model in query.all()]

        models = query.options(lazyload(NotificationModel.read_receipts)).all()
        receipts = self._receipts_of_user(
            receipts_for, [model.id for model in models]
        )
        return [
            self._to_entity(model, read_receipts=receipts.get(model.id, []))
            for model in models
        ]

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel()
        self._apply_entity_to_model(model, notification, include_creation_fields=True)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def update(self, notification: Notification) -> Notification:
        if notification.id is None:
            raise ValueError("Notification id is required for updates")
        model = self.session.get(NotificationModel, notification.id)
        if model is None:
            msg = f"Notification with id {notification.id} not found"
            raise ValueError(msg)
        self._apply_entity_to_model(model, notification, include_creation_fields=False)
        model.updated_at = to_storage(portal_now())
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def delete(self, notification_id: int) -> None:
        model = self.session.get(NotificationModel, notification_id)
        if model is None:
            msg = f"Notification with id {notification_id} not found"
            raise ValueError(msg)
        self.session.delete(model)
        self.session.commit()

    def add_read_receipt(
        self, notification_id: int, *, user_id: int, read_at: datetime | None = None
    ) -> bool:
        """Insert a read receipt for ``user_id`` unless one already exists.

        Returns ``True`` when a new receipt was written. The unique constraint on
        (notification, user) settles concurrent first reads.
        """

        existing = (
            self.session.query(NotificationReadModel.id)
            .filter(NotificationReadModel.notification_id == notification_id)
            .filter(NotificationReadModel.user_id == user_id)
            .first()
        )
        if existing is not None:
            return False

        self.session.add(
            NotificationReadModel(
                notification_id=notification_id,
                user_id=user_id,
                read_at=to_storage(read_at or portal_now()),
            )
        )
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            return False
        return True

    def increment_view_counts(self, notification_ids: Iterable[int]) -> int:
        """Atomically add one view to each notification in ``notification_ids``."""

        ids = [notification_id for notification_id in notification_ids if notification_id is not None]
        if not ids:
            return 0
        updated = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.id.in_(ids))
            .update(
                {NotificationModel.view_count: NotificationModel.view_count + 1},
                synchronize_session=False,
            )
        )
        self.session.commit()
        return updated

    def count(
        self,
        *,
        is_active: bool | None = None,
        expired_before: datetime | None = None,
        created_since: datetime | None = None,
    ) -> int:
        query = self.session.query(func.count(NotificationModel.id))
        if is_active is not None:
            query = query.filter(NotificationModel.is_active.is_(is_active))
        if expired_before is not None:
            query = query.filter(
                NotificationModel.expires_at < to_storage(expired_before)
            )
        if created_since is not None:
            query = query.filter(
                NotificationModel.created_at >= to_storage(created_since)
            )
        return int(query.scalar() or 0)

    def count_by_type(self) -> list[tuple[str, int]]:
        return self._count_grouped(NotificationModel.notification_type)

    def count_by_priority(self) -> list[tuple[str, int]]:
        return self._count_grouped(NotificationModel.priority)

    def _count_grouped(self, column) -> list[tuple[str, int]]:
        total = func.count(NotificationModel.id)
        rows = (
            self.session.query(column, total)
            .group_by(column)
            .order_by(total.desc(), column.asc())
            .all()
        )
        return [(value, int(count)) for value, count in rows]

    @staticmethod
    def _apply_entity_to_model(
        model: NotificationModel,
        notification: Notification,
        *,
        include_creation_fields: bool,
    ) -> None:
        if include_creation_fields:
            model.created_by = notification.created_by
            model.created_at = to_storage(
                notification.created_at or portal_now()
            )
            model.view_count = notification.view_count
        model.title = notification.title
        model.message = notification.message
        model.notification_type = notification.notification_type
        model.priority = notification.priority
        model.target_audience = list(notification.target_audience)
        model.target_departments = list(notification.target_departments)
        model.target_semesters = list(notification.target_semesters)
        model.is_active = notification.is_active
        model.expires_at = to_storage(notification.expires_at)

        stored = [
            (item.file_name, item.file_url, item.file_type, item.file_size)
            for item in model.attachments
        ]
        wanted = [
            (item.file_name, item.file_url, item.file_type, item.file_size)
            for item in notification.attachments
        ]
        if stored != wanted:
            model.attachments = [
                NotificationAttachmentModel(
                    position=position,
                    file_name=attachment.file_name,
                    file_url=attachment.file_url,
                    file_type=attachment.file_type,
                    file_size=attachment.file_size,
                )
                for position, attachment in enumerate(notification.attachments)
            ]

    def _receipts_of_user(
        self, user_id: int, notification_ids: list[int]
    ) -> dict[int, list[NotificationReadModel]]:
        if not notification_ids:
            return {}
        rows = (
            self.session.query(NotificationReadModel)
            .filter(NotificationReadModel.user_id == user_id)
            .filter(NotificationReadModel.notification_id.in_(notification_ids))
            .all()
        )
        grouped: dict[int, list[NotificationReadModel]] = {}
        for row in rows:
            grouped.setdefault(row.notification_id, []).append(row)
        return grouped

    @staticmethod
    def _to_entity(
        model: NotificationModel,
        *,
        read_receipts: Sequence[NotificationReadModel] | None = None,
    ) -> Notification:
        if read_receipts is None:
            read_receipts = model.read_receipts
        return Notification(
            id=model.id,
            title=model.title,
            message=model.message,
            created_by=model.created_by,
            notification_type=model.notification_type,
            priority=model.priority,
            target_audience=list(model.target_audience or []),
            target_departments=list(model.target_departments or []),
            target_semesters=[int(value) for value in model.target_semesters or []],
            expires_at=from_storage(model.expires_at),
            is_active=model.is_active,
            attachments=[
                Attachment(
                    file_name=item.file_name,
                    file_url=item.file_url,
                    file_type=item.file_type,
                    file_size=item.file_size,
                )
                for item in model.attachments
            ],
            read_by=[
                ReadReceipt(
                    user_id=receipt.user_id,
                    read_at=from_storage(receipt.read_at),
                )
                for receipt in read_receipts
            ],
            view_count=model.view_count or 0,
            created_at=from_storage(model.created_at),
            updated_at=from_storage(model.updated_at),
            created_by_name=model.creator.name if model.creator is not None else None,
        )


__all__ = ["NotificationRepository"]
