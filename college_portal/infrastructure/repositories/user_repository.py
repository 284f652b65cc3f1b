"""Persistence layer for user data."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from college_portal.domain.entities import (
    AUDIENCE_ALL,
    ROLE_BY_AUDIENCE,
    ROLE_STUDENT,
    Notification,
    User,
)
from college_portal.infrastructure.models import UserModel
from college_portal.utils import from_storage


class UserRepository:
    """Provide CRUD operations for user entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: int) -> User | None:
        model = self.session.get(UserModel, user_id)
        return self._to_entity(model) if model else None

    def get_by_email(self, email: str) -> User | None:
        model = (
            self.session.query(UserModel)
            .filter(UserModel.email == email.strip().lower())
            .first()
        )
        return self._to_entity(model) if model else None

    def create(self, user: User) -> User:
        model = UserModel()
        self._apply_entity_to_model(model, user)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def update(self, user: User) -> User:
        model = self.session.get(UserModel, user.id) if user.id is not None else None
        if model is None:
            msg = f"User with id {user.id} not found"
            raise ValueError(msg)
        self._apply_entity_to_model(model, user)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def list_notification_recipients(self, notification: Notification) -> Sequence[User]:
        """Return verified, active users matched by the notification's targeting.

        Mirrors the per-viewer visibility rules as a single query: role in the
        targeted audiences unless ``all`` is present, department in the targeted
        departments when any are set, and semester in the targeted semesters for
        students only.
        """

        query = (
            self.session.query(UserModel)
            .filter(UserModel.is_email_verified.is_(True))
            .filter(UserModel.is_active.is_(True))
        )

        if AUDIENCE_ALL not in notification.target_audience:
            roles = sorted(
                ROLE_BY_AUDIENCE[audience]
                for audience in notification.target_audience
                if audience in ROLE_BY_AUDIENCE
            )
            query = query.filter(UserModel.role.in_(roles))

        if notification.target_departments:
            query = query.filter(UserModel.department.in_(notification.target_departments))

        if notification.target_semesters:
            query = query.filter(
                or_(
                    UserModel.role != ROLE_STUDENT,
                    and_(
                        UserModel.role == ROLE_STUDENT,
                        UserModel.semester.in_(notification.target_semesters),
                    ),
                )
            )

        query = query.order_by(UserModel.id.asc())
        return [self._to_entity(model) for model in query.all()]

    @staticmethod
    def _apply_entity_to_model(model: UserModel, user: User) -> None:
        model.name = user.name
        model.email = user.email.strip().lower()
        model.password = user.password
        model.role = user.role.lower()
        model.department = user.department
        model.semester = user.semester
        model.is_email_verified = user.is_email_verified
        model.is_active = user.is_active

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            name=model.name,
            email=model.email,
            password=model.password,
            role=model.role,
            department=model.department,
            semester=model.semester,
            is_email_verified=model.is_email_verified,
            is_active=model.is_active,
            created_at=from_storage(model.created_at),
            updated_at=from_storage(model.updated_at),
        )


__all__ = ["UserRepository"]
