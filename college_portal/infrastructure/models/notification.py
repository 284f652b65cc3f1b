"""SQLAlchemy models for persisted notifications and their read receipts."""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from college_portal.infrastructure.database import Base
from college_portal.utils import portal_now_naive


class NotificationModel(Base):
    """Database representation for targeted notifications."""

    __tablename__ = "notification"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(100), nullable=False)
    message = Column(Text, nullable=False)
    notification_type = Column(String(20), nullable=False, default="general", index=True)
    priority = Column(String(20), nullable=False, default="medium", index=True)
    target_audience = Column(JSON, nullable=False, default=list)
    target_departments = Column(JSON, nullable=False, default=list)
    target_semesters = Column(JSON, nullable=False, default=list)
    created_by = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    expires_at = Column(DateTime(), nullable=True, index=True)
    view_count = Column(Integer, nullable=False, default=0)
    created_at = Column(
        DateTime(), nullable=False, default=portal_now_naive, index=True
    )
    updated_at = Column(DateTime(), nullable=True, onupdate=portal_now_naive)

    creator = relationship("UserModel", lazy="joined")
    attachments = relationship(
        "NotificationAttachmentModel",
        order_by="NotificationAttachmentModel.position",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )
    read_receipts = relationship(
        "NotificationReadModel",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )


class NotificationAttachmentModel(Base):
    """File metadata attached to a notification, kept in upload order."""

    __tablename__ = "notification_attachment"

    id = Column(Integer, primary_key=True, index=True)
    notification_id = Column(
        Integer,
        ForeignKey("notification.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position = Column(Integer, nullable=False, default=0)
    file_name = Column(String(255), nullable=False)
    file_url = Column(String(1024), nullable=False)
    file_type = Column(String(120), nullable=True)
    file_size = Column(Integer, nullable=True)


class NotificationReadModel(Base):
    """One row per user who has read a notification."""

    __tablename__ = "notification_read"
    __table_args__ = (
        UniqueConstraint("notification_id", "user_id", name="uq_notification_read_user"),
    )

    id = Column(Integer, primary_key=True, index=True)
    notification_id = Column(
        Integer,
        ForeignKey("notification.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    read_at = Column(DateTime(), nullable=False, default=portal_now_naive)


__all__ = ["NotificationAttachmentModel", "NotificationModel", "NotificationReadModel"]
