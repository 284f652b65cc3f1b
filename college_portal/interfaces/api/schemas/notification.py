"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class AttachmentPayload(BaseModel):
    """Attachment metadata as returned by the upload endpoint."""

    model_config = ConfigDict(from_attributes=True)

    file_name: str
    file_url: str
    file_type: str | None = None
    file_size: int | None = Field(default=None, ge=0)


class NotificationCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    message: str
    notification_type: str = Field("general", alias="type")
    priority: str = "medium"
    target_audience: list[str] = Field(default_factory=lambda: ["all"])
    target_departments: list[str] = Field(default_factory=list)
    target_semesters: list[int] = Field(default_factory=list)
    expires_at: datetime | None = None
    attachments: list[AttachmentPayload] = Field(default_factory=list)


class NotificationUpdate(BaseModel):
    """Partial update; only the fields sent by the client are applied."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    title: str | None = None
    message: str | None = None
    notification_type: str | None = Field(None, alias="type")
    priority: str | None = None
    is_active: bool | None = None
    expires_at: datetime | None = None
    target_audience: list[str] | None = None
    target_departments: list[str] | None = None
    target_semesters: list[int] | None = None
    new_attachments: list[AttachmentPayload] | None = None


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str
    message: str
    notification_type: str = Field(alias="type")
    priority: str
    target_audience: list[str]
    target_departments: list[str]
    target_semesters: list[int]
    expires_at: datetime | None = None
    is_active: bool
    attachments: list[AttachmentPayload] = Field(default_factory=list)
    view_count: int
    is_read: bool
    created_by: int
    created_by_name: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class PaginationRead(BaseModel):
    current_page: int
    total_pages: int
    total_notifications: int
    has_next_page: bool
    has_prev_page: bool


class NotificationListResponse(BaseModel):
    notifications: list[NotificationRead]
    pagination: PaginationRead


class UnreadCountRead(BaseModel):
    unread_count: int


class MarkReadResponse(BaseModel):
    message: str
    newly_read: bool


class CountByKey(BaseModel):
    name: str
    count: int


class NotificationStatsRead(BaseModel):
    total_notifications: int
    active_notifications: int
    expired_notifications: int
    recent_notifications: int
    notifications_by_type: list[CountByKey]
    notifications_by_priority: list[CountByKey]


class DispatchReportRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    recipients: int
    batches: int
    sent: int
    failed: list[str]


class DispatchJobRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    notification_id: int
    status: str
    enqueued_at: datetime | None = None
    started_at: datetime | None = None
    finished_at: datetime | None = None
    report: DispatchReportRead | None = None
    error: str | None = None


__all__ = [
    "AttachmentPayload",
    "CountByKey",
    "DispatchJobRead",
    "DispatchReportRead",
    "MarkReadResponse",
    "NotificationCreate",
    "NotificationListResponse",
    "NotificationRead",
    "NotificationStatsRead",
    "NotificationUpdate",
    "PaginationRead",
    "UnreadCountRead",
]
