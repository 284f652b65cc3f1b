"""Endpoints for publishing, listing and reading notifications."""

from __future__ import annotations

import logging
from functools import partial

import anyio
from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from sqlalchemy.orm import Session

from college_portal.application.use_cases.notifications import (
    AttachmentUpload,
    NotificationFilters,
    ViewerNotification,
    count_unread_notifications,
    create_notification as create_notification_uc,
    delete_notification as delete_notification_uc,
    get_notification as get_notification_uc,
    get_notification_stats,
    list_notifications as list_notifications_uc,
    mark_notification_read as mark_notification_read_uc,
    update_notification as update_notification_uc,
    upload_attachments as upload_attachments_uc,
)
from college_portal.application.use_cases.notifications.list_notifications import (
    DEFAULT_PAGE_SIZE,
)
from college_portal.domain.entities import Attachment, Notification, Viewer
from college_portal.domain.read_tracking import is_read
from college_portal.infrastructure.database import get_db
from college_portal.infrastructure.notifications import NotificationDispatchQueue
from college_portal.interfaces.api.dependencies import (
    get_dispatch_queue,
    get_viewer,
    require_admin,
    require_teacher_or_admin,
)
from college_portal.interfaces.api.schemas import (
    AttachmentPayload,
    CountByKey,
    DispatchJobRead,
    DispatchReportRead,
    MarkReadResponse,
    NotificationCreate,
    NotificationListResponse,
    NotificationRead,
    NotificationStatsRead,
    NotificationUpdate,
    PaginationRead,
    UnreadCountRead,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)


def _notification_to_schema(notification: Notification, *, is_read: bool) -> NotificationRead:
    return NotificationRead(
        id=notification.id or 0,
        title=notification.title,
        message=notification.message,
        notification_type=notification.notification_type,
        priority=notification.priority,
        target_audience=list(notification.target_audience),
        target_departments=list(notification.target_departments),
        target_semesters=list(notification.target_semesters),
        expires_at=notification.expires_at,
        is_active=notification.is_active,
        attachments=[
            AttachmentPayload.model_validate(attachment)
            for attachment in notification.attachments
        ],
        view_count=notification.view_count,
        is_read=is_read,
        created_by=notification.created_by,
        created_by_name=notification.created_by_name,
        created_at=notification.created_at,
        updated_at=notification.updated_at,
    )


def _viewer_notification_to_schema(item: ViewerNotification) -> NotificationRead:
    return _notification_to_schema(item.notification, is_read=item.is_read)


def _to_attachment(payload: AttachmentPayload) -> Attachment:
    return Attachment(
        file_name=payload.file_name,
        file_url=payload.file_url,
        file_type=payload.file_type,
        file_size=payload.file_size,
    )


@router.get("/", response_model=NotificationListResponse)
def list_notifications(
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
    notification_type: str | None = Query(None, alias="type"),
    priority: str | None = None,
    unread_only: bool = False,
    db: Session = Depends(get_db),
    viewer: Viewer = Depends(get_viewer),
) -> NotificationListResponse:
    """Return one page of the notifications the authenticated user can see."""

    result = list_notifications_uc(
        db,
        viewer=viewer,
        filters=NotificationFilters(
            page=page,
            limit=limit,
            notification_type=notification_type,
            priority=priority,
            unread_only=unread_only,
        ),
    )
    return NotificationListResponse(
        notifications=[_viewer_notification_to_schema(item) for item in result.items],
        pagination=PaginationRead(
            current_page=result.page,
            total_pages=result.total_pages,
            total_notifications=result.total,
            has_next_page=result.has_next_page,
            has_prev_page=result.has_prev_page,
        ),
    )


@router.get("/unread-count", response_model=UnreadCountRead)
def unread_count(
    db: Session = Depends(get_db),
    viewer: Viewer = Depends(get_viewer),
) -> UnreadCountRead:
    return UnreadCountRead(unread_count=count_unread_notifications(db, viewer=viewer))


@router.get("/stats/overview", response_model=NotificationStatsRead)
def notification_stats(
    db: Session = Depends(get_db),
    viewer: Viewer = Depends(require_admin),
) -> NotificationStatsRead:
    stats = get_notification_stats(db, viewer=viewer)
    return NotificationStatsRead(
        total_notifications=stats.total,
        active_notifications=stats.active,
        expired_notifications=stats.expired,
        recent_notifications=stats.recent,
        notifications_by_type=[CountByKey(name=name, count=count) for name, count in stats.by_type],
        notifications_by_priority=[
            CountByKey(name=name, count=count) for name, count in stats.by_priority
        ],
    )


@router.post(
    "/attachments",
    response_model=list[AttachmentPayload],
    status_code=status.HTTP_201_CREATED,
)
async def upload_attachments(
    files: list[UploadFile] = File(...),
    viewer: Viewer = Depends(require_teacher_or_admin),
) -> list[AttachmentPayload]:
    """Store up to five files and return metadata to reference from a notification."""

    uploads = [
        AttachmentUpload(
            file_name=upload.filename or "attachment",
            data=await upload.read(),
            content_type=upload.content_type,
        )
        for upload in files
    ]
    attachments = await anyio.to_thread.run_sync(
        partial(upload_attachments_uc, uploads, uploader=viewer)
    )
    return [AttachmentPayload.model_validate(attachment) for attachment in attachments]


@router.post("/", response_model=NotificationRead, status_code=status.HTTP_201_CREATED)
def create_notification(
    payload: NotificationCreate,
    db: Session = Depends(get_db),
    viewer: Viewer = Depends(require_teacher_or_admin),
    dispatch_queue: NotificationDispatchQueue | None = Depends(get_dispatch_queue),
) -> NotificationRead:
    """Publish a notification; targeted users are emailed in the background."""

    notification = create_notification_uc(
        db,
        creator=viewer,
        title=payload.title,
        message=payload.message,
        notification_type=payload.notification_type,
        priority=payload.priority,
        target_audience=payload.target_audience,
        target_departments=payload.target_departments,
        target_semesters=payload.target_semesters,
        expires_at=payload.expires_at,
        attachments=[_to_attachment(attachment) for attachment in payload.attachments],
        dispatch_queue=dispatch_queue,
    )
    return _notification_to_schema(notification, is_read=False)


@router.get("/{notification_id}", response_model=NotificationRead)
def get_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    viewer: Viewer = Depends(get_viewer),
) -> NotificationRead:
    return _viewer_notification_to_schema(get_notification_uc(db, notification_id, viewer=viewer))


@router.post("/{notification_id}/read", response_model=MarkReadResponse)
def mark_notification_read(
    notification_id: int,
    db: Session = Depends(get_db),
    viewer: Viewer = Depends(get_viewer),
) -> MarkReadResponse:
    newly_read = mark_notification_read_uc(db, notification_id, viewer=viewer)
    return MarkReadResponse(message="Notification marked as read", newly_read=newly_read)


@router.put("/{notification_id}", response_model=NotificationRead)
def update_notification(
    notification_id: int,
    payload: NotificationUpdate,
    db: Session = Depends(get_db),
    viewer: Viewer = Depends(get_viewer),
) -> NotificationRead:
    changes = payload.model_dump(exclude_unset=True)
    new_attachments = changes.pop("new_attachments", None) or []
    notification = update_notification_uc(
        db,
        notification_id,
        actor=viewer,
        changes=changes,
        new_attachments=[_to_attachment(AttachmentPayload(**item)) for item in new_attachments],
    )
    return _notification_to_schema(notification, is_read=is_read(notification, viewer.id))


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    viewer: Viewer = Depends(get_viewer),
) -> None:
    delete_notification_uc(db, notification_id, actor=viewer)


@router.get("/{notification_id}/dispatch", response_model=DispatchJobRead)
def get_dispatch_job(
    notification_id: int,
    _: Viewer = Depends(require_admin),
    dispatch_queue: NotificationDispatchQueue | None = Depends(get_dispatch_queue),
) -> DispatchJobRead:
    """Report the state of the email fan-out for a notification."""

    job = dispatch_queue.get_job(notification_id) if dispatch_queue is not None else None
    if job is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No email dispatch recorded for this notification",
        )
    return DispatchJobRead(
        notification_id=job.notification_id,
        status=job.status.value,
        enqueued_at=job.enqueued_at,
        started_at=job.started_at,
        finished_at=job.finished_at,
        report=DispatchReportRead.model_validate(job.report) if job.report else None,
        error=job.error,
    )
