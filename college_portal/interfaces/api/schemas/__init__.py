from .auth import Token
from .notification import (
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
    "Token",
    "UnreadCountRead",
]
