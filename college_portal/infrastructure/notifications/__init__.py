"""Email fan-out helpers for the infrastructure layer."""

from .dispatcher import (
    DispatchReport,
    NotificationEmailDispatcher,
    database_recipient_resolver,
    sendgrid_transport,
)
from .queue import (
    DispatchJob,
    DispatchJobStatus,
    NotificationDispatchQueue,
    build_dispatch_queue,
    database_notification_loader,
)

__all__ = [
    "DispatchJob",
    "DispatchJobStatus",
    "DispatchReport",
    "NotificationDispatchQueue",
    "NotificationEmailDispatcher",
    "build_dispatch_queue",
    "database_notification_loader",
    "database_recipient_resolver",
    "sendgrid_transport",
]
