"""In-process job queue that runs notification email fan-outs off the request path."""

from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

import anyio
from sqlalchemy.orm import Session

from college_portal.config import Settings
from college_portal.domain.entities import Notification
from college_portal.infrastructure.repositories import NotificationRepository
from college_portal.utils import portal_now

from .dispatcher import (
    DispatchReport,
    NotificationEmailDispatcher,
    database_recipient_resolver,
    sendgrid_transport,
)

logger = logging.getLogger(__name__)

_MAX_TRACKED_JOBS = 1000

NotificationLoader = Callable[[int], Awaitable[Notification | None]]


class DispatchJobStatus(str, Enum):
    QUEUED = "queued"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class DispatchJob:
    """Tracks one email fan-out, keyed by the notification it announces."""

    notification_id: int
    status: DispatchJobStatus = DispatchJobStatus.QUEUED
    enqueued_at: datetime | None = None
    started_at: datetime | None = None
    finished_at: datetime | None = None
    report: DispatchReport | None = None
    error: str | None = None


class NotificationDispatchQueue:
    """Hand notification ids from request handlers to a background worker.

    ``enqueue`` may be called from the event loop or from the worker threads
    that serve synchronous routes. Jobs are processed one at a time in the
    order they were enqueued and remain inspectable after they finish.
    """

    def __init__(
        self,
        dispatcher: NotificationEmailDispatcher,
        *,
        load_notification: NotificationLoader,
    ) -> None:
        self._dispatcher = dispatcher
        self._load_notification = load_notification
        self._jobs: OrderedDict[int, DispatchJob] = OrderedDict()
        self._queue: asyncio.Queue[DispatchJob] | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._worker: asyncio.Task[None] | None = None

    @property
    def is_running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    async def start(self) -> None:
        if self.is_running:
            return
        self._loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue()
        for job in self._jobs.values():
            if job.status is DispatchJobStatus.QUEUED:
                self._queue.put_nowait(job)
        self._worker = asyncio.create_task(self._run(), name="notification-email-dispatch")
        logger.info("Notification email dispatch worker started")

    async def stop(self) -> None:
        worker = self._worker
        self._worker = None
        if worker is None:
            return
        worker.cancel()
        try:
            await worker
        except asyncio.CancelledError:
            pass
        logger.info("Notification email dispatch worker stopped")

    async def join(self) -> None:
        """Wait until every job enqueued so far has been processed."""

        if self._queue is not None:
            await self._queue.join()

    def enqueue(self, notification_id: int) -> DispatchJob:
        job = DispatchJob(notification_id=notification_id, enqueued_at=portal_now())
        self._track(job)

        if self._queue is None or self._loop is None or not self.is_running:
            logger.warning(
                "Dispatch worker is not running; email job for notification %s waits for start",
                notification_id,
            )
            return job

        try:
            running_loop = asyncio.get_running_loop()
        except RuntimeError:
            running_loop = None

        if running_loop is self._loop:
            self._queue.put_nowait(job)
        else:
            self._loop.call_soon_threadsafe(self._queue.put_nowait, job)
        return job

    def get_job(self, notification_id: int) -> DispatchJob | None:
        return self._jobs.get(notification_id)

    def _track(self, job: DispatchJob) -> None:
        self._jobs.pop(job.notification_id, None)
        self._jobs[job.notification_id] = job
        while len(self._jobs) > _MAX_TRACKED_JOBS:
            self._jobs.popitem(last=False)

    async def _run(self) -> None:
        assert self._queue is not None
        while True:
            job = await self._queue.get()
            try:
                await self._process(job)
            finally:
                self._queue.task_done()

    async def _process(self, job: DispatchJob) -> None:
        job.status = DispatchJobStatus.RUNNING
        job.started_at = portal_now()
        try:
            notification = await self._load_notification(job.notification_id)
            if notification is None:
                job.status = DispatchJobStatus.FAILED
                job.error = "Notification no longer exists"
                logger.warning(
                    "Skipping email dispatch: notification %s no longer exists",
                    job.notification_id,
                )
                return
            job.report = await self._dispatcher.dispatch(notification)
            job.status = DispatchJobStatus.COMPLETED
        except asyncio.CancelledError:
            job.status = DispatchJobStatus.FAILED
            job.error = "Cancelled at shutdown"
            logger.warning(
                "Email dispatch for notification %s cancelled at shutdown",
                job.notification_id,
            )
            raise
        except Exception as exc:
            job.status = DispatchJobStatus.FAILED
            job.error = str(exc) or type(exc).__name__
            logger.exception(
                "Email dispatch for notification %s failed", job.notification_id
            )
        finally:
            job.finished_at = portal_now()


def database_notification_loader(
    session_factory: Callable[[], Session],
    *,
    limiter: anyio.CapacityLimiter | None = None,
) -> NotificationLoader:
    """Build a loader that reads a notification in a worker thread."""

    def _load(notification_id: int) -> Notification | None:
        session = session_factory()
        try:
            return NotificationRepository(session).get(notification_id)
        finally:
            session.close()

    async def load(notification_id: int) -> Notification | None:
        return await anyio.to_thread.run_sync(_load, notification_id, limiter=limiter)

    return load


def build_dispatch_queue(
    session_factory: Callable[[], Session], settings: Settings
) -> NotificationDispatchQueue:
    """Wire the production dispatcher (database recipients, SendGrid transport)."""

    # Delivery threads come from their own pool, not the default one request
    # handlers share.
    limiter = anyio.CapacityLimiter(settings.email_batch_size)
    dispatcher = NotificationEmailDispatcher(
        resolve_recipients=database_recipient_resolver(session_factory, limiter=limiter),
        send=sendgrid_transport(limiter),
        batch_size=settings.email_batch_size,
        batch_delay=settings.email_batch_delay_seconds,
    )
    return NotificationDispatchQueue(
        dispatcher,
        load_notification=database_notification_loader(session_factory, limiter=limiter),
    )


__all__ = [
    "DispatchJob",
    "DispatchJobStatus",
    "NotificationDispatchQueue",
    "build_dispatch_queue",
    "database_notification_loader",
]
