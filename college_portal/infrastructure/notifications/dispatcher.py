"""Batched email fan-out for newly created notifications."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field

import anyio
from sqlalchemy.orm import Session

from college_portal.domain.entities import Notification, User
from college_portal.domain.exceptions import EmailDeliveryError
from college_portal.infrastructure.email import send_notification_email
from college_portal.infrastructure.repositories import UserRepository

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 50
DEFAULT_BATCH_DELAY_SECONDS = 1.0

RecipientResolver = Callable[[Notification], Awaitable[Sequence[User]]]
EmailTransport = Callable[[User, Notification], Awaitable[None]]
Sleeper = Callable[[float], Awaitable[None]]


@dataclass
class DispatchReport:
    """Outcome of a single fan-out run."""

    notification_id: int | None
    recipients: int = 0
    batches: int = 0
    sent: int = 0
    failed: list[str] = field(default_factory=list)


class NotificationEmailDispatcher:
    """Email every user targeted by a notification in rate-limited batches.

    Recipients in the same batch are contacted concurrently. A failed delivery
    is logged and counted but never stops the remaining recipients or batches.
    """

    def __init__(
        self,
        *,
        resolve_recipients: RecipientResolver,
        send: EmailTransport,
        batch_size: int = DEFAULT_BATCH_SIZE,
        batch_delay: float = DEFAULT_BATCH_DELAY_SECONDS,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be a positive integer")
        self._resolve_recipients = resolve_recipients
        self._send = send
        self._batch_size = batch_size
        self._batch_delay = batch_delay
        self._sleep = sleep

    async def dispatch(self, notification: Notification) -> DispatchReport:
        recipients = list(await self._resolve_recipients(notification))
        report = DispatchReport(notification_id=notification.id, recipients=len(recipients))
        logger.info(
            "Emailing notification %s to %d recipient(s)", notification.id, len(recipients)
        )

        for batch in _chunk(recipients, self._batch_size):
            if report.batches:
                await self._sleep(self._batch_delay)
            report.batches += 1
            results = await asyncio.gather(
                *(self._send(recipient, notification) for recipient in batch),
                return_exceptions=True,
            )
            for recipient, result in zip(batch, results):
                if isinstance(result, BaseException):
                    logger.error(
                        "Failed to email notification %s to %s: %s",
                        notification.id,
                        recipient.email,
                        result,
                    )
                    report.failed.append(recipient.email)
                else:
                    report.sent += 1

        logger.info(
            "Finished emailing notification %s: %d sent, %d failed in %d batch(es)",
            notification.id,
            report.sent,
            len(report.failed),
            report.batches,
        )
        return report


def _chunk(items: Sequence[User], size: int) -> list[Sequence[User]]:
    return [items[index : index + size] for index in range(0, len(items), size)]


def database_recipient_resolver(
    session_factory: Callable[[], Session],
    *,
    limiter: anyio.CapacityLimiter | None = None,
) -> RecipientResolver:
    """Build a resolver that queries matching users in a worker thread."""

    def _load(notification: Notification) -> Sequence[User]:
        session = session_factory()
        try:
            return UserRepository(session).list_notification_recipients(notification)
        finally:
            session.close()

    async def resolve(notification: Notification) -> Sequence[User]:
        return await anyio.to_thread.run_sync(_load, notification, limiter=limiter)

    return resolve


def sendgrid_transport(limiter: anyio.CapacityLimiter | None = None) -> EmailTransport:
    """Build a transport that delivers through SendGrid in worker threads.

    Pass a dedicated ``limiter`` so a large batch never takes the threads that
    synchronous request handlers run on.
    """

    async def send(recipient: User, notification: Notification) -> None:
        delivered = await anyio.to_thread.run_sync(
            send_notification_email,
            recipient.email,
            notification.title,
            notification.message,
            recipient.name,
            limiter=limiter,
        )
        if not delivered:
            raise EmailDeliveryError(recipient.email, "transport rejected the message")

    return send


__all__ = [
    "DEFAULT_BATCH_DELAY_SECONDS",
    "DEFAULT_BATCH_SIZE",
    "DispatchReport",
    "EmailTransport",
    "NotificationEmailDispatcher",
    "RecipientResolver",
    "database_recipient_resolver",
    "sendgrid_transport",
]
