"""Utility helpers for sending transactional email notifications via SendGrid."""

from __future__ import annotations

import json
import logging
from html import escape
from typing import Any

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from college_portal.config import get_settings

logger = logging.getLogger(__name__)


def _extract_sendgrid_error_details(body: Any) -> str | None:
    """Return a human readable description for a SendGrid error payload."""

    if body in (None, ""):
        return None

    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            return None

    if isinstance(body, str):
        body = body.strip()
        if not body:
            return None
        try:
            parsed = json.loads(body)
        except json.JSONDecodeError:
            return body
    else:
        parsed = body

    if isinstance(parsed, dict):
        errors = parsed.get("errors")
        if isinstance(errors, list):
            messages: list[str] = []
            for item in errors:
                if not isinstance(item, dict):
                    continue
                message = item.get("message")
                field = item.get("field")
                if message and field:
                    messages.append(f"{field}: {message}")
                elif message:
                    messages.append(str(message))
            if messages:
                return "; ".join(messages)
        try:
            return json.dumps(parsed)
        except (TypeError, ValueError):
            return None

    if isinstance(parsed, list):
        return "; ".join(str(item) for item in parsed)

    return None


def _log_sendgrid_exception(exc: Exception, recipient: str) -> None:
    """Log a SendGrid API error with helpful troubleshooting details."""

    status_code = getattr(exc, "status_code", None)
    details = _extract_sendgrid_error_details(getattr(exc, "body", None))

    if status_code and details:
        logger.error(
            "SendGrid request for %s failed with status %s: %s",
            recipient,
            status_code,
            details,
        )
    elif status_code:
        logger.error("SendGrid request for %s failed with status %s", recipient, status_code)
    elif details:
        logger.error("SendGrid request for %s failed: %s", recipient, details)
    else:
        logger.exception("Error sending email to %s via SendGrid: %s", recipient, exc)


def send_email(subject: str, html_content: str, recipient: str) -> bool:
    """Send an email using the configured SendGrid credentials."""

    settings = get_settings()
    if not (settings.sendgrid_api_key and settings.sendgrid_sender):
        logger.info("SendGrid configuration incomplete; skipping email to %s", recipient)
        return False

    message = Mail(
        from_email=settings.sendgrid_sender,
        to_emails=recipient,
        subject=subject,
        html_content=html_content,
    )

    try:
        client = SendGridAPIClient(settings.sendgrid_api_key)
        response = client.send(message)
    except Exception as exc:  # pragma: no cover - network failures depend on environment
        _log_sendgrid_exception(exc, recipient)
        return False

    status_code = getattr(response, "status_code", None)
    if not isinstance(status_code, int) or not 200 <= status_code < 300:
        details = _extract_sendgrid_error_details(getattr(response, "body", None))
        logger.error(
            "SendGrid responded with status %s for %s%s",
            status_code,
            recipient,
            f": {details}" if details else "",
        )
        return False

    return True


def render_notification_email(title: str, message: str, name: str) -> tuple[str, str]:
    """Return the subject and HTML body announcing a new notification."""

    settings = get_settings()
    college = escape(settings.college_name)
    login_url = escape(f"{settings.frontend_url.rstrip('/')}/login", quote=True)
    subject = f"{title} - {settings.college_name}"
    html_content = "".join(
        (
            '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">',
            f'<h1 style="color: #007bff;">{college}</h1>',
            f"<h2>{escape(title)}</h2>",
            f"<p>Hi {escape(name)},</p>",
            '<div style="padding: 20px; border-left: 4px solid #007bff;">',
            escape(message).replace("\n", "<br>"),
            "</div>",
            "<p>For more details, please log in to your account on the portal.</p>",
            f'<p><a href="{login_url}">Login to Portal</a></p>',
            "<p>This is an automated message. Please do not reply to this email.</p>",
            "</div>",
        )
    )
    return subject, html_content


def send_notification_email(email: str, title: str, message: str, name: str) -> bool:
    """Email ``name`` at ``email`` about a newly published notification."""

    subject, html_content = render_notification_email(title, message, name)
    return send_email(subject, html_content, email)


__all__ = [
    "render_notification_email",
    "send_email",
    "send_notification_email",
]
