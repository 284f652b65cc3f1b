"""Portal clock and the conversions between stored and domain datetimes.

Database columns hold naive wall-clock values in the portal timezone
(``APP_TIMEZONE``); the domain layer only ever sees aware datetimes.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone, tzinfo
from functools import lru_cache

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from college_portal.config import get_settings

logger = logging.getLogger(__name__)


@lru_cache(maxsize=8)
def _zone(name: str) -> tzinfo:
    name = name.strip()
    if name.upper() in ("", "UTC"):
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown APP_TIMEZONE %r; timestamps will use UTC", name)
        return timezone.utc


def _portal_timezone() -> tzinfo:
    return _zone(get_settings().app_timezone)


def portal_now() -> datetime:
    return datetime.now(tz=_portal_timezone())


def portal_now_naive() -> datetime:
    """Column default: the current portal wall-clock time."""

    return to_storage(portal_now())


def from_storage(value: datetime | None) -> datetime | None:
    """Attach the portal timezone to a stored value (or convert an aware one)."""

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=_portal_timezone())
    return value.astimezone(_portal_timezone())


def to_storage(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    return from_storage(value).replace(tzinfo=None)
