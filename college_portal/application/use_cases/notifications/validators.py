"""Input validation shared by notification create and update use cases."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from college_portal.domain.entities import (
    MAX_SEMESTER,
    MIN_SEMESTER,
    NOTIFICATION_PRIORITIES,
    NOTIFICATION_TYPES,
    TARGET_AUDIENCES,
)
from college_portal.domain.exceptions import FieldError, ValidationError

TITLE_MIN_LENGTH = 5
TITLE_MAX_LENGTH = 100
MESSAGE_MIN_LENGTH = 10
MESSAGE_MAX_LENGTH = 1000


def validate_notification_fields(values: Mapping[str, Any]) -> dict[str, Any]:
    """Return cleaned copies of the notification fields present in ``values``.

    Only keys that are present are checked, so the same rules serve full
    creation payloads and partial updates. Every problem is collected and
    raised together as a :class:`ValidationError`.
    """

    errors: list[FieldError] = []
    cleaned: dict[str, Any] = {}

    if "title" in values:
        cleaned["title"] = _clean_text(
            values["title"], "title", TITLE_MIN_LENGTH, TITLE_MAX_LENGTH, errors
        )
    if "message" in values:
        cleaned["message"] = _clean_text(
            values["message"], "message", MESSAGE_MIN_LENGTH, MESSAGE_MAX_LENGTH, errors
        )
    if "notification_type" in values:
        cleaned["notification_type"] = _clean_choice(
            values["notification_type"], "type", NOTIFICATION_TYPES, errors
        )
    if "priority" in values:
        cleaned["priority"] = _clean_choice(
            values["priority"], "priority", NOTIFICATION_PRIORITIES, errors
        )
    if "target_audience" in values:
        cleaned["target_audience"] = _clean_audience(values["target_audience"], errors)
    if "target_departments" in values:
        cleaned["target_departments"] = _clean_departments(
            values["target_departments"], errors
        )
    if "target_semesters" in values:
        cleaned["target_semesters"] = _clean_semesters(values["target_semesters"], errors)
    if "expires_at" in values:
        expires_at = values["expires_at"]
        if expires_at is not None and not isinstance(expires_at, datetime):
            errors.append(FieldError("expires_at", "Invalid expiration date"))
        cleaned["expires_at"] = expires_at
    if "is_active" in values:
        if not isinstance(values["is_active"], bool):
            errors.append(FieldError("is_active", "is_active must be a boolean"))
        cleaned["is_active"] = values["is_active"]

    if errors:
        raise ValidationError(errors)
    return cleaned


def _clean_text(
    value: Any, field: str, min_length: int, max_length: int, errors: list[FieldError]
) -> str:
    if not isinstance(value, str):
        errors.append(FieldError(field, f"{field.capitalize()} must be a string"))
        return ""
    text = value.strip()
    if not min_length <= len(text) <= max_length:
        errors.append(
            FieldError(
                field,
                f"{field.capitalize()} must be between {min_length} and {max_length} characters",
            )
        )
    return text


def _clean_choice(
    value: Any, field: str, choices: tuple[str, ...], errors: list[FieldError]
) -> str:
    if value not in choices:
        errors.append(FieldError(field, f"Invalid {field}; expected one of {', '.join(choices)}"))
    return value


def _clean_audience(value: Any, errors: list[FieldError]) -> list[str]:
    if not isinstance(value, (list, tuple, set, frozenset)) or not value:
        errors.append(
            FieldError(
                "target_audience",
                "Target audience must be an array with at least one item",
            )
        )
        return []
    audience: list[str] = []
    for index, item in enumerate(value):
        if item not in TARGET_AUDIENCES:
            errors.append(FieldError(f"target_audience[{index}]", "Invalid target audience"))
        elif item not in audience:
            audience.append(item)
    return audience


def _clean_departments(value: Any, errors: list[FieldError]) -> list[str]:
    if not isinstance(value, (list, tuple, set, frozenset)):
        errors.append(FieldError("target_departments", "Target departments must be an array"))
        return []
    departments: list[str] = []
    for index, item in enumerate(value):
        name = item.strip() if isinstance(item, str) else ""
        if not name:
            errors.append(
                FieldError(f"target_departments[{index}]", "Department must be a non-empty string")
            )
        elif name not in departments:
            departments.append(name)
    return departments


def _clean_semesters(value: Any, errors: list[FieldError]) -> list[int]:
    if not isinstance(value, (list, tuple, set, frozenset)):
        errors.append(FieldError("target_semesters", "Target semesters must be an array"))
        return []
    semesters: set[int] = set()
    for index, item in enumerate(value):
        if isinstance(item, bool) or not isinstance(item, int):
            errors.append(FieldError(f"target_semesters[{index}]", "Invalid semester"))
        elif not MIN_SEMESTER <= item <= MAX_SEMESTER:
            errors.append(
                FieldError(
                    f"target_semesters[{index}]",
                    f"Semester must be between {MIN_SEMESTER} and {MAX_SEMESTER}",
                )
            )
        else:
            semesters.add(item)
    return sorted(semesters)


__all__ = [
    "MESSAGE_MAX_LENGTH",
    "MESSAGE_MIN_LENGTH",
    "TITLE_MAX_LENGTH",
    "TITLE_MIN_LENGTH",
    "validate_notification_fields",
]
