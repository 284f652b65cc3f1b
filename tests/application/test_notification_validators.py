from __future__ import annotations

import pytest

from college_portal.application.use_cases.notifications.validators import (
    validate_notification_fields,
)
from college_portal.domain.exceptions import ValidationError


def _fields(error: ValidationError) -> set[str]:
    return {item.field for item in error.errors}


def test_valid_payload_is_cleaned() -> None:
    cleaned = validate_notification_fields(
        {
            "title": "  Sports day  ",
            "message": "Sports day will be held on the main ground.",
            "notification_type": "event",
            "priority": "high",
            "target_audience": ["students", "students", "teachers"],
            "target_departments": [" CSE ", "CSE", "ECE"],
            "target_semesters": [7, 2, 5, 2],
        }
    )

    assert cleaned["title"] == "Sports day"
    assert cleaned["target_audience"] == ["students", "teachers"]
    assert cleaned["target_departments"] == ["CSE", "ECE"]
    assert cleaned["target_semesters"] == [2, 5, 7]


def test_every_violation_is_reported_together() -> None:
    with pytest.raises(ValidationError) as excinfo:
        validate_notification_fields(
            {
                "title": "Hey",
                "message": "short",
                "notification_type": "gossip",
                "priority": "extreme",
                "target_audience": [],
            }
        )

    assert _fields(excinfo.value) == {"title", "message", "type", "priority", "target_audience"}


@pytest.mark.parametrize("semester", [0, 9, True, "3"])
def test_out_of_range_semesters_are_rejected(semester) -> None:
    with pytest.raises(ValidationError) as excinfo:
        validate_notification_fields({"target_semesters": [1, semester]})

    assert _fields(excinfo.value) == {"target_semesters[1]"}


def test_unknown_audience_is_rejected() -> None:
    with pytest.raises(ValidationError) as excinfo:
        validate_notification_fields({"target_audience": ["parents"]})

    assert _fields(excinfo.value) == {"target_audience[0]"}


def test_only_present_fields_are_checked() -> None:
    assert validate_notification_fields({"expires_at": None}) == {"expires_at": None}
    assert validate_notification_fields({}) == {}


def test_title_length_bounds() -> None:
    assert validate_notification_fields({"title": "x" * 100})["title"] == "x" * 100
    with pytest.raises(ValidationError):
        validate_notification_fields({"title": "x" * 101})
