from __future__ import annotations

from datetime import datetime, timezone
from zoneinfo import available_timezones

import pytest

from college_portal.config import reset_settings_cache
from college_portal.utils import from_storage, portal_now, to_storage


def test_defaults_to_utc() -> None:
    assert portal_now().utcoffset() == timezone.utc.utcoffset(None)


@pytest.mark.skipif(
    "Asia/Kolkata" not in available_timezones(), reason="no timezone database"
)
def test_storage_round_trip_in_configured_zone(monkeypatch) -> None:
    monkeypatch.setenv("APP_TIMEZONE", "Asia/Kolkata")
    reset_settings_cache()

    moment = datetime(2024, 3, 1, 4, 0, tzinfo=timezone.utc)
    stored = to_storage(moment)

    assert stored == datetime(2024, 3, 1, 9, 30)
    assert from_storage(stored) == moment
    assert from_storage(None) is None and to_storage(None) is None


def test_unknown_zone_falls_back_to_utc(monkeypatch, caplog) -> None:
    monkeypatch.setenv("APP_TIMEZONE", "Mars/Olympus_Mons")
    reset_settings_cache()

    with caplog.at_level("WARNING", logger="college_portal.utils.clock"):
        assert portal_now().utcoffset() == timezone.utc.utcoffset(None)
    assert "Mars/Olympus_Mons" in caplog.text
