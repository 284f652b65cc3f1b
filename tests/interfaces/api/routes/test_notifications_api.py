"""Integration tests for the notification endpoints."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from college_portal.application.use_cases.notifications import upload_attachments
from college_portal.config import reset_settings_cache
from college_portal.domain.entities import Attachment
from college_portal.domain.exceptions import StorageError
from college_portal.infrastructure.notifications import DispatchJobStatus, DispatchReport
from college_portal.interfaces.api.routes import notifications as notifications_routes


@pytest.fixture()
def teacher(add_user):
    return add_user("teacher", department="CSE", name="Prof. Rao")


@pytest.fixture()
def student(add_user):
    return add_user("student", department="CSE", semester=5)


def _create(client: TestClient, headers, **overrides):
    payload = {
        "title": "Mid-term exams",
        "message": "Mid-term exams start next Monday at 9 AM.",
    }
    payload.update(overrides)
    return client.post("/notifications/", json=payload, headers=headers)


def test_create_then_fetch_round_trip(
    client: TestClient, auth_headers, teacher, student, dispatch_queue
) -> None:
    response = _create(
        client,
        auth_headers(teacher),
        type="academic",
        priority="high",
        target_audience=["students"],
        target_departments=["CSE"],
        target_semesters=[7, 2, 5],
        attachments=[
            {
                "file_name": "schedule.pdf",
                "file_url": "https://blobs/schedule.pdf",
                "file_type": "application/pdf",
                "file_size": 2048,
            }
        ],
    )

    assert response.status_code == 201
    created = response.json()
    assert created["type"] == "academic"
    assert created["created_by_name"] == "Prof. Rao"
    assert dispatch_queue.enqueued == [created["id"]]

    fetched = client.get(f"/notifications/{created['id']}", headers=auth_headers(student))

    assert fetched.status_code == 200
    body = fetched.json()
    assert set(body["target_semesters"]) == {2, 5, 7}
    assert body["attachments"][0]["file_name"] == "schedule.pdf"
    assert body["is_read"] is False


def test_create_validation_errors_use_field_list(client, auth_headers, teacher) -> None:
    response = _create(client, auth_headers(teacher), title="Hey", target_audience=[])

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Validation failed"
    assert {error["field"] for error in body["errors"]} == {"title", "target_audience"}


def test_students_cannot_create(client, auth_headers, student, dispatch_queue) -> None:
    response = _create(client, auth_headers(student))

    assert response.status_code == 403
    assert dispatch_queue.enqueued == []


def test_create_without_email_dispatch(
    client, auth_headers, teacher, dispatch_queue, monkeypatch
) -> None:
    monkeypatch.setenv("ENABLE_EMAIL_NOTIFICATIONS", "false")
    reset_settings_cache()

    response = _create(client, auth_headers(teacher))

    assert response.status_code == 201
    assert dispatch_queue.enqueued == []


def test_requests_without_token_are_rejected(client) -> None:
    assert client.get("/notifications/").status_code == 401
    assert (
        client.get("/notifications/", headers={"Authorization": "Bearer not-a-jwt"}).status_code
        == 401
    )


def test_listing_returns_visible_page_and_counts_views(
    client, auth_headers, teacher, student
) -> None:
    headers = auth_headers(teacher)
    for index in range(5):
        _create(client, headers, title=f"Notice number {index}")
    _create(client, headers, title="Teachers only", target_audience=["teachers"])

    first = client.get("/notifications/", headers=auth_headers(student))
    second = client.get("/notifications/", headers=auth_headers(student))

    assert first.status_code == 200
    body = first.json()
    assert len(body["notifications"]) == 5
    assert body["pagination"] == {
        "current_page": 1,
        "total_pages": 1,
        "total_notifications": 5,
        "has_next_page": False,
        "has_prev_page": False,
    }
    assert {item["view_count"] for item in body["notifications"]} == {0}
    assert {item["view_count"] for item in second.json()["notifications"]} == {1}


def test_listing_filter_validation(client, auth_headers, student) -> None:
    response = client.get(
        "/notifications/", params={"limit": 100, "type": "party"}, headers=auth_headers(student)
    )

    assert response.status_code == 400
    assert {error["field"] for error in response.json()["errors"]} == {"limit", "type"}


def test_mark_read_and_unread_count(client, auth_headers, teacher, student) -> None:
    created = _create(client, auth_headers(teacher)).json()
    _create(client, auth_headers(teacher), title="Another notice")
    headers = auth_headers(student)

    assert client.get("/notifications/unread-count", headers=headers).json() == {
        "unread_count": 2
    }

    first = client.post(f"/notifications/{created['id']}/read", headers=headers)
    again = client.post(f"/notifications/{created['id']}/read", headers=headers)

    assert first.status_code == 200 and first.json()["newly_read"] is True
    assert again.status_code == 200 and again.json()["newly_read"] is False
    assert client.get("/notifications/unread-count", headers=headers).json() == {
        "unread_count": 1
    }
    unread = client.get("/notifications/", params={"unread_only": True}, headers=headers).json()
    assert [item["title"] for item in unread["notifications"]] == ["Another notice"]
    fetched = client.get(f"/notifications/{created['id']}", headers=headers).json()
    assert fetched["is_read"] is True


def test_missing_and_hidden_notifications(client, auth_headers, teacher, student) -> None:
    hidden = _create(client, auth_headers(teacher), target_audience=["teachers"]).json()
    headers = auth_headers(student)

    assert client.get("/notifications/9999", headers=headers).status_code == 404
    assert client.post("/notifications/9999/read", headers=headers).status_code == 404
    assert client.get(f"/notifications/{hidden['id']}", headers=headers).status_code == 403


def test_update_and_delete_permissions(client, auth_headers, add_user, teacher) -> None:
    created = _create(client, auth_headers(teacher), expires_at="2999-01-01T00:00:00Z").json()
    other = add_user("teacher", department="ECE")
    url = f"/notifications/{created['id']}"

    assert client.put(url, json={"priority": "low"}, headers=auth_headers(other)).status_code == 403
    assert client.delete(url, headers=auth_headers(other)).status_code == 403

    updated = client.put(
        url,
        json={
            "priority": "critical",
            "expires_at": None,
            "new_attachments": [{"file_name": "map.png", "file_url": "https://blobs/map.png"}],
        },
        headers=auth_headers(teacher),
    )
    assert updated.status_code == 200
    body = updated.json()
    assert body["priority"] == "critical"
    assert body["expires_at"] is None
    assert [item["file_name"] for item in body["attachments"]] == ["map.png"]

    assert client.delete(url, headers=auth_headers(teacher)).status_code == 204
    assert client.get(url, headers=auth_headers(teacher)).status_code == 404


def test_update_rejects_invalid_values(client, auth_headers, teacher) -> None:
    created = _create(client, auth_headers(teacher)).json()

    response = client.put(
        f"/notifications/{created['id']}",
        json={"target_semesters": [0]},
        headers=auth_headers(teacher),
    )

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "target_semesters[0]"


def test_stats_overview_is_admin_only(client, auth_headers, add_user, teacher) -> None:
    admin = add_user("admin", department=None)
    _create(client, auth_headers(teacher), type="event")
    _create(client, auth_headers(admin), type="event", priority="critical")
    _create(client, auth_headers(admin), type="urgent", priority="critical")

    assert client.get("/notifications/stats/overview", headers=auth_headers(teacher)).status_code == 403

    response = client.get("/notifications/stats/overview", headers=auth_headers(admin))

    assert response.status_code == 200
    body = response.json()
    assert body["total_notifications"] == 3
    assert body["active_notifications"] == 3
    assert body["recent_notifications"] == 3
    assert body["notifications_by_type"] == [
        {"name": "event", "count": 2},
        {"name": "urgent", "count": 1},
    ]
    assert body["notifications_by_priority"] == [
        {"name": "critical", "count": 2},
        {"name": "medium", "count": 1},
    ]


def test_dispatch_job_inspection(client, auth_headers, add_user, teacher, dispatch_queue) -> None:
    admin = add_user("admin", department=None)
    created = _create(client, auth_headers(teacher)).json()
    job = dispatch_queue.get_job(created["id"])
    job.status = DispatchJobStatus.COMPLETED
    job.report = DispatchReport(
        notification_id=created["id"], recipients=3, batches=1, sent=2, failed=["x@example.com"]
    )

    url = f"/notifications/{created['id']}/dispatch"
    assert client.get(url, headers=auth_headers(teacher)).status_code == 403

    response = client.get(url, headers=auth_headers(admin))

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "completed"
    assert body["report"] == {"recipients": 3, "batches": 1, "sent": 2, "failed": ["x@example.com"]}
    assert client.get("/notifications/9999/dispatch", headers=auth_headers(admin)).status_code == 404


def test_upload_attachments(client, auth_headers, teacher, student, monkeypatch) -> None:
    def fake_upload(files, *, uploader):
        return upload_attachments(
            files,
            uploader=uploader,
            store=lambda name, data, content_type=None: Attachment(
                file_name=name,
                file_url=f"https://blobs/{name}",
                file_type=content_type,
                file_size=len(data),
            ),
        )

    monkeypatch.setattr(notifications_routes, "upload_attachments_uc", fake_upload)
    files = [("files", ("notes.txt", b"hello", "text/plain"))]

    response = client.post("/notifications/attachments", files=files, headers=auth_headers(teacher))

    assert response.status_code == 201
    assert response.json() == [
        {
            "file_name": "notes.txt",
            "file_url": "https://blobs/notes.txt",
            "file_type": "text/plain",
            "file_size": 5,
        }
    ]
    assert (
        client.post(
            "/notifications/attachments", files=files, headers=auth_headers(student)
        ).status_code
        == 403
    )


def test_storage_failure_maps_to_service_unavailable(
    client, auth_headers, teacher, monkeypatch
) -> None:
    def failing_upload(files, *, uploader):
        raise StorageError("Azure storage connection string is not configured")

    monkeypatch.setattr(notifications_routes, "upload_attachments_uc", failing_upload)

    response = client.post(
        "/notifications/attachments",
        files=[("files", ("notes.txt", b"hello", "text/plain"))],
        headers=auth_headers(teacher),
    )

    assert response.status_code == 503
