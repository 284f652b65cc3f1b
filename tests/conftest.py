"""Shared fixtures for the notification service tests."""

from __future__ import annotations

import itertools
import os

os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENABLE_EMAIL_NOTIFICATIONS", "true")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from college_portal.config import reset_settings_cache
from college_portal.domain.entities import User
from college_portal.infrastructure.database import initialize_database
from college_portal.infrastructure.notifications import DispatchJob
from college_portal.infrastructure.repositories import UserRepository
from college_portal.infrastructure.security import create_access_token, password_signature


class RecordingDispatchQueue:
    """Stand-in for the dispatch queue that only remembers what was enqueued."""

    def __init__(self) -> None:
        self.enqueued: list[int] = []
        self.jobs: dict[int, DispatchJob] = {}

    def enqueue(self, notification_id: int) -> DispatchJob:
        self.enqueued.append(notification_id)
        job = DispatchJob(notification_id=notification_id)
        self.jobs[notification_id] = job
        return job

    def get_job(self, notification_id: int) -> DispatchJob | None:
        return self.jobs.get(notification_id)


@pytest.fixture(autouse=True)
def _fresh_settings():
    reset_settings_cache()
    yield
    reset_settings_cache()


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    initialize_database(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def add_user(session):
    """Return a helper that stores a user with sensible defaults."""

    repository = UserRepository(session)
    counter = itertools.count(1)

    def _add(
        role: str = "student",
        *,
        department: str | None = "CSE",
        semester: int | None = None,
        verified: bool = True,
        active: bool = True,
        name: str | None = None,
        email: str | None = None,
        password: str = "stored-password-hash",
    ) -> User:
        index = next(counter)
        return repository.create(
            User(
                id=None,
                name=name or f"User {index}",
                email=email or f"user{index}@example.com",
                password=password,
                role=role,
                department=department,
                semester=semester,
                is_email_verified=verified,
                is_active=active,
            )
        )

    return _add


@pytest.fixture()
def dispatch_queue() -> RecordingDispatchQueue:
    return RecordingDispatchQueue()


@pytest.fixture()
def auth_headers():
    """Return a helper building bearer headers for a stored user."""

    def _headers(user: User) -> dict[str, str]:
        token = create_access_token(
            {"sub": user.email, "pwd_sig": password_signature(user.password, user.is_active)}
        )
        return {"Authorization": f"Bearer {token}"}

    return _headers
