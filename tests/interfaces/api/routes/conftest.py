from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from college_portal.infrastructure.database import get_db
from college_portal.interfaces.api.dependencies import get_dispatch_queue
from college_portal.main import create_app


@pytest.fixture()
def client(session_factory, dispatch_queue):
    """Return a test client whose requests use the in-memory test database."""

    app = create_app()

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_dispatch_queue] = lambda: dispatch_queue

    with TestClient(app) as test_client:
        yield test_client
