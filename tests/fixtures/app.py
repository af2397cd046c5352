"""HTTP application fixtures."""

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from src.storefront.api.http.app import app
from src.storefront.api.http.app_data import ApplicationDependencies
from src.storefront.core.backend import InMemoryBackend
from src.storefront.core.services import SubmissionGuard, UserSessionService
from tests.utils import ADMIN_EMAIL, ADMIN_PASSWORD


@pytest.fixture
def app_dependencies(
    seeded_backend: InMemoryBackend,
    session_service: UserSessionService,
    submission_guard: SubmissionGuard,
) -> ApplicationDependencies:
    return ApplicationDependencies(
        backend=seeded_backend,
        user_session_service=session_service,
        submission_guard=submission_guard,
    )


@pytest.fixture(name="client")
def client_fixture(app_dependencies: ApplicationDependencies) -> Generator[TestClient, None, None]:
    """Test client wired to the in-memory dependencies. Redirects are not followed."""
    app.state.app_dependencies = app_dependencies
    try:
        with TestClient(app, follow_redirects=False) as client:
            yield client
    finally:
        del app.state.app_dependencies


@pytest.fixture
def admin_client(client: TestClient) -> TestClient:
    """Test client carrying a signed-in session cookie."""
    response = client.post("/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert response.status_code == 303
    return client
