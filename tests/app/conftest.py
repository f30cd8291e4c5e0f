from datetime import datetime, timezone
from unittest.mock import MagicMock
from uuid import UUID

import pytest
from fastapi.testclient import TestClient

from tonnage.app.app import app
from tonnage.app.dependencies import get_storage, get_sync_orchestrator
from tonnage.db import Storage
from tonnage.models import HevyConnection
from tonnage.models.user import User
from tonnage.sync import SyncOrchestrator


TEST_TOKEN = "test-access-token"
TEST_USER = User(
    id=UUID("11111111-2222-3333-4444-555555555555"),
    idp_user_id=UUID("aaaaaaaa-bbbb-cccc-dddd-eeeeeeeeeeee"),
    email="lifter@example.com",
    username="lifter",
    created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    updated_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
)
TEST_CLAIMS = {
    "sub": str(TEST_USER.idp_user_id),
    "email": TEST_USER.email,
    "username": TEST_USER.username,
}


@pytest.fixture
def storage() -> MagicMock:
    return MagicMock(spec=Storage)


@pytest.fixture
def orchestrator() -> MagicMock:
    return MagicMock(spec=SyncOrchestrator)


@pytest.fixture
def connection() -> HevyConnection:
    return HevyConnection(
        user_id=TEST_USER.id,
        api_key="hevy-secret-key-9876",
        goal_lb=3_000_000,
        selected_year=2024,
        last_sync_at=datetime(2024, 6, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def client(storage, orchestrator):
    """A client without credentials. Storage and sync are mocked."""
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_sync_orchestrator] = lambda: orchestrator
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_client(client, monkeypatch):
    """A client that sends a bearer token accepted as TEST_USER."""

    def validate(token):
        return TEST_CLAIMS if token == TEST_TOKEN else None

    get_or_create_user = MagicMock(return_value=TEST_USER)
    monkeypatch.setattr("tonnage.app.oauth.validate_jwt_token", validate)
    monkeypatch.setattr("tonnage.app.oauth.get_or_create_user", get_or_create_user)
    client.headers["Authorization"] = f"Bearer {TEST_TOKEN}"
    return client
