import os
from pathlib import Path
from typing import Iterator
from unittest.mock import MagicMock
from uuid import UUID

import pytest
from testcontainers.postgres import PostgresContainer
from alembic.config import Config
from alembic import command
from fastapi.testclient import TestClient

from tonnage.integrations.hevy import HevyClient
from tonnage.models.user import User

# Ensure allowed environment for env_loader
os.environ.setdefault("ENV", "dev")


TEST_IDP_USER_ID = UUID("00000000-0000-0000-0000-000000000002")
TEST_TOKEN = "e2e_token"


@pytest.fixture(scope="session")
def db_url() -> Iterator[str]:
    """Start a Postgres container, run migrations, and return the DB URL."""
    with PostgresContainer("postgres:16") as pg:
        raw_url = pg.get_connection_url()
        # Normalize to psycopg3-compatible URL if needed
        url = raw_url.replace("postgresql+psycopg2://", "postgresql://")
        os.environ["DATABASE_URL"] = url

        api_dir = Path(__file__).resolve().parents[2]
        alembic_cfg = Config(str(api_dir / "alembic.ini"))
        command.upgrade(alembic_cfg, "head")

        yield url


@pytest.fixture(scope="session")
def user(db_url: str) -> User:
    """The signed-in user, created through the real first-login path."""
    from tonnage.db.users import get_or_create_user

    return get_or_create_user(TEST_IDP_USER_ID, "e2e@example.com", "e2e_lifter")


@pytest.fixture(scope="session")
def _mock_oauth(user: User) -> Iterator[None]:
    """Accept TEST_TOKEN as the e2e user. Users still come from the database."""
    from tonnage.app import oauth

    original_validate = oauth.validate_jwt_token

    def mock_validate(token: str) -> dict[str, str] | None:
        if token == TEST_TOKEN:
            return {
                "sub": str(TEST_IDP_USER_ID),
                "email": user.email or "",
                "username": user.username or "",
            }
        return None

    oauth.validate_jwt_token = mock_validate  # type: ignore[assignment]
    yield
    oauth.validate_jwt_token = original_validate


@pytest.fixture(scope="session")
def hevy_client() -> MagicMock:
    """Stands in for Hevy; tests configure its responses."""
    return MagicMock(spec=HevyClient)


@pytest.fixture(scope="session")
def auth_client(db_url: str, _mock_oauth: None, hevy_client: MagicMock):
    from tonnage.app.app import app
    from tonnage.app import dependencies

    original_factory = dependencies.hevy_client_factory
    dependencies.hevy_client_factory = lambda api_key: hevy_client
    client = TestClient(app)
    client.headers = {"Authorization": f"Bearer {TEST_TOKEN}"}
    yield client
    dependencies.hevy_client_factory = original_factory
