# backend/tests/conftest.py

from __future__ import annotations

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from taskhub.core.config import Settings
from taskhub.core.database import Database
from taskhub.core.security import CredentialService
from taskhub.main import create_app
from taskhub.services.auth_service import AuthService
from taskhub.services.task_service import TaskService

TEST_DATABASE_URL = "sqlite+aiosqlite://"
TEST_SECRET = "test-secret-key"


@pytest.fixture()
def settings() -> Settings:
    """Settings pointed at a throwaway in-memory database."""
    return Settings(
        DATABASE_URL=TEST_DATABASE_URL,
        SECRET_KEY=TEST_SECRET,
        ALLOWED_ORIGINS=["http://localhost:3000"],
    )


@pytest.fixture()
def client(settings: Settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest_asyncio.fixture()
async def database():
    db = Database(TEST_DATABASE_URL)
    await db.connect()
    try:
        yield db
    finally:
        await db.close()


@pytest.fixture()
def credentials() -> CredentialService:
    return CredentialService(TEST_SECRET)


@pytest.fixture()
def task_service(database: Database) -> TaskService:
    return TaskService(database.tasks)


@pytest.fixture()
def auth_service(database: Database, credentials: CredentialService) -> AuthService:
    return AuthService(database.users, credentials)
