"""Integration test fixtures.

Integration tests run the real services against a real SQLite file in
``tmp_path``; nothing below the HTTP layer is mocked.
"""

from typing import Any

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from taskboard.models import UserRecord
from taskboard.security import PasswordHasher
from taskboard.storage import UserRepository
from tests.fixtures import DEFAULT_PASSWORD, ApiUser, UserFactory, sign_up_and_in


@pytest_asyncio.fixture
async def alice(user_repo: UserRepository, hasher: PasswordHasher) -> UserRecord:
    return await user_repo.insert(UserFactory.create(password_hash=hasher.hash(DEFAULT_PASSWORD)))


@pytest_asyncio.fixture
async def bob(user_repo: UserRepository, hasher: PasswordHasher) -> UserRecord:
    return await user_repo.insert(UserFactory.create(password_hash=hasher.hash(DEFAULT_PASSWORD)))


@pytest_asyncio.fixture
async def carol(user_repo: UserRepository, hasher: PasswordHasher) -> UserRecord:
    return await user_repo.insert(UserFactory.create(password_hash=hasher.hash(DEFAULT_PASSWORD)))


@pytest.fixture
def api_users(client: TestClient):
    """Factory fixture: ``api_users(n)`` returns ``n`` signed-in accounts."""

    def make(count: int = 1, **overrides: Any) -> list[ApiUser]:
        return [sign_up_and_in(client, **overrides) for _ in range(count)]

    return make
