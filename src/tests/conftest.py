"""Pytest fixtures for the taskboard tests."""

from collections.abc import AsyncGenerator, Generator
from pathlib import Path

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from pydantic import SecretStr

from taskboard.api.http_server import create_app
from taskboard.config import Settings
from taskboard.core.auth_service import AuthService
from taskboard.core.comment_service import CommentService
from taskboard.core.task_service import TaskService
from taskboard.core.user_service import UserService
from taskboard.security import PasswordHasher, TokenService
from taskboard.storage import CommentRepository, Database, TaskRepository, UserRepository
from tests.fixtures import TEST_SECRET


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Create test settings backed by a temporary database file."""
    return Settings(
        database_path=str(tmp_path / "taskboard.db"),
        jwt_secret_key=SecretStr(TEST_SECRET),
        jwt_expiration_minutes=30,
        bcrypt_rounds=4,
        page_default_size=5,
        page_max_size=50,
        log_level="DEBUG",
        log_format="console",
        metrics_enabled=False,
    )


@pytest_asyncio.fixture
async def database(test_settings: Settings) -> AsyncGenerator[Database, None]:
    """Open a fresh database with the schema applied."""
    db = Database(test_settings.resolved_database_path)
    await db.initialize()
    yield db
    await db.close()


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture
def token_service() -> TokenService:
    return TokenService(secret=TEST_SECRET, expiration_minutes=30)


@pytest.fixture
def user_repo(database: Database) -> UserRepository:
    return UserRepository(database)


@pytest.fixture
def task_repo(database: Database) -> TaskRepository:
    return TaskRepository(database)


@pytest.fixture
def comment_repo(database: Database) -> CommentRepository:
    return CommentRepository(database)


@pytest.fixture
def user_service(user_repo: UserRepository, hasher: PasswordHasher) -> UserService:
    return UserService(user_repo, hasher)


@pytest.fixture
def auth_service(user_service: UserService, hasher: PasswordHasher, token_service: TokenService) -> AuthService:
    return AuthService(user_service, hasher, token_service)


@pytest.fixture
def task_service(task_repo: TaskRepository, user_repo: UserRepository) -> TaskService:
    return TaskService(task_repo, user_repo)


@pytest.fixture
def comment_service(
    comment_repo: CommentRepository,
    task_repo: TaskRepository,
    user_repo: UserRepository,
) -> CommentService:
    return CommentService(comment_repo, task_repo, user_repo)


@pytest.fixture
def client(test_settings: Settings) -> Generator[TestClient, None, None]:
    """Create a test client; the app opens its own database on startup."""
    app = create_app(test_settings)
    with TestClient(app) as test_client:
        yield test_client
