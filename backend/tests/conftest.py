"""
Pytest Configuration and Fixtures

Every test that touches the database gets its own SQLite file with the
reference data seeded and four users:

    alice  creator of most requests
    bob    assignee
    carol  unrelated user
    admin  member of the Admin role
"""

import os

# Must be set before the settings object is created
os.environ.setdefault("LOGS_PATH", "")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DB_RETRY_BACKOFF_SECONDS", "0")

import pytest
from typing import Callable, Dict, Generator, Optional

from fastapi.testclient import TestClient

from irequest.domain.models import AuthContext, NewRequest, Request
from irequest.repositories.database import close_connection, configure_engine, create_tables
from irequest.repositories.seed import create_user, seed_reference_data
from irequest.repositories.status_registry import reset_status_registry
from irequest.repositories.user_repo import UserRepository
from irequest.services.auth_service import hash_password
from irequest.services.request_service import RequestService
from irequest.utils.jwt import JWTValidator

TEST_PASSWORD = "Secret@123"


@pytest.fixture
def db(tmp_path) -> Generator[Dict[str, Dict], None, None]:
    """Fresh seeded database; yields the seeded ids"""
    configure_engine(f"sqlite:///{tmp_path / 'irequest.db'}")
    create_tables()
    seeded = seed_reference_data()
    yield seeded
    close_connection()
    reset_status_registry()


@pytest.fixture
def users(db) -> Dict[str, AuthContext]:
    """AuthContext per test user, keyed by user name"""
    password_hash = hash_password(TEST_PASSWORD)
    role_ids = db["roles"]
    for name in ("alice", "bob", "carol"):
        create_user(name, f"{name}@example.com", password_hash, roles=["User"], role_ids=role_ids)
    create_user("admin", "admin@example.com", password_hash, roles=["Admin"], role_ids=role_ids)

    repo = UserRepository()
    result = {}
    for name in ("alice", "bob", "carol", "admin"):
        user = repo.find_by_login(name)
        result[name] = repo.get_auth_context(user.id)
    return result


@pytest.fixture
def make_request(users) -> Callable[..., Request]:
    """Create a request through the service layer"""
    service = RequestService()

    def _make(
        creator: str = "alice",
        assignee: Optional[str] = "bob",
        title: Optional[str] = "Máy in tầng 3 bị kẹt giấy",
        is_draft: bool = False,
        **fields
    ) -> Request:
        data = NewRequest(
            title=title,
            assigned_user_id=users[assignee].user_id if assignee else None,
            is_draft=is_draft,
            **fields
        )
        return service.create_request(users[creator], data)

    return _make


@pytest.fixture
def auth_headers(users) -> Callable[[str], Dict[str, str]]:
    """Bearer header for a test user"""
    validator = JWTValidator()

    def _headers(name: str) -> Dict[str, str]:
        ctx = users[name]
        return {"Authorization": f"Bearer {validator.issue_token(ctx.user_id, ctx.user_name)}"}

    return _headers


@pytest.fixture
def client(db) -> TestClient:
    """HTTP client that does not follow redirects"""
    from irequest.main import app
    return TestClient(app, follow_redirects=False)
