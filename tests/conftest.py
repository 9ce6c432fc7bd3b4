"""
Shared pytest fixtures for the userhub test suite.

Strategy:
- Domain and application tests: in-memory, zero network.
- API tests: FastAPI TestClient over a JSON repo in a tmp directory.
  DATABASE_URL is cleared so nothing ever touches a real database.
"""
import os
import pytest

# ---------------------------------------------------------------------------
# Environment must be set before any app module is imported
# ---------------------------------------------------------------------------
os.environ.pop("DATABASE_URL", None)
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-not-for-production-123456")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from app.domain.user import User
from app.infrastructure.auth.bruteforce import InMemoryLoginAttemptStore
from app.infrastructure.auth.password import hash_password


SAMPLE_USERS = [
    ("Johni", "johni@example.com"),
    ("Hana", "hana@example.com"),
    ("Dadang", "dadang@example.com"),
    ("Acep", "acep@test.com"),
    ("Bob", "bob@test.com"),
    ("Charlie", "charlie@example.com"),
    ("Eveline", "eveline@test.com"),
    ("Jack", "jack@example.com"),
]


def make_user(name="Alice", email="alice@example.com", password=None, **kwargs) -> User:
    password_hash = hash_password(password) if password else "not-a-real-hash"
    return User(name=name, email=email, password_hash=password_hash, **kwargs)


class FakeClock:
    """Manually advanced replacement for time.time."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# ---------------------------------------------------------------------------
# pytest fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def tmp_audit_log(monkeypatch, tmp_path):
    """Keep audit entries out of the working tree."""
    import app.infrastructure.audit as audit_mod
    log_dir = tmp_path / "logs"
    monkeypatch.setattr(audit_mod, "LOG_DIR", log_dir)
    monkeypatch.setattr(audit_mod, "LOG_FILE", log_dir / "audit.log")
    return log_dir


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def attempts(clock):
    return InMemoryLoginAttemptStore(clock=clock)


@pytest.fixture
def user_repo(tmp_path):
    from app.infrastructure.repositories.user_repository import UserRepository
    return UserRepository(data_path=str(tmp_path / "users.json"))


@pytest.fixture
def sample_repo(user_repo):
    """JSON repo holding the eight sample users (no usable passwords)."""
    for name, email in SAMPLE_USERS:
        user_repo.create(make_user(name=name, email=email))
    return user_repo


# ---------------------------------------------------------------------------
# FastAPI TestClient wired like app.main, but over tmp storage
# ---------------------------------------------------------------------------

@pytest.fixture
def test_app(user_repo, attempts):
    from fastapi import FastAPI
    from app.api.errors import register_error_handlers
    from app.api.routes.auth_routes import router as auth_router, init_auth_routes
    from app.api.routes.user_routes import router as user_router, init_user_routes
    from app.application.authentication import AuthenticationService
    from app.application.user_service import UserService

    app = FastAPI()
    register_error_handlers(app)
    init_auth_routes(AuthenticationService(user_repo, attempts))
    init_user_routes(UserService(user_repo))
    app.include_router(auth_router)
    app.include_router(user_router)
    return app


@pytest.fixture
def client(test_app):
    from fastapi.testclient import TestClient
    return TestClient(test_app)


@pytest.fixture
def registered_user(client):
    """Register a user through the API and return its credentials."""
    creds = {"name": "Owner", "email": "owner@example.com", "password": "StrongPass1"}
    resp = client.post("/api/users", json={**creds, "password_confirm": creds["password"]})
    assert resp.status_code == 200, resp.text
    return creds


@pytest.fixture
def auth_headers(client, registered_user):
    resp = client.post("/api/authentication/login", json={
        "email": registered_user["email"],
        "password": registered_user["password"],
    })
    assert resp.status_code == 200, f"Login failed: {resp.text}"
    return {"Authorization": f"Bearer {resp.json()['token']}"}
