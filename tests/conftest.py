"""Pytest configuration and fixtures."""

import os

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ["APP_ENV"] = "test"
os.environ["COOKIE_SAMESITE"] = "lax"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from educonnect.config import get_settings  # noqa: E402
from educonnect.database import Base, get_db  # noqa: E402
from educonnect.models import Category, Question, User  # noqa: E402, F401
from educonnect.services import auth as auth_module  # noqa: E402
from educonnect.services.auth import AuthService  # noqa: E402
from educonnect.services.identity import FederatedIdentity, IdentityError  # noqa: E402
from educonnect.services.jwt import JWTService  # noqa: E402


class RecordingMailService:
    """Stands in for MailService and keeps every message it was asked to send."""

    def __init__(self) -> None:
        self.sent: list[dict] = []

    def send_verification_email(self, to_email: str, username: str, token: str) -> bool:
        self.sent.append({"kind": "verification", "to": to_email, "username": username, "token": token})
        return True

    def send_password_reset_email(self, to_email: str, username: str, token: str) -> bool:
        self.sent.append({"kind": "reset", "to": to_email, "username": username, "token": token})
        return True

    def last(self, kind: str) -> dict:
        return [m for m in self.sent if m["kind"] == kind][-1]


class FakeIdentityVerifier:
    """Accepts the assertions registered in ``identities``."""

    def __init__(self) -> None:
        self.identities: dict[str, FederatedIdentity] = {}

    def verify(self, assertion: str) -> FederatedIdentity:
        if assertion not in self.identities:
            raise IdentityError("Invalid identity token")
        return self.identities[assertion]


@pytest.fixture(name="db_session")
def db_session_fixture():
    """Create an in-memory SQLite database for tests."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(name="mailer")
def mailer_fixture() -> RecordingMailService:
    return RecordingMailService()


@pytest.fixture(name="identity_verifier")
def identity_verifier_fixture() -> FakeIdentityVerifier:
    return FakeIdentityVerifier()


@pytest.fixture(name="auth_service")
def auth_service_fixture(monkeypatch, mailer: RecordingMailService, identity_verifier: FakeIdentityVerifier):
    """Install an AuthService wired to the recording mailer and fake identity verifier."""
    service = AuthService(JWTService(get_settings()), mailer, identity_verifier)
    monkeypatch.setattr(auth_module, "_auth_service", service)
    return service


@pytest.fixture(name="client")
def client_fixture(db_session: Session, auth_service: AuthService):
    """Create a test client with overridden DB dependency and disabled rate limiting."""
    from educonnect.rate_limit import limiter
    from main import app

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    limiter.enabled = False
    with TestClient(app) as c:
        yield c
    limiter.enabled = True
    app.dependency_overrides.clear()


@pytest.fixture(name="test_user")
def test_user_fixture(db_session: Session, auth_service: AuthService):
    """Create a password account and return its details and session token."""
    result = auth_service.register(db_session, "testuser", "test@example.com", "password123")
    return {
        "user_id": result.value.id,
        "username": result.value.username,
        "email": result.value.email,
        "token": result.token,
    }


@pytest.fixture(name="other_user")
def other_user_fixture(db_session: Session, auth_service: AuthService):
    """A second password account."""
    result = auth_service.register(db_session, "otheruser", "other@example.com", "password456")
    return {
        "user_id": result.value.id,
        "username": result.value.username,
        "email": result.value.email,
        "token": result.token,
    }


@pytest.fixture(name="categories")
def categories_fixture(db_session: Session) -> dict[str, int]:
    """Seed a few subject categories and return their ids by name."""
    names = ["Mathematics", "Physics", "History"]
    rows = [Category(name=n) for n in names]
    db_session.add_all(rows)
    db_session.commit()
    return {c.name: c.id for c in rows}