"""
Test configuration and fixtures.

Provides:
- In-memory SQLite database, schema created and dropped per test
- Users for every role, offices and lawyer profiles
- Bearer token minting for authenticated tests
- HTTPX AsyncClient with the in-memory notification sender wired in
"""
import os
import uuid
from dataclasses import dataclass
from typing import AsyncGenerator, Generator

# Must be set before the application settings are imported
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["TESTING"] = "1"
os.environ["JWT_SECRET"] = "test-jwt-secret-that-is-long-enough-for-hs256"
os.environ["INTERNAL_SECRET"] = "test-internal-secret"
os.environ["NOTIFICATION_BACKEND"] = "memory"

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.orm import Session

from legalaid.main import app
from legalaid.core.config import settings
from legalaid.core.deps import get_db, get_notification_sender
from legalaid.core.security import create_access_token
from legalaid.db.base import Base
from legalaid.db.enums import Role
from legalaid.db.models import LawyerProfile, LegalSpecialization, Office, User
from legalaid.db.session import SessionLocal, engine
from legalaid.services.notification_sender import InMemoryNotificationSender


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """
    Fresh schema per test.

    App code commits freely; the whole schema is dropped afterwards.
    """
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def backup_dir(tmp_path, monkeypatch):
    """Keep backup archives inside the test's temp directory."""
    path = tmp_path / "backups"
    monkeypatch.setattr(settings, "BACKUP_DIR", str(path))
    return path


@pytest.fixture
def sender() -> InMemoryNotificationSender:
    return InMemoryNotificationSender()


def _make_user(
    db: Session,
    role: Role,
    name: str | None = None,
    phone: str | None = None,
    office: Office | None = None,
    email: str | None = None,
) -> User:
    user = User(
        id=uuid.uuid4(),
        full_name=name or f"{role.value.title()} {uuid.uuid4().hex[:6]}",
        email=email if email is not None else f"{role.value.lower()}-{uuid.uuid4().hex[:8]}@test.org",
        phone=phone,
        role=role.value,
        office_id=office.id if office else None,
    )
    db.add(user)
    db.flush()
    return user


def _make_lawyer(
    db: Session,
    office: Office,
    name: str,
    specializations: list[LegalSpecialization] | None = None,
    max_caseload: int = 10,
    is_available: bool = True,
) -> User:
    lawyer = _make_user(db, Role.LAWYER, name=name, office=office)
    profile = LawyerProfile(
        user_id=lawyer.id,
        office_id=office.id,
        max_caseload=max_caseload,
        is_available=is_available,
    )
    profile.specializations = list(specializations or [])
    db.add(profile)
    db.flush()
    db.refresh(lawyer)
    return lawyer


@pytest.fixture
def office(db: Session) -> Office:
    office = Office(id=uuid.uuid4(), name="Central Office", location="Main Street")
    db.add(office)
    db.flush()
    return office


@pytest.fixture
def coordinator(db: Session, office: Office) -> User:
    return _make_user(db, Role.COORDINATOR, name="Coordinator One", office=office)


@pytest.fixture
def other_coordinator(db: Session, office: Office) -> User:
    return _make_user(db, Role.COORDINATOR, name="Coordinator Two", office=office)


@pytest.fixture
def client_user(db: Session) -> User:
    """Client with both phone and email, so every event goes out twice."""
    return _make_user(db, Role.CLIENT, name="Client One", phone="+15550100")


@pytest.fixture
def admin(db: Session) -> User:
    return _make_user(db, Role.ADMIN, name="Admin One")


@pytest.fixture
def user_factory(db: Session):
    """Create extra users: `user_factory(Role.CLIENT, phone=...)`."""
    def factory(role: Role, **kwargs) -> User:
        return _make_user(db, role, **kwargs)
    return factory


@pytest.fixture
def lawyer_factory(db: Session):
    """Create a lawyer with a profile: `lawyer_factory(office, "Name", max_caseload=2)`."""
    def factory(office: Office, name: str, **kwargs) -> User:
        return _make_lawyer(db, office, name, **kwargs)
    return factory


# =============================================================================
# Auth Fixtures
# =============================================================================

@dataclass
class TestAuth:
    """Test authentication context."""
    user: User
    token: str

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


def auth_for(user: User) -> TestAuth:
    token = create_access_token(
        user_id=user.id,
        role=user.role,
        token_version=user.token_version,
    )
    return TestAuth(user=user, token=token)


@pytest.fixture
def auth_headers():
    """Bearer headers for any user: `auth_headers(user)`."""
    return lambda user: auth_for(user).headers


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture(scope="function")
async def client(
    db: Session,
    sender: InMemoryNotificationSender,
) -> AsyncGenerator[AsyncClient, None]:
    """
    AsyncClient without credentials; pass `headers=auth_headers(user)`.
    """
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notification_sender] = lambda: sender

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def coordinator_client(
    client: AsyncClient,
    coordinator: User,
) -> AsyncGenerator[AsyncClient, None]:
    """Client authenticated as the coordinator fixture."""
    client.headers.update(auth_for(coordinator).headers)
    yield client


@pytest.fixture(scope="function")
async def admin_client(
    client: AsyncClient,
    admin: User,
) -> AsyncGenerator[AsyncClient, None]:
    client.headers.update(auth_for(admin).headers)
    yield client
