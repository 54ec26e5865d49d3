import os
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

# Set required environment variables for testing
os.environ["AUTH_JWT_SECRET"] = "test-session-secret-key-for-testing-only"
os.environ["CSRF_SECRET"] = "test-csrf-secret-key-for-testing-only"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["RATE_LIMIT_ENABLED"] = "true"

from homebase.main import app
from homebase.database import get_db
from homebase.models import Base
from homebase.core.plans import PlanTier
from homebase.security.csrf import generate_csrf_token
from homebase.security.session import Identity, create_session_token
from homebase.services.entitlement_service import EntitlementService
from homebase.services.user_service import UserService

TEST_DATABASE_URL = "sqlite://"


@pytest.fixture
def engine():
    """A fresh in-memory database per test, shared by every connection."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    """
    Database session shared by the test and the app.
    Services commit, so each test gets its own database instead of a rollback.
    """
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    def override_get_db():
        try:
            yield session
        finally:
            pass  # Don't close here, we'll handle it after the test

    app.dependency_overrides[get_db] = override_get_db
    yield session

    # Cleanup
    session.close()
    app.dependency_overrides.clear()


@pytest.fixture
def client(db_session):
    """Create a FastAPI TestClient with database session override."""
    with TestClient(app) as c:
        yield c


def auth_headers_for(identity: Identity) -> dict:
    return {"Authorization": f"Bearer {create_session_token(identity)}"}


def csrf_headers_for(identity: Identity) -> dict:
    token, _ = generate_csrf_token(identity.id)
    return {**auth_headers_for(identity), "X-CSRF-Token": token}


@pytest.fixture
def alice():
    return Identity(id="user_alice", email="alice@example.com", name="Alice")


@pytest.fixture
def bob():
    return Identity(id="user_bob", email="bob@example.com", name="Bob")


@pytest.fixture
def alice_household(db_session, alice):
    """Alice synced with her own free household, as owner."""
    _, household, _ = UserService(db_session).sync(alice)
    return household


@pytest.fixture
def bob_household(db_session, bob):
    _, household, _ = UserService(db_session).sync(bob)
    return household


@pytest.fixture
def auth_headers(alice):
    """Authorization headers for Alice."""
    return auth_headers_for(alice)


@pytest.fixture
def write_headers(alice):
    """Authorization plus a valid CSRF token for Alice."""
    return csrf_headers_for(alice)


@pytest.fixture
def headers_for():
    """Build request headers for any identity, with or without a CSRF token."""

    def _headers_for(identity: Identity, csrf: bool = False) -> dict:
        return csrf_headers_for(identity) if csrf else auth_headers_for(identity)

    return _headers_for


@pytest.fixture
def set_plan(db_session):
    """Move a household to another tier the way a subscription change would."""

    def _set_plan(household_id: int, tier: PlanTier, user_id: str = "user_alice"):
        return EntitlementService(db_session).update_for_subscription(household_id, tier, user_id=user_id)

    return _set_plan
