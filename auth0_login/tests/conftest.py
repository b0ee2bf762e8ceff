"""
Test configuration and fixtures.
"""

import uuid
import warnings

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import auth0_login.db.database as database
from auth0_login.core.config import Settings
from auth0_login.db.database import Base, get_db
from auth0_login.main import app
from auth0_login.models.user import User
from auth0_login.schemas.claims import Claims
from auth0_login.services.events import EventDispatcher, get_event_dispatcher

# Filter out deprecation warnings that are not actionable
warnings.filterwarnings("ignore", category=DeprecationWarning, module="pydantic.*")

# In-memory SQLite shared by every connection
SQLALCHEMY_DATABASE_URL = "sqlite://"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)

# Point the lazy engine at the test database so startup code never reaches
# the configured PostgreSQL server
database._engine = engine
database._SessionLocal = TestingSessionLocal


def override_get_db():
    """Override get_db dependency for testing."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_test_tables():
    """Give every test empty tables."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db():
    """Create test database session."""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def dispatcher():
    """A fresh event dispatcher, also used by the API."""
    event_dispatcher = EventDispatcher()
    app.dependency_overrides[get_event_dispatcher] = lambda: event_dispatcher
    yield event_dispatcher
    app.dependency_overrides.pop(get_event_dispatcher, None)


@pytest.fixture
def client(dispatcher):
    """Test client without lifespan; tables come from setup_test_tables."""
    return TestClient(app)


@pytest.fixture
def login_settings():
    """Settings with a predictable login policy, independent of the environment."""
    return Settings(
        AUTH0_DOMAIN="test-tenant.eu.auth0.com",
        AUTH0_CLIENT_ID="test-client-id",
        AUTH0_CLIENT_SECRET="test-client-secret-that-is-long-enough-for-hs256",
        AUTH0_REQUIRES_VERIFIED_EMAIL=True,
        AUTH0_JOIN_USER_BY_MAIL_ENABLED=False,
        AUTH0_USERNAME_CLAIM="nickname",
        AUTH0_AUTO_REGISTER=True,
        AUTH0_CLAIM_MAPPING="",
        AUTH0_CLAIM_TO_USE_FOR_ROLE=None,
        AUTH0_ROLE_MAPPING="",
    )


@pytest.fixture
def make_claims():
    """Build Claims for a unique Auth0 identity, overriding any field."""

    def _make(**overrides):
        suffix = uuid.uuid4().hex[:8]
        data = {
            "user_id": f"auth0|{suffix}",
            "email": f"user_{suffix}@example.com",
            "email_verified": True,
            "nickname": f"user_{suffix}",
            "identities": [
                {"provider": "auth0", "connection": "Username-Password-Authentication"}
            ],
        }
        data.update(overrides)
        return Claims.model_validate(data)

    return _make


@pytest.fixture
def test_user(db):
    """Create an existing local user with no Auth0 link."""
    suffix = uuid.uuid4().hex[:8]
    user = User(
        name=f"existing_{suffix}",
        mail=f"existing_{suffix}@example.com",
        init=f"existing_{suffix}@example.com",
        pass_="not-a-real-password",
        status=True,
        firstname="Test",
        surname="User",
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user
