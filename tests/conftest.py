"""
Test configuration for the medical assistance backend.
"""
import os

# Settings are read at import time; point them at throwaway values first
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from medassist.database import Base, get_db  # noqa: E402
from medassist.main import app  # noqa: E402
from medassist.auth.dependencies import get_password_hasher, get_token_issuer  # noqa: E402
from medassist.auth.repository import UserRepository  # noqa: E402
from medassist.auth.service import AuthService  # noqa: E402
from medassist.core.security import PasswordHasher, JwtTokenIssuer  # noqa: E402
from medassist.patients.service import PatientRecordStatusResolver  # noqa: E402

TEST_SECRET_KEY = "test-secret-key"

# In-memory database shared by every connection of a test
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

# Create test session factory
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db():
    """
    Create a fresh database for each test.
    """
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def password_hasher():
    # Minimum bcrypt work factor keeps the suite fast
    return PasswordHasher(rounds=4)


@pytest.fixture
def token_issuer():
    return JwtTokenIssuer(secret_key=TEST_SECRET_KEY)


@pytest.fixture
def user_repository(db):
    return UserRepository(db)


@pytest.fixture
def auth_service(db, user_repository, password_hasher, token_issuer):
    return AuthService(
        user_repository=user_repository,
        password_hasher=password_hasher,
        token_issuer=token_issuer,
        status_resolver=PatientRecordStatusResolver(db),
    )


@pytest.fixture
def user_payload():
    """
    Factory for a complete registration payload; keyword arguments override fields.
    Pass a field as None to drop it.
    """
    def make(**overrides):
        payload = {
            "email": "a@x.com",
            "password": "Pw1!",
            "full_name": "Alex Morgan",
            "date_of_birth": "1990-04-12",
            "city": "Montreal",
            "province": "Quebec",
            "country": "Canada",
            "phone_number": "+1-514-555-0199",
        }
        payload.update(overrides)
        return {key: value for key, value in payload.items() if value is not None}
    return make


@pytest.fixture(scope="function")
def client(db, password_hasher, token_issuer):
    """
    Create a test client with a test database session.
    """
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_password_hasher] = lambda: password_hasher
    app.dependency_overrides[get_token_issuer] = lambda: token_issuer

    with TestClient(app) as client:
        yield client

    app.dependency_overrides = {}
