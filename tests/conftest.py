"""
Test configuration and fixtures.

Provides:
- In-memory SQLite database, tables created and dropped around each test
- Bearer-token stand-in: the token text is used as the Clerk user id ("sub")
- Factories for profiles, services, reviews and messages
"""

import os

# Must be set before the application modules read their configuration
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["REDIS_URL"] = ""
os.environ["REDIS_HOST"] = ""
os.environ["SECURITY_HEADERS_ENABLED"] = "true"

from typing import Optional  # noqa: E402

import pytest  # noqa: E402
from fastapi import Depends, HTTPException  # noqa: E402
from fastapi.security import HTTPAuthorizationCredentials  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from beauty_directory.auth import get_token_claims, security  # noqa: E402
from beauty_directory.database import Base, SessionLocal, engine  # noqa: E402
from beauty_directory.main import app  # noqa: E402
from beauty_directory.models import Message, Profile, Service  # noqa: E402
from beauty_directory.rate_limiter import reset_rate_limits  # noqa: E402


async def fake_token_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> dict:
    """Accept any bearer token and treat its text as the Clerk user id"""
    if not credentials or not credentials.credentials:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return {"sub": credentials.credentials}


def auth(user_id: str) -> dict:
    return {"Authorization": f"Bearer {user_id}"}


# =============================================================================
# Database / client
# =============================================================================


@pytest.fixture(scope="function")
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db):
    app.dependency_overrides[get_token_claims] = fake_token_claims
    reset_rate_limits()
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# =============================================================================
# Factories (each commits in its own session and returns the new id)
# =============================================================================


@pytest.fixture
def make_profile(db):
    def _make(username: str, role: str = "client", user_id: Optional[str] = None, **fields) -> int:
        with SessionLocal() as session:
            profile = Profile(user_id=user_id or f"user_{username}", username=username, role=role, **fields)
            session.add(profile)
            session.commit()
            return profile.id

    return _make


@pytest.fixture
def make_service(db):
    def _make(provider_id: int, name: str, **fields) -> int:
        with SessionLocal() as session:
            service = Service(provider_id=provider_id, name=name, **fields)
            session.add(service)
            session.commit()
            return service.id

    return _make


@pytest.fixture
def make_message(db):
    def _make(sender_id: int, receiver_id: int, content: str = "hi", read: bool = False) -> int:
        with SessionLocal() as session:
            message = Message(sender_id=sender_id, receiver_id=receiver_id, content=content, read=read)
            session.add(message)
            session.commit()
            return message.id

    return _make


def fetch_profile(profile_id: int) -> Optional[Profile]:
    """Read a profile through a fresh session so no stale identity map is involved"""
    with SessionLocal() as session:
        profile = session.get(Profile, profile_id)
        if profile is not None:
            session.expunge(profile)
        return profile


def count_rows(model, **filters) -> int:
    with SessionLocal() as session:
        return session.query(model).filter_by(**filters).count()

