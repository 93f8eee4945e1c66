"""Shared fixtures: in-memory database, app client, bearer tokens."""
import os

# Must be set before otpshare.core.config is imported
if not os.environ.get("JWT_SECRET"):
    os.environ["JWT_SECRET"] = "test-jwt-secret-key-for-testing-only"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from otpshare import models  # noqa: F401
from otpshare.core.security import create_access_token
from otpshare.db.base import Base
from otpshare.db.session import build_engine, get_db
from otpshare.main import app
from otpshare.security.rate_limit import reset_rate_limits

# RFC 6238 SHA1 test key, "12345678901234567890"
TEST_SECRET_B32 = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"
TEST_KEY = b"12345678901234567890"

ALICE = "user-alice-123"
BOB = "user-bob-456"


@pytest.fixture
def db_engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    reset_rate_limits()
    yield TestClient(app)
    app.dependency_overrides.clear()
    reset_rate_limits()


@pytest.fixture
def auth_headers():
    def _headers(subject: str) -> dict:
        return {"Authorization": f"Bearer {create_access_token(subject)}"}
    return _headers


@pytest.fixture
def create_secret(client, auth_headers):
    """POST /secrets as `owner`, returning the created secret JSON."""
    def _create(owner: str = ALICE, **overrides) -> dict:
        body = {"label": "GitHub", "issuer": "github.com", "secret": TEST_SECRET_B32}
        body.update(overrides)
        resp = client.post("/secrets", json=body, headers=auth_headers(owner))
        assert resp.status_code == 201, resp.text
        return resp.json()
    return _create
