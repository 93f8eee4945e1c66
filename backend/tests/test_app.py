"""Tests for application startup and shutdown."""
from datetime import timedelta

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from otpshare.core.config import settings
from otpshare.crud import shares as shares_crud
from otpshare.crud import totp_secrets as secrets_crud
from otpshare.db import session as db_session_module
from otpshare.db.base import Base
from otpshare.db.session import build_engine
from otpshare.main import app
from otpshare.otp.clock import utcnow

from conftest import ALICE, TEST_KEY


def test_startup_creates_tables_and_purges_expired_shares(tmp_path, monkeypatch, auth_headers):
    db_session_module.dispose_engine()
    url = f"sqlite:///{tmp_path / 'otpshare.sqlite'}"
    monkeypatch.setattr(settings, "database_url", url)

    seed = build_engine(url)
    Base.metadata.create_all(bind=seed)
    with Session(seed) as db:
        row = secrets_crud.create_secret(db, owner_id=ALICE, label="GitHub", key_material=TEST_KEY)
        shares_crud.create_share(db, row.id, utcnow() - timedelta(days=1))
        live = shares_crud.create_share(db, row.id, None)
        secret_id, live_id = row.id, live.id
    seed.dispose()

    with TestClient(app) as client:
        assert client.get("/health").status_code == 200
        resp = client.get(f"/secrets/{secret_id}/shares", headers=auth_headers(ALICE))
        assert [s["id"] for s in resp.json()] == [live_id]
        assert db_session_module._engine is not None

    assert db_session_module._engine is None
