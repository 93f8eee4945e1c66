"""Tests for secret and share persistence."""
from datetime import datetime, timedelta

import pytest
from sqlalchemy import select

from otpshare.core.errors import InvalidInput, InvalidKey
from otpshare.crud import shares as shares_crud
from otpshare.crud import totp_secrets as secrets_crud
from otpshare.models import SharedSecret, TotpSecret
from otpshare.otp.engine import Algorithm

from conftest import ALICE, BOB, TEST_KEY


def _create(db, owner=ALICE, **kwargs):
    return secrets_crud.create_secret(db, owner_id=owner, label="GitHub", key_material=TEST_KEY, **kwargs)


def test_create_applies_defaults(db_session):
    row = _create(db_session)
    assert row.algorithm == "SHA1"
    assert row.digits == 6
    assert row.period_seconds == 30
    assert row.issuer is None
    assert row.created_at is not None and row.updated_at is not None


def test_key_material_encrypted_at_rest(db_session):
    row = _create(db_session)
    assert TEST_KEY not in row.key_material_enc

    record = secrets_crud.to_record(secrets_crud.get_secret(db_session, row.id))
    assert record.key_material == TEST_KEY
    assert record.algorithm is Algorithm.SHA1


def test_tampered_key_material_is_invalid_key(db_session):
    row = _create(db_session)
    blob = bytearray(row.key_material_enc)
    blob[-1] ^= 0x01
    row.key_material_enc = bytes(blob)
    db_session.commit()

    with pytest.raises(InvalidKey):
        secrets_crud.to_record(secrets_crud.get_secret(db_session, row.id))


def test_key_material_bound_to_secret_id(db_session):
    a = _create(db_session)
    b = _create(db_session)
    b.key_material_enc = a.key_material_enc
    db_session.commit()

    with pytest.raises(InvalidKey):
        secrets_crud.to_record(secrets_crud.get_secret(db_session, b.id))


@pytest.mark.parametrize("kwargs", [
    {"digits": 5},
    {"digits": 9},
    {"period_seconds": 14},
    {"period_seconds": 121},
    {"algorithm": "MD5"},
])
def test_create_rejects_out_of_bounds(db_session, kwargs):
    with pytest.raises(InvalidInput):
        _create(db_session, **kwargs)


def test_create_rejects_empty_label_and_key(db_session):
    with pytest.raises(InvalidInput):
        secrets_crud.create_secret(db_session, owner_id=ALICE, label="  ", key_material=TEST_KEY)
    with pytest.raises(InvalidInput):
        secrets_crud.create_secret(db_session, owner_id=ALICE, label="x", key_material=b"")


def test_update_keeps_bounds(db_session):
    row = _create(db_session)
    row = secrets_crud.update_secret(db_session, row, digits=8, period_seconds=60, algorithm="sha512")
    assert (row.digits, row.period_seconds, row.algorithm) == (8, 60, "SHA512")

    with pytest.raises(InvalidInput):
        secrets_crud.update_secret(db_session, row, period_seconds=500)


def test_list_scoped_to_owner_newest_first(db_session):
    first = _create(db_session)
    first.created_at = datetime(2024, 1, 1)
    db_session.commit()
    second = _create(db_session)
    _create(db_session, owner=BOB)

    ids = [r.id for r in secrets_crud.list_secrets(db_session, ALICE)]
    assert ids == [second.id, first.id]


def test_find_grant_resolves_secret(db_session):
    row = _create(db_session)
    share = shares_crud.create_share(db_session, row.id, None)

    grant = shares_crud.find_grant(db_session, share.share_token)
    assert grant.secret.id == row.id
    assert grant.secret.key_material == TEST_KEY
    assert grant.expires_at is None
    assert shares_crud.find_grant(db_session, share.share_token[:-1]) is None


def test_share_tokens_are_unique_and_long(db_session):
    row = _create(db_session)
    tokens = {shares_crud.create_share(db_session, row.id, None).share_token for _ in range(20)}
    assert len(tokens) == 20
    assert all(len(t) >= 40 for t in tokens)


def test_delete_secret_cascades_to_shares(db_session):
    row = _create(db_session)
    token = shares_crud.create_share(db_session, row.id, None).share_token
    shares_crud.create_share(db_session, row.id, datetime(2099, 1, 1))

    secrets_crud.delete_secret(db_session, row)

    assert shares_crud.find_grant(db_session, token) is None
    assert db_session.execute(select(SharedSecret)).scalars().all() == []
    assert db_session.execute(select(TotpSecret)).scalars().all() == []


def test_purge_expired_shares(db_session):
    row = _create(db_session)
    now = datetime(2024, 5, 1, 12, 0, 0)
    shares_crud.create_share(db_session, row.id, now - timedelta(hours=1))
    live = shares_crud.create_share(db_session, row.id, now + timedelta(hours=1))
    forever = shares_crud.create_share(db_session, row.id, None)

    assert shares_crud.purge_expired_shares(db_session, now) == 1
    remaining = {s.id for s in shares_crud.list_shares(db_session, row.id)}
    assert remaining == {live.id, forever.id}
