"""Tests for bearer token helpers."""

import uuid

import jwt
import pytest

from legalaid.core.config import settings
from legalaid.core.security import create_access_token, decode_access_token, parse_bearer


def test_parse_bearer():
    assert parse_bearer("Bearer abc") == "abc"
    assert parse_bearer("bearer  abc ") == "abc"
    assert parse_bearer("Basic abc") is None
    assert parse_bearer("Bearer ") is None
    assert parse_bearer(None) is None


def test_token_round_trip_carries_claims():
    user_id = uuid.uuid4()

    payload = decode_access_token(create_access_token(user_id, "ADMIN", token_version=3))

    assert payload["sub"] == str(user_id)
    assert payload["role"] == "ADMIN"
    assert payload["token_version"] == 3


def test_previous_secret_still_accepted(monkeypatch):
    token = create_access_token(uuid.uuid4(), "CLIENT", token_version=1)
    monkeypatch.setattr(settings, "JWT_SECRET_PREVIOUS", settings.JWT_SECRET)
    monkeypatch.setattr(settings, "JWT_SECRET", "rotated-secret-that-is-long-enough-for-hs256")

    assert decode_access_token(token)["role"] == "CLIENT"


def test_expired_token_rejected():
    token = create_access_token(uuid.uuid4(), "CLIENT", token_version=1, expires_hours=-1)

    with pytest.raises(jwt.ExpiredSignatureError):
        decode_access_token(token)
