"""Unit tests for access token handling."""

from datetime import timedelta
from uuid import uuid4

import pytest

from src.marketplace.core.security import ACCESS_TOKEN_TYPE, create_access_token, decode_token

pytestmark = pytest.mark.unit


def test_token_round_trip():
    user_id = uuid4()

    payload = decode_token(create_access_token(user_id, is_admin=True))

    assert payload is not None
    assert payload["sub"] == str(user_id)
    assert payload["type"] == ACCESS_TOKEN_TYPE
    assert payload["admin"] is True


def test_expired_token_is_rejected():
    token = create_access_token(uuid4(), expires_delta=timedelta(seconds=-1))
    assert decode_token(token) is None


def test_tampered_token_is_rejected():
    token = create_access_token(uuid4())
    assert decode_token(token[:-2] + "xx") is None
