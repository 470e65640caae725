"""Unit tests for activity cursors."""

import base64

import pytest

from src.marketplace.repositories.base import decode_cursor, encode_cursor

pytestmark = pytest.mark.unit


def test_cursor_carries_row_id():
    assert decode_cursor(encode_cursor(42)) == 42


def test_cursor_is_opaque():
    assert encode_cursor(42) != "42"


@pytest.mark.parametrize(
    "cursor",
    [
        "__4=",
        base64.urlsafe_b64encode(b"2026-10-19T08:30:00").decode(),
        base64.urlsafe_b64encode(b"").decode(),
    ],
)
def test_invalid_cursor_raises_value_error(cursor):
    with pytest.raises(ValueError, match="Invalid cursor"):
        decode_cursor(cursor)
