import pytest

from app.utils import (
    canonical_video_id,
    hash_password,
    is_valid_email,
    is_valid_password,
    normalize_email,
    verify_password,
)


def test_canonical_video_id_collapses_numeric_forms():
    assert canonical_video_id(7) == "7"
    assert canonical_video_id(7.0) == "7"
    assert canonical_video_id(" 7 ") == "7"
    assert canonical_video_id("abc-1") == "abc-1"


@pytest.mark.parametrize("value", [None, True, "", "   ", 1.5, ["1"]])
def test_canonical_video_id_rejects_invalid_values(value):
    with pytest.raises(ValueError):
        canonical_video_id(value)


def test_email_and_password_rules_match_signup_form():
    assert is_valid_email("viewer@example.com")
    assert not is_valid_email("viewer.example.com")
    assert is_valid_password("abc123")
    assert not is_valid_password("abcdef")
    assert not is_valid_password("a1")


def test_normalize_email_lowercases_and_strips():
    assert normalize_email("  Viewer@Example.COM ") == "viewer@example.com"


def test_password_hash_roundtrip_and_salt():
    first = hash_password("secret1")
    second = hash_password("secret1")

    assert first != second
    assert verify_password("secret1", first)
    assert not verify_password("secret2", first)
    assert not verify_password("secret1", "not-a-hash")
