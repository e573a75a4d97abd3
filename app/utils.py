"""Utility helpers for the Reelmark service."""

from __future__ import annotations

import hashlib
import re
import secrets
from typing import Any


EMAIL_RE = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@[a-zA-Z0-9-]+(?:\.[a-zA-Z0-9-]+)*$"
)
PASSWORD_RE = re.compile(r"(?=.*[a-zA-Z])(?=.*[0-9])(?=.{6,})")

PASSWORD_ITERATIONS = 240_000
PASSWORD_SCHEME = "pbkdf2_sha256"


def canonical_video_id(value: Any) -> str:
    """Return the canonical string form of a video identifier.

    Identifiers may arrive as strings or numbers depending on the producer, so
    ``1``, ``1.0`` and ``" 1 "`` all collapse to ``"1"``.
    """

    if value is None or isinstance(value, bool):
        raise ValueError("Video id must be a string or number")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError("Video id must be an integral number")
        value = int(value)
    if not isinstance(value, (str, int)):
        raise ValueError("Video id must be a string or number")
    text = str(value).strip()
    if not text:
        raise ValueError("Video id may not be empty")
    return text


def normalize_email(value: str) -> str:
    return value.strip().lower()


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_RE.match(value))


def is_valid_password(value: str) -> bool:
    return bool(PASSWORD_RE.match(value))


def hash_password(password: str, *, salt: str | None = None) -> str:
    """Return a salted PBKDF2 hash encoded as ``scheme$iterations$salt$digest``."""

    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), salt.encode("ascii"), PASSWORD_ITERATIONS
    )
    return f"{PASSWORD_SCHEME}${PASSWORD_ITERATIONS}${salt}${digest.hex()}"


def verify_password(password: str, encoded: str) -> bool:
    try:
        scheme, iterations, salt, expected = encoded.split("$", 3)
        rounds = int(iterations)
    except ValueError:
        return False
    if scheme != PASSWORD_SCHEME:
        return False
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), salt.encode("ascii"), rounds
    )
    return secrets.compare_digest(digest.hex(), expected)
