"""
Auth security helpers.
"""

from __future__ import annotations

import hashlib
import secrets
from functools import lru_cache

import bcrypt


# bcrypt only hashes the first 72 bytes and newer releases reject longer input.
MAX_PASSWORD_BYTES = 72


class AuthSecurityError(RuntimeError):
    pass


def hash_password(plain_password: str) -> str:
    password = (plain_password or "").encode("utf-8")
    if not password:
        raise AuthSecurityError("Password is empty.")
    if len(password) > MAX_PASSWORD_BYTES:
        raise AuthSecurityError("Password is longer than 72 bytes.")
    return bcrypt.hashpw(password, bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    password = (plain_password or "").encode("utf-8")
    hashed = (password_hash or "").encode("utf-8")
    if not password or not hashed or len(password) > MAX_PASSWORD_BYTES:
        return False
    try:
        return bcrypt.checkpw(password, hashed)
    except ValueError:
        return False


@lru_cache(maxsize=1)
def dummy_password_hash() -> str:
    # Checked against when the username is unknown so both login failures
    # cost one bcrypt round.
    return hash_password(secrets.token_urlsafe(16))


def build_session_token() -> str:
    # URL-safe random string for the session cookie.
    return secrets.token_urlsafe(48)


def hash_session_token(raw_session_token: str) -> str:
    token = (raw_session_token or "").encode("utf-8")
    if not token:
        raise AuthSecurityError("Session token is empty.")
    return hashlib.sha256(token).hexdigest()
