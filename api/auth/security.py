"""
Auth security helpers.
"""

from __future__ import annotations

import os
import secrets
from functools import lru_cache

import bcrypt

BASIC_REALM = "cashcards"


class AuthSecurityError(RuntimeError):
    pass


def card_owner_role() -> str:
    return os.environ.get("CARD_OWNER_ROLE", "CARD-OWNER").strip() or "CARD-OWNER"


def www_authenticate_header() -> dict[str, str]:
    return {"WWW-Authenticate": f'Basic realm="{BASIC_REALM}"'}


def hash_password(plain_password: str) -> str:
    password = (plain_password or "").encode("utf-8")
    if not password:
        raise AuthSecurityError("Password is empty.")
    return bcrypt.hashpw(password, bcrypt.gensalt()).decode("utf-8")


@lru_cache(maxsize=1)
def dummy_password_hash() -> str:
    """
    Hash of a random secret nobody knows, checked against when the user
    does not exist.
    """
    return hash_password(secrets.token_urlsafe(32))


def verify_password(plain_password: str, password_hash: str) -> bool:
    password = (plain_password or "").encode("utf-8")
    hashed = (password_hash or "").encode("utf-8")
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password, hashed)
    except ValueError:
        # Malformed stored hash.
        return False
