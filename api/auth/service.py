"""
Auth business logic.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from . import repository, schemas, security

logger = logging.getLogger(__name__)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers=security.www_authenticate_header(),
    )


def _to_principal(user_row: dict) -> schemas.Principal:
    return schemas.Principal(
        id=int(user_row["id"]),
        username=str(user_row["username"]),
        roles=frozenset(str(r) for r in (user_row.get("roles") or [])),
    )


async def authenticate(username: str, password: str) -> schemas.Principal:
    """
    Resolve Basic credentials to a principal.

    Unknown user, wrong password and inactive user all yield the same 401 so
    the response never tells which part was wrong.
    """
    user_row = await repository.get_user_by_username(username)
    if user_row is None:
        # Same bcrypt cost as a real user.
        security.verify_password(password, security.dummy_password_hash())
        logger.info("auth_failed reason=unknown_user")
        raise _unauthorized("Invalid username or password.")

    is_valid = security.verify_password(password, str(user_row.get("password_hash") or ""))
    if not is_valid:
        logger.info("auth_failed reason=bad_password user_id=%s", user_row["id"])
        raise _unauthorized("Invalid username or password.")

    if not bool(user_row.get("is_active", False)):
        logger.info("auth_failed reason=inactive user_id=%s", user_row["id"])
        raise _unauthorized("User is inactive.")

    return _to_principal(user_row)
