"""
Auth dependencies for protected FastAPI routes.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from . import schemas, security, service

# auto_error=False so a missing header gets our realm and empty-body 401.
basic_scheme = HTTPBasic(realm=security.BASIC_REALM, auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers=security.www_authenticate_header(),
    )


async def get_basic_credentials(
    credentials: HTTPBasicCredentials | None = Depends(basic_scheme),
) -> HTTPBasicCredentials:
    if credentials is None or not credentials.username:
        raise _unauthorized("Missing Basic credentials.")
    # Postgres text cannot hold NUL; such a name can never match a user.
    if "\x00" in credentials.username:
        raise _unauthorized("Invalid username or password.")
    return credentials


async def get_current_principal(
    credentials: HTTPBasicCredentials = Depends(get_basic_credentials),
) -> schemas.Principal:
    return await service.authenticate(credentials.username, credentials.password)


async def authenticate_request(request: Request) -> schemas.Principal:
    """
    Same chain as `get_current_principal`, for code that sees the request
    before route dependencies run (e.g. a body that failed to parse).
    """
    credentials = await get_basic_credentials(await basic_scheme(request))
    return await service.authenticate(credentials.username, credentials.password)
