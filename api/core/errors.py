"""
HTTP error rendering.

Services raise `HTTPException` with a short `detail` for logs; clients only
ever see the status code and headers (plus a fixed message for 400).
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

MALFORMED_REQUEST_DETAIL = "Malformed request."

RequestAuthenticator = Callable[[Request], Awaitable[Any]]


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
    logger.debug(
        "http_error status=%s method=%s path=%s detail=%s",
        exc.status_code,
        request.method,
        request.url.path,
        exc.detail,
    )
    return Response(status_code=exc.status_code, headers=exc.headers)


def build_validation_exception_handler(
    authenticate: RequestAuthenticator | None = None,
) -> Callable[[Request, RequestValidationError], Awaitable[Response]]:
    """
    FastAPI decodes a JSON body before any dependency runs, so a malformed
    body can fail before auth did. `authenticate` is re-run here and its 401
    wins over the 400.
    """

    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> Response:
        if authenticate is not None:
            try:
                await authenticate(request)
            except StarletteHTTPException as auth_exc:
                return await http_exception_handler(request, auth_exc)

        logger.info(
            "bad_request method=%s path=%s errors=%s",
            request.method,
            request.url.path,
            len(exc.errors()),
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": MALFORMED_REQUEST_DETAIL},
        )

    return validation_exception_handler


async def unhandled_exception_handler(request: Request, exc: Exception) -> Response:
    logger.exception("unhandled_error method=%s path=%s", request.method, request.url.path)
    return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


def install_exception_handlers(app: FastAPI, *, authenticate: RequestAuthenticator | None = None) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, build_validation_exception_handler(authenticate))
    app.add_exception_handler(Exception, unhandled_exception_handler)
