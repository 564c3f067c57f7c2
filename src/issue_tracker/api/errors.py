"""
issue_tracker.api.errors

Mapping of auth/service conditions to HTTP responses.

Responsibilities:
- Install exception handlers for `AuthError` and `ServiceError` families.
- Keep a stable `{"detail", "code"}` body shape for clients.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.status import (
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
)

from issue_tracker.auth.errors import (
    AccountInactive,
    AuthenticationRequired,
    AuthError,
    Forbidden,
    InvalidCredentials,
    InvalidToken,
    UnknownOrInactiveSubject,
)
from issue_tracker.services.errors import Conflict, NotFound, ServiceError

_STATUS: dict[type[Exception], int] = {
    AuthenticationRequired: HTTP_401_UNAUTHORIZED,
    InvalidToken: HTTP_401_UNAUTHORIZED,
    UnknownOrInactiveSubject: HTTP_401_UNAUTHORIZED,
    InvalidCredentials: HTTP_401_UNAUTHORIZED,
    AccountInactive: HTTP_403_FORBIDDEN,
    Forbidden: HTTP_403_FORBIDDEN,
    NotFound: HTTP_404_NOT_FOUND,
    Conflict: HTTP_409_CONFLICT,
}


def _status_for(exc: Exception, default: int) -> int:
    for cls in type(exc).__mro__:
        if cls in _STATUS:
            return _STATUS[cls]
    return default


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(AuthError)
    async def _auth_error(_: Request, exc: AuthError) -> JSONResponse:
        status_code = _status_for(exc, HTTP_401_UNAUTHORIZED)
        headers = {"WWW-Authenticate": "Bearer"} if status_code == HTTP_401_UNAUTHORIZED else None
        return JSONResponse(
            status_code=status_code,
            content={"detail": exc.message, "code": exc.code},
            headers=headers,
        )

    @app.exception_handler(ServiceError)
    async def _service_error(_: Request, exc: ServiceError) -> JSONResponse:
        return JSONResponse(
            status_code=_status_for(exc, 400),
            content={"detail": exc.message, "code": exc.code},
        )


# --- Module Notes -----------------------------------------------------------
# `SigningSecretMissing` is intentionally absent: it surfaces as a 500 and is
# normally caught at startup by `create_app`.
