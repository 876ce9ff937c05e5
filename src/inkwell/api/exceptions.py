"""Exception handlers for the Inkwell API.

Every failure is rendered as ``{"success": false, "message": ...}``, plus
``errors`` for validation failures and ``error`` for store faults.
"""

import logging
import traceback
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from inkwell.core.config import get_settings
from inkwell.services.auth_gate import AuthenticationError
from inkwell.services.errors import (
    InvalidCredentialsError,
    NotFoundError,
    StoreError,
    UserExistsError,
)

logger = logging.getLogger(__name__)


def error_body(message: str, **extra: Any) -> dict[str, Any]:
    body: dict[str, Any] = {"success": False, "message": message}
    body.update({k: v for k, v in extra.items() if v is not None})
    return body


def _validation_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        errors.append(
            {
                "field": loc[-1] if loc else "body",
                "message": err.get("msg", "Invalid value"),
            }
        )
    return errors


async def authentication_error_handler(
    request: Request, exc: AuthenticationError
) -> JSONResponse:
    """Rejections from the auth gate. The message is one of three fixed strings."""
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message, error=exc.detail),
        headers=headers,
    )


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content=error_body(exc.message))


async def user_exists_handler(request: Request, exc: UserExistsError) -> JSONResponse:
    return JSONResponse(status_code=400, content=error_body(exc.message))


async def invalid_credentials_handler(
    request: Request, exc: InvalidCredentialsError
) -> JSONResponse:
    return JSONResponse(status_code=401, content=error_body(exc.message))


async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    """Infrastructure faults: 500 with the underlying message for operators."""
    logger.error("%s: %s", exc.message, exc.detail)
    return JSONResponse(status_code=500, content=error_body(exc.message, error=exc.detail))


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle request validation errors."""
    return JSONResponse(
        status_code=400,
        content=error_body("Validation failed", errors=_validation_errors(exc)),
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Routing-level errors (unknown route, method not allowed)."""
    if exc.status_code == 404:
        message = f"Not found - {request.url.path}"
    else:
        message = str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(message),
        headers=getattr(exc, "headers", None),
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception("Unexpected error", exc_info=exc)
    stack = None
    if get_settings().is_development:
        stack = "".join(traceback.format_exception(exc))
    return JSONResponse(
        status_code=500,
        content=error_body("Internal server error", stack=stack),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers."""
    app.add_exception_handler(AuthenticationError, authentication_error_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(UserExistsError, user_exists_handler)
    app.add_exception_handler(InvalidCredentialsError, invalid_credentials_handler)
    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_error_handler)
