"""
===============================================================================
CRC CARD — bigo_api/api/exception_handlers.py (centralized exception mapping)
===============================================================================

Responsibilities:
  - Translate application exceptions into RFC7807 HTTP responses.
  - Centralize error logging with trace_id + error_id.
  - Never leak internal detail (SQL, connection strings) to clients.
  - Flatten request validation failures into field_errors.

Patterns:
  - Exception Mapping (presentation layer).
  - Fail-safe: any untyped exception -> INTERNAL_ERROR (logged).

Collaborators:
  - crosscutting.error_responses: AppHTTPException, ErrorCode, problem_response
  - crosscutting.exceptions: AccountsError and subclasses
===============================================================================
"""

from __future__ import annotations

from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..crosscutting.error_responses import (
    GENERIC_ERROR_DETAIL,
    AppHTTPException,
    ErrorCode,
    app_exception_handler,
    correlation_id_from,
    problem_response,
    unauthorized,
    validation_error,
)
from ..crosscutting.exceptions import AccountsError, AuthError, DatabaseError
from ..crosscutting.logger import logger

_VALUE_ERROR_PREFIX = "Value error, "

# R: loc segments that name where the value came from, not the field.
_LOC_SOURCES = {"body", "query", "path", "header", "cookie"}


async def _handle_service_error(
    request: Request,
    *,
    exc: AccountsError,
    code: ErrorCode,
    status_code: int,
) -> JSONResponse:
    """Common path for typed service errors."""
    trace_id = correlation_id_from(request)

    logger.error(
        "Service error",
        extra={
            "code": code.value,
            "error_id": exc.error_id,
            "error_message": exc.message,
            "trace_id": trace_id,
        },
    )

    return problem_response(
        status_code=status_code,
        code=code,
        detail=GENERIC_ERROR_DETAIL,
        instance=request.url.path,
        trace_id=trace_id,
        errors=[{"error_id": exc.error_id}],
    )


async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
    return await _handle_service_error(
        request, exc=exc, code=ErrorCode.DATABASE_ERROR, status_code=500
    )


async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    return await app_exception_handler(request, unauthorized(exc.message))


async def accounts_error_handler(request: Request, exc: AccountsError) -> JSONResponse:
    # R: Base errors without a dedicated mapping are INTERNAL_ERROR.
    return await _handle_service_error(
        request, exc=exc, code=ErrorCode.INTERNAL_ERROR, status_code=500
    )


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def field_errors_from(errors: list[dict[str, Any]]) -> dict[str, list[str]]:
    """
    Group pydantic errors by field name.

    - Field name is the last string segment of loc, in camelCase (missing
      fields validated from their default are reported by attribute name).
    - Custom ValueError messages are returned without pydantic's prefix.
    """
    grouped: dict[str, list[str]] = {}
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if isinstance(part, str)]
        names = [part for part in loc if part not in _LOC_SOURCES]
        field = _camel(names[-1]) if names else (loc[0] if loc else "body")

        message = str(err.get("msg", "Invalid value."))
        if message.startswith(_VALUE_ERROR_PREFIX):
            message = message[len(_VALUE_ERROR_PREFIX) :]

        messages = grouped.setdefault(field, [])
        if message not in messages:
            messages.append(message)
    return grouped


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    field_errors = field_errors_from(list(exc.errors()))
    logger.info(
        "Request validation failed",
        extra={"fields": sorted(field_errors)},
    )
    return await app_exception_handler(
        request, validation_error("Validation Failed", field_errors=field_errors)
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Fallback for untyped exceptions.

    - Full log (stacktrace).
    - Generic response.
    """
    trace_id = correlation_id_from(request)

    logger.error(
        "Unhandled exception",
        exc_info=True,
        extra={"trace_id": trace_id, "error_type": type(exc).__name__},
    )

    return problem_response(
        status_code=500,
        code=ErrorCode.INTERNAL_ERROR,
        detail=GENERIC_ERROR_DETAIL,
        instance=request.url.path,
        trace_id=trace_id,
    )


def register_exception_handlers(app) -> None:
    """
    Register handlers on the FastAPI app.

    - AppHTTPException must be registered to keep RFC7807 bodies.
    - Exception is registered last as fallback.
    """
    app.add_exception_handler(DatabaseError, database_error_handler)
    app.add_exception_handler(AuthError, auth_error_handler)
    app.add_exception_handler(AccountsError, accounts_error_handler)
    app.add_exception_handler(AppHTTPException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


__all__ = ["register_exception_handlers", "field_errors_from"]
