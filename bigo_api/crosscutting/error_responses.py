"""
===============================================================================
MODULE: Standard error responses (RFC 7807 / Problem Details)
===============================================================================

Goal
----
Make EVERY HTTP error uniform so that:
- The frontend can branch on "code"
- The backend can correlate by trace_id / error_id
- Validation failures are reported per field

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Component:
  AppHTTPException + handlers

Responsibilities:
  - Define the error code catalog (ErrorCode)
  - Build the RFC7807 payload (ErrorDetail)
  - Provide factories for frequent errors
  - Provide FastAPI handlers returning problem+json

Collaborators:
  - crosscutting/middleware.py (correlation_id, generic 500)
  - api/exception_handlers.py (maps internal errors)
===============================================================================
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ErrorCode(str, Enum):
    # 4xx
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"

    # 5xx
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"


class ErrorDetail(BaseModel):
    """
    RFC 7807 model (Problem Details).

    Extra fields:
    - code: stable error code for clients
    - errors: optional list of details (e.g. [{"error_id": "..."}])
    - field_errors: validation messages keyed by request field
    - trace_id: correlation id of the failing request
    """

    type: str = "about:blank"
    title: str
    status: int
    detail: str
    code: ErrorCode
    instance: str | None = None
    errors: list[dict[str, Any]] | None = None
    field_errors: dict[str, list[str]] | None = None
    trace_id: str | None = None


PROBLEM_JSON_MEDIA_TYPE = "application/problem+json"

GENERIC_ERROR_DETAIL = "An unexpected error occurred. Please try again later."

_OPENAPI_ERROR_CONTENT = {
    PROBLEM_JSON_MEDIA_TYPE: {"schema": {"$ref": "#/components/schemas/ErrorDetail"}}
}


def _openapi_error(description: str) -> dict[str, Any]:
    return {
        "description": f"{description} (RFC7807)",
        "model": ErrorDetail,
        "content": _OPENAPI_ERROR_CONTENT,
    }


OPENAPI_ERROR_RESPONSES = {
    "401": _openapi_error("Unauthorized"),
    "403": _openapi_error("Forbidden"),
    "404": _openapi_error("Not Found"),
    "409": _openapi_error("Conflict"),
    "422": _openapi_error("Validation Error"),
    "default": _openapi_error("Error"),
}


class AppHTTPException(HTTPException):
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Class:
      AppHTTPException

    Responsibilities:
      - Attach a stable ErrorCode
      - Carry per-field validation messages (field_errors)
      - Allow custom headers (WWW-Authenticate)

    Collaborators:
      - app_exception_handler()
    ----------------------------------------------------------------------------
    """

    def __init__(
        self,
        status_code: int,
        code: ErrorCode,
        detail: str,
        errors: list[dict[str, Any]] | None = None,
        field_errors: dict[str, list[str]] | None = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.code = code
        self.errors = errors
        self.field_errors = field_errors


# ---------------------------------------------------------------------------
# Error factories (helpers)
# ---------------------------------------------------------------------------
def validation_error(
    detail: str = "Validation Failed",
    field_errors: dict[str, list[str]] | None = None,
) -> AppHTTPException:
    return AppHTTPException(
        422, ErrorCode.VALIDATION_ERROR, detail, field_errors=field_errors
    )


def not_found(detail: str) -> AppHTTPException:
    return AppHTTPException(404, ErrorCode.NOT_FOUND, detail)


def conflict(detail: str) -> AppHTTPException:
    return AppHTTPException(409, ErrorCode.CONFLICT, detail)


def unauthorized(detail: str = "Authentication required.") -> AppHTTPException:
    return AppHTTPException(
        401,
        ErrorCode.UNAUTHORIZED,
        detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def forbidden(detail: str = "Access denied.") -> AppHTTPException:
    return AppHTTPException(403, ErrorCode.FORBIDDEN, detail)


def internal_error(detail: str = GENERIC_ERROR_DETAIL) -> AppHTTPException:
    return AppHTTPException(500, ErrorCode.INTERNAL_ERROR, detail)


def correlation_id_from(request: Request) -> str | None:
    return getattr(getattr(request, "state", None), "correlation_id", None)


def problem_response(
    *,
    status_code: int,
    code: ErrorCode,
    detail: str,
    instance: str | None,
    trace_id: str | None = None,
    errors: list[dict[str, Any]] | None = None,
    field_errors: dict[str, list[str]] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Render an ErrorDetail as application/problem+json."""
    error = ErrorDetail(
        type=f"about:blank/{code.value.lower()}",
        title=code.value.replace("_", " ").title(),
        status=status_code,
        detail=detail,
        code=code,
        instance=instance,
        errors=errors or None,
        field_errors=field_errors or None,
        trace_id=trace_id,
    )
    return JSONResponse(
        status_code=status_code,
        content=error.model_dump(mode="json", exclude_none=True),
        headers=headers,
        media_type=PROBLEM_JSON_MEDIA_TYPE,
    )


# ---------------------------------------------------------------------------
# FastAPI handlers
# ---------------------------------------------------------------------------
async def app_exception_handler(
    request: Request, exc: AppHTTPException
) -> JSONResponse:
    """
    Handler for AppHTTPException.

    Includes instance (path) and propagates optional headers.
    """
    return problem_response(
        status_code=exc.status_code,
        code=exc.code,
        detail=str(exc.detail),
        instance=request.url.path,
        trace_id=correlation_id_from(request),
        errors=exc.errors,
        field_errors=exc.field_errors,
        headers=getattr(exc, "headers", None),
    )
