"""
===============================================================================
MODULE: HTTP middlewares (correlation + global exceptions + request log)
===============================================================================

Goal
----
1) CorrelationIdMiddleware:
   - Accept/generate X-Correlation-ID and echo it on the response
   - Set contextvars (correlation_id/method/path) for log enrichment

2) GlobalExceptionMiddleware:
   - Last line of defense: anything escaping routing becomes a generic 500

3) RequestLoggingMiddleware:
   - One log line per request with status and duration

Order (outermost first): CorrelationId -> GlobalException -> RequestLogging
-> CORS -> routes. A 500 rendered by GlobalException still carries the
correlation header.

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Components:
  - CorrelationIdMiddleware
  - GlobalExceptionMiddleware
  - RequestLoggingMiddleware

Collaborators:
  - bigo_api/context.py
  - crosscutting/error_responses.py
  - crosscutting/logger.py
  - crosscutting/timing.py
===============================================================================
"""

from __future__ import annotations

import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ..context import clear_context, set_request_context
from .error_responses import (
    GENERIC_ERROR_DETAIL,
    ErrorCode,
    correlation_id_from,
    problem_response,
)
from .logger import logger
from .timing import Timer

CORRELATION_ID_HEADER = "X-Correlation-ID"


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Class:
      CorrelationIdMiddleware

    Responsibilities:
      - Accept X-Correlation-ID or generate a UUID4
      - Expose it on request.state and contextvars
      - Echo it on every response
      - Guarantee clear_context() to avoid leaks

    Collaborators:
      - bigo_api/context.py
    ----------------------------------------------------------------------------
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        incoming = (request.headers.get(CORRELATION_ID_HEADER) or "").strip()
        correlation_id = (
            incoming if self._is_valid_correlation_id(incoming) else str(uuid.uuid4())
        )

        request.state.correlation_id = correlation_id
        set_request_context(
            correlation_id=correlation_id,
            method=request.method,
            path=request.url.path,
        )

        try:
            response = await call_next(request)
            response.headers[CORRELATION_ID_HEADER] = correlation_id
            return response
        finally:
            clear_context()

    @staticmethod
    def _is_valid_correlation_id(value: str) -> bool:
        # R: Any short opaque id is accepted, not only UUIDs.
        return bool(value) and len(value) <= 128


class GlobalExceptionMiddleware(BaseHTTPMiddleware):
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Class:
      GlobalExceptionMiddleware

    Responsibilities:
      - Catch exceptions no handler translated
      - Log the stack with method/path/trace id
      - Respond 500 problem+json without internal detail

    Collaborators:
      - crosscutting.error_responses.problem_response
    ----------------------------------------------------------------------------
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            trace_id = correlation_id_from(request)
            logger.error(
                "Unhandled exception",
                exc_info=True,
                extra={
                    "trace_id": trace_id,
                    "error_type": type(exc).__name__,
                },
            )
            return problem_response(
                status_code=500,
                code=ErrorCode.INTERNAL_ERROR,
                detail=GENERIC_ERROR_DETAIL,
                instance=request.url.path,
                trace_id=trace_id,
            )


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Class:
      RequestLoggingMiddleware

    Responsibilities:
      - Log "HTTP {method} {path} responded {status} in {ms}ms"
      - On exception log a warning with the duration and re-raise

    Collaborators:
      - crosscutting.timing.Timer
      - crosscutting.logger
    ----------------------------------------------------------------------------
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        timer = Timer().start()
        method = request.method
        path = request.url.path

        try:
            response = await call_next(request)
        except Exception:
            timer.stop()
            logger.warning(
                f"HTTP {method} {path} failed after {timer.elapsed_ms}ms",
                extra={"latency_ms": timer.elapsed_ms},
            )
            raise

        timer.stop()
        logger.info(
            f"HTTP {method} {path} responded {response.status_code} "
            f"in {timer.elapsed_ms}ms",
            extra={
                "status_code": response.status_code,
                "latency_ms": timer.elapsed_ms,
            },
        )
        return response
