"""
===============================================================================
CRC CARD — bigo_api/context.py (Request-scoped context)
===============================================================================

Responsibilities:
  - Hold request-scoped values in ContextVars (async-safe).
  - Let logs correlate without threading the correlation id through every call.
  - Provide minimal helpers: set_request_context(), get_context_dict(),
    clear_context().

Collaborators:
  - crosscutting.middleware: sets correlation_id/method/path at request start.
  - crosscutting.logger: enriches every log line via get_context_dict().

Constraints:
  - Only primitive str values (safe JSON serialization).
  - Empty-string defaults instead of None.
===============================================================================
"""

from __future__ import annotations

from contextvars import ContextVar
from typing import Final

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")

http_method_var: ContextVar[str] = ContextVar("http_method", default="")
http_path_var: ContextVar[str] = ContextVar("http_path", default="")

_CTX_CORRELATION_ID: Final[str] = "correlation_id"
_CTX_METHOD: Final[str] = "method"
_CTX_PATH: Final[str] = "path"


def set_request_context(
    *, correlation_id: str = "", method: str = "", path: str = ""
) -> None:
    """
    Set the minimal request context.

    Empty strings mean "not available".
    """
    correlation_id_var.set(correlation_id or "")
    http_method_var.set(method or "")
    http_path_var.set(path or "")


def get_context_dict() -> dict[str, str]:
    """Current context as a dict, omitting empty keys."""
    ctx: dict[str, str] = {}

    if val := correlation_id_var.get():
        ctx[_CTX_CORRELATION_ID] = val
    if val := http_method_var.get():
        ctx[_CTX_METHOD] = val
    if val := http_path_var.get():
        ctx[_CTX_PATH] = val

    return ctx


def clear_context() -> None:
    """
    Reset the context at the end of a request.

    Prevents context bleeding between requests served by the same worker.
    """
    correlation_id_var.set("")
    http_method_var.set("")
    http_path_var.set("")
