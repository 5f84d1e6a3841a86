"""
===============================================================================
MODULE: Typed backend exceptions (internal errors)
===============================================================================

Goal
----
Coherent internal exceptions carrying:
- a stable error_code
- an error_id to correlate with logs
- a human message (never secrets, never SQL)

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Component:
  AccountsError + subclasses

Responsibilities:
  - Standardize internal errors that are later mapped to HTTP
  - Generate error_id for tracing

Collaborators:
  - api/exception_handlers.py (maps to AppHTTPException)
  - infrastructure/repositories/postgres/user.py (raises DatabaseError)
  - identity/tokens.py (raises AuthError)
===============================================================================
"""

from __future__ import annotations

from uuid import uuid4


class AccountsError(Exception):
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Class:
      AccountsError

    Responsibilities:
      - Base for internal errors of the service
      - Provide error_code + error_id + message

    Collaborators:
      - api/exception_handlers.py
    ----------------------------------------------------------------------------
    """

    error_code: str = "ACCOUNTS_ERROR"

    def __init__(
        self,
        message: str,
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.error_id = error_id or str(uuid4())
        self.original_error = original_error
        super().__init__(message)


class DatabaseError(AccountsError):
    """Store unavailable (connection, query, timeout, pool)."""

    error_code: str = "DATABASE_ERROR"


class AuthError(AccountsError):
    """Bearer token could not be verified (signature, issuer, audience, expiry)."""

    error_code: str = "AUTH_ERROR"
