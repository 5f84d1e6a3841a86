"""
===============================================================================
CRC CARD — infrastructure/db/errors.py
===============================================================================

Component:
  Typed pool/connectivity errors

Responsibilities:
  - Clear semantics instead of bare RuntimeError: "not initialized",
    "already initialized".
  - Stay catchable as RuntimeError for callers that do not know the subclasses.
===============================================================================
"""


class DatabasePoolError(RuntimeError):
    """Base for connection pool errors."""


class PoolAlreadyInitializedError(DatabasePoolError):
    """init_pool() was called more than once."""


class PoolNotInitializedError(DatabasePoolError):
    """The pool was used before init_pool()."""
