"""
User directory use cases (package exports).
"""

from .user_directory import UserDirectoryService
from .user_results import (
    SyncResult,
    UserError,
    UserErrorCode,
    UserResult,
    UserView,
)

__all__ = [
    "UserDirectoryService",
    "SyncResult",
    "UserError",
    "UserErrorCode",
    "UserResult",
    "UserView",
]
