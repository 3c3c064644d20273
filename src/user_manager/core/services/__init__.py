"""Core services exports."""

from .database.db_session import DbSessionService
from .user.uniqueness import EmailUniquenessGuard
from .user.user_service import UserService
from .user.validation import UserValidator

__all__ = [
    # Database Service
    "DbSessionService",
    # User Services
    "EmailUniquenessGuard",
    "UserService",
    "UserValidator",
]
