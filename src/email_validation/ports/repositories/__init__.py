"""Repository protocols for data access layer abstraction."""

from .token import EmailValidationTokenRepository
from .user import UserLookup

__all__ = [
    "UserLookup",
    "EmailValidationTokenRepository",
]
