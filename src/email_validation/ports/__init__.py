"""Ports package - defines interfaces for external dependencies.

Exports repository protocols and service interfaces for dependency inversion.
"""

from .email import NotificationSender
from .repositories import EmailValidationTokenRepository, UserLookup

__all__ = [
    # Repository protocols
    "UserLookup",
    "EmailValidationTokenRepository",
    "NotificationSender",
]
