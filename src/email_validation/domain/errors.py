"""Errors raised by the email validation services."""


class EmailValidationError(Exception):
    """Base class for email validation failures."""


class NotFoundError(EmailValidationError):
    """A referenced entity (e.g. the token owner) does not exist."""


class InvalidArgumentError(EmailValidationError, ValueError):
    """An argument is missing or malformed (e.g. a bad link template)."""


class DeliveryError(EmailValidationError):
    """The notification could not be handed to the mail transport."""


__all__ = ["EmailValidationError", "NotFoundError", "InvalidArgumentError", "DeliveryError"]
