"""Composition root: wires repositories and a notification sender into the service."""

from __future__ import annotations

from typing import Any

from .config import Settings
from .infrastructure.repositories import get_repositories
from .logging_config import get_logger
from .ports.email import NotificationSender
from .services.email_validation_service import EmailValidationService

logger = get_logger(__name__)


def build_notification_sender(settings: Settings | None = None) -> NotificationSender:
    """SendGrid when an API key is configured, otherwise the recording mock."""
    settings = settings or Settings()
    if settings.sendgrid_api_key:
        from .infrastructure.email.sendgrid import SendGridNotificationSender

        logger.info("initialized sendgrid notification sender")
        return SendGridNotificationSender(
            api_key=settings.sendgrid_api_key,
            from_email=settings.email_from,
            subject=settings.validation_email_subject,
        )
    from .infrastructure.email.mock import MockNotificationSender

    logger.info("initialized mock notification sender")
    return MockNotificationSender()


def build_email_validation_service(
    db_session: Any,
    sender: NotificationSender | None = None,
    settings: Settings | None = None,
) -> EmailValidationService:
    repos = get_repositories(db_session)
    return EmailValidationService(
        user_lookup=repos["users"],
        token_repo=repos["email_validation_tokens"],
        notification_sender=sender or build_notification_sender(settings),
    )


__all__ = ["build_email_validation_service", "build_notification_sender"]
