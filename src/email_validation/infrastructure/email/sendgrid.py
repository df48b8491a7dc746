import asyncio
import html
from typing import Any, Mapping, Optional

from python_http_client.exceptions import HTTPError
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from ...config import Settings
from ...domain.errors import DeliveryError, InvalidArgumentError
from ...logging_config import get_logger

logger = get_logger(__name__)


class SendGridNotificationSender:
    """Renders the validation email and hands it to SendGrid."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        from_email: Optional[str] = None,
        subject: Optional[str] = None,
        client: Any = None,
    ):
        s = None if api_key and from_email and subject else Settings()
        self.api_key = api_key or s.sendgrid_api_key
        self.from_email = from_email or s.email_from
        self.subject = subject or s.validation_email_subject
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = SendGridAPIClient(self.api_key)
        return self._client

    def render(self, context: Mapping[str, Any]) -> tuple[str, str]:
        """Return ``(to_email, html_content)`` for a validation email context."""
        user = context.get("user")
        link_url = context.get("linkUrl")
        to_email = getattr(user, "email", None)
        if not to_email or not link_url:
            raise InvalidArgumentError("validation email needs a user with an email and a linkUrl")
        name = getattr(user, "display_name", to_email)
        url = html.escape(str(link_url), quote=True)
        content = (
            f"<p>Hello {html.escape(str(name))},</p>"
            f'<p>Please validate your email address by clicking <a href="{url}">here</a>.</p>'
        )
        return to_email, content

    async def send(self, context: Mapping[str, Any]) -> None:
        to_email, content = self.render(context)
        message = Mail(
            from_email=self.from_email,
            to_emails=to_email,
            subject=self.subject,
            html_content=content,
        )
        # SendGrid client is synchronous; run in a thread to avoid blocking the event loop
        loop = asyncio.get_running_loop()
        try:
            response = await loop.run_in_executor(None, self.client.send, message)
        except HTTPError as exc:
            logger.error("sendgrid_send_failed", to=to_email, status=getattr(exc, "status_code", None))
            raise DeliveryError(f"SendGrid rejected the message: {exc}") from exc
        except OSError as exc:
            logger.error("sendgrid_send_failed", to=to_email, error=str(exc))
            raise DeliveryError(f"SendGrid unreachable: {exc}") from exc
        except Exception as exc:
            logger.exception("sendgrid_send_failed", to=to_email, error=str(exc))
            raise DeliveryError(f"SendGrid send failed: {exc}") from exc
        status = getattr(response, "status_code", None)
        if status is not None and status >= 400:
            raise DeliveryError(f"SendGrid returned status {status}")
        logger.info("sendgrid_message_sent", to=to_email, status=status)
