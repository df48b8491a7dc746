import asyncio
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from weakref import WeakValueDictionary

from ..domain.email_validation import EmailValidationToken
from ..domain.errors import InvalidArgumentError, NotFoundError
from ..domain.user import User
from ..logging_config import get_logger
from ..ports.email import NotificationSender
from ..ports.repositories import EmailValidationTokenRepository, UserLookup
from .link_template import render_link, validate_link_template

logger = get_logger(__name__)


def _normalize_token_id(token_id: Any) -> Optional[str]:
    """Return the canonical string form of a token id, or None if it can't be one."""
    if isinstance(token_id, uuid.UUID):
        return str(token_id)
    try:
        return str(uuid.UUID(str(token_id)))
    except (TypeError, ValueError, AttributeError):
        return None


class EmailValidationService:
    """Issues, redeems and inspects single-use email validation tokens.

    Issuing a token supersedes every active token of the same owner and sends
    a "Validate Email" notification carrying the link for the new token. The
    invalidate-then-create sequence is serialized per owner inside this
    process; separate processes sharing a database can still race.
    """

    # shared by all instances so per-request services still serialize per owner
    _owner_locks: "WeakValueDictionary[int, asyncio.Lock]" = WeakValueDictionary()

    def __init__(
        self,
        user_lookup: UserLookup,
        token_repo: EmailValidationTokenRepository,
        notification_sender: NotificationSender,
    ):
        self.user_lookup = user_lookup
        self.token_repo = token_repo
        self.notification_sender = notification_sender

    def _lock_for(self, owner_id: int) -> asyncio.Lock:
        lock = self._owner_locks.get(owner_id)
        if lock is None:
            lock = asyncio.Lock()
            self._owner_locks[owner_id] = lock
        return lock

    async def generate_email(self, user: User, link_url: str) -> None:
        """Send the validation email for ``user``.

        ``link_url`` is only used for templating; it is passed to the sender
        as the ``linkUrl`` template parameter.
        """
        if not link_url:
            raise InvalidArgumentError("link_url is required")
        context: Dict[str, Any] = {
            "user": user,
            "linkUrl": link_url,
        }
        await self.notification_sender.send(context)
        logger.info("validation_email_dispatched", user_id=getattr(user, "id", None))

    async def issue_token(self, owner_id: int, link_template: str) -> EmailValidationToken:
        """Supersede the owner's active tokens, email a link for a new one, then persist it.

        Superseding and inserting are committed together; if anything fails
        in between, the staged supersessions are rolled back.

        Raises:
            InvalidArgumentError: missing owner id or bad link template
            NotFoundError: no user with ``owner_id``
            DeliveryError: the notification could not be sent; nothing is
                persisted and earlier tokens stay active
        """
        validate_link_template(link_template)
        if owner_id is None:
            raise InvalidArgumentError("owner_id is required")

        user = await self.user_lookup.get_by_id(owner_id)
        if user is None:
            raise NotFoundError(f"User {owner_id} not found")

        async with self._lock_for(owner_id):
            try:
                existing = await self.token_repo.list_active_by_owner(owner_id)
                now = datetime.now(timezone.utc)
                for token in existing:
                    token.supersede(now)
                    await self.token_repo.update(token)

                new_token = EmailValidationToken(owner_id=owner_id)
                await self.generate_email(user, render_link(link_template, new_token.id))
                created = await self.token_repo.add(new_token)
            except Exception:
                await self.token_repo.rollback()
                raise

        if existing:
            logger.info(
                "email_validation_tokens_superseded",
                owner_id=owner_id,
                count=len(existing),
            )
        logger.info("email_validation_token_issued", owner_id=owner_id, token_id=new_token.id)
        return created or new_token

    async def issue_token_for_user(self, user: User, link_template: str) -> EmailValidationToken:
        if user is None:
            raise InvalidArgumentError("user is required")
        return await self.issue_token(user.id, link_template)

    async def redeem_token(self, token_id: Any) -> bool:
        """Mark a token as validated. Returns False when no such token exists.

        Superseded tokens are redeemable; only ``is_token_expired`` looks at
        ``deleted_at``.
        """
        normalized = _normalize_token_id(token_id)
        token = await self.token_repo.get_by_id(normalized) if normalized else None
        if token is None:
            logger.info("email_validation_token_redeem_missing", token_id=str(token_id))
            return False
        if not token.validated:
            token.mark_validated()
            await self.token_repo.update(token)
            await self.token_repo.commit()
        logger.info(
            "email_validation_token_redeemed",
            token_id=token.id,
            owner_id=token.owner_id,
            superseded=token.is_deleted,
        )
        return True

    async def is_token_expired(self, token_id: Any) -> bool:
        """True if the token doesn't exist or has been superseded."""
        normalized = _normalize_token_id(token_id)
        if normalized is None:
            return True
        token = await self.token_repo.get_by_id(normalized)
        return token is None or token.is_deleted

    async def is_validated(self, owner_id: int) -> bool:
        """True if any of the owner's tokens, superseded or not, was redeemed."""
        return await self.token_repo.any_validated_by_owner(owner_id)

    async def is_user_validated(self, user: User) -> bool:
        if user is None:
            raise InvalidArgumentError("user is required")
        return await self.is_validated(user.id)
