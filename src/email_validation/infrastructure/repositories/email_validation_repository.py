from typing import Any, List, Optional, cast

from sqlalchemy import exists, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ...domain.email_validation import EmailValidationToken
from ...logging_config import get_logger
from ..db import models

logger = get_logger(__name__)

Token = models.EmailValidationTokenModel


def _to_domain(row: models.EmailValidationTokenModel) -> EmailValidationToken:
    return EmailValidationToken(
        id=str(row.id),
        owner_id=int(row.owner_id),
        created_at=cast(Any, row.created_at),
        deleted_at=cast(Any, row.deleted_at),
        validated=bool(row.validated),
    )


class SqlAlchemyEmailValidationTokenRepository:
    """Persists email validation tokens. Tokens are never physically deleted."""

    def __init__(self, db_session: AsyncSession):
        self.db_session = db_session

    async def _commit(self, event: str, **fields) -> None:
        try:
            await self.db_session.commit()
        except Exception as e:
            logger.exception(event, error=str(e), **fields)
            raise  # Re-raise to prevent silent failure

    async def get_by_id(self, token_id: str) -> Optional[EmailValidationToken]:
        q = await self.db_session.execute(
            select(Token)
            .where(Token.id == token_id)
            .execution_options(populate_existing=True)
        )
        row = q.scalars().first()
        if not row:
            return None
        return _to_domain(row)

    async def list_active_by_owner(self, owner_id: int) -> List[EmailValidationToken]:
        """Tokens of the owner that have not been superseded, oldest first."""
        q = await self.db_session.execute(
            select(Token)
            .where(Token.owner_id == owner_id, Token.deleted_at.is_(None))
            .order_by(Token.created_at)
            .execution_options(populate_existing=True)
        )
        return [_to_domain(r) for r in q.scalars().all()]

    async def any_validated_by_owner(self, owner_id: int) -> bool:
        q = await self.db_session.execute(
            select(exists().where(Token.owner_id == owner_id, Token.validated.is_(True)))
        )
        return bool(q.scalar())

    async def add(self, token: EmailValidationToken) -> EmailValidationToken:
        m = Token(
            id=token.id,
            owner_id=token.owner_id,
            created_at=token.created_at,
            deleted_at=token.deleted_at,
            validated=token.validated,
        )
        self.db_session.add(m)
        await self.db_session.flush()
        await self._commit("email_validation_token_create_commit_failed", token_id=token.id)
        return token

    async def update(self, token: EmailValidationToken) -> None:
        """Stage ``deleted_at`` and ``validated`` in the current transaction.

        Nothing is durable until ``add`` or ``commit``; ``rollback`` discards it.

        The statement only ever sets a missing deletion timestamp and only
        ever raises the validated flag, so stored tokens never move back.
        """
        if token.deleted_at is not None:
            await self.db_session.execute(
                update(Token)
                .where(Token.id == token.id, Token.deleted_at.is_(None))
                .values(deleted_at=token.deleted_at)
            )
        if token.validated:
            await self.db_session.execute(
                update(Token).where(Token.id == token.id).values(validated=True)
            )
        await self.db_session.flush()

    async def commit(self) -> None:
        await self._commit("email_validation_token_commit_failed")

    async def rollback(self) -> None:
        await self.db_session.rollback()
        logger.info("email_validation_token_changes_rolled_back")
