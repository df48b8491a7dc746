from typing import Any, Optional, cast

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ...domain.user import User as DomainUser
from ...logging_config import get_logger
from ..db import models

logger = get_logger(__name__)


def _to_domain(row: models.UserModel) -> DomainUser:
    return DomainUser(
        id=int(row.id),
        email=cast(Any, row.email),
        first_name=cast(Any, row.first_name),
        last_name=cast(Any, row.last_name),
        is_active=bool(row.is_active),
        created_at=cast(Any, row.created_at),
    )


class SqlAlchemyUserRepository:
    def __init__(self, db_session: AsyncSession):
        self.db_session = db_session

    async def create(self, user: DomainUser) -> DomainUser:
        logger.debug("creating_user", email=user.email)
        m = models.UserModel(
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            is_active=user.is_active,
        )
        self.db_session.add(m)
        await self.db_session.flush()
        try:
            await self.db_session.commit()
        except Exception as e:
            logger.exception("user_create_commit_failed", error=str(e), email=user.email)
            raise  # Re-raise to prevent silent failure
        return _to_domain(m)

    async def get_by_id(self, id: int) -> Optional[DomainUser]:
        q = await self.db_session.execute(select(models.UserModel).where(models.UserModel.id == id))
        row = q.scalars().first()
        if not row:
            return None
        return _to_domain(row)

    async def get_by_email(self, email: str) -> Optional[DomainUser]:
        q = await self.db_session.execute(
            select(models.UserModel).where(models.UserModel.email == email)
        )
        row = q.scalars().first()
        if not row:
            return None
        return _to_domain(row)
