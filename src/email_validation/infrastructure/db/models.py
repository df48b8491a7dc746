from datetime import datetime, timezone
from typing import Any

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import declarative_base, relationship

Base: Any = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserModel(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True)
    email = Column(String, nullable=False, unique=True)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow)


class EmailValidationTokenModel(Base):
    __tablename__ = "email_validation_tokens"
    # UUID in canonical string form, portable across SQLite and PostgreSQL
    id = Column(String(36), primary_key=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    # soft delete: set when a newer token supersedes this one
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    validated = Column(Boolean, nullable=False, default=False)

    owner = relationship("UserModel")

    __table_args__ = (
        Index("idx_email_validation_tokens_owner", "owner_id"),
        Index("idx_email_validation_tokens_owner_validated", "owner_id", "validated"),
    )
