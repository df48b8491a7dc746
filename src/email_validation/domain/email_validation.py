"""Email validation token entity and its state transitions.

A token is *active* until it is either superseded (``deleted_at`` set by a
later issuance for the same owner) or redeemed (``validated``). The two flags
are independent: a superseded token can still be redeemed, and a redeemed
token still counts towards the owner's validated status after it is
superseded.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class EmailValidationToken:
    owner_id: int
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=_utcnow)
    deleted_at: Optional[datetime] = None
    validated: bool = False

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @property
    def is_active(self) -> bool:
        return not self.is_deleted and not self.validated

    def supersede(self, now: datetime | None = None) -> None:
        """Soft-delete the token. The first deletion timestamp wins."""
        if self.deleted_at is None:
            self.deleted_at = now or _utcnow()

    def mark_validated(self) -> None:
        self.validated = True


__all__ = ["EmailValidationToken"]
