from typing import List, Optional, Protocol

from ...domain.email_validation import EmailValidationToken


class EmailValidationTokenRepository(Protocol):
    """Protocol for email validation token persistence (soft delete only).

    ``update`` stages a change; ``add`` and ``commit`` make staged changes
    durable together and ``rollback`` discards them.
    """

    async def get_by_id(self, token_id: str) -> Optional[EmailValidationToken]: ...

    async def list_active_by_owner(self, owner_id: int) -> List[EmailValidationToken]: ...

    async def any_validated_by_owner(self, owner_id: int) -> bool: ...

    async def add(self, token: EmailValidationToken) -> EmailValidationToken: ...

    async def update(self, token: EmailValidationToken) -> None: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...
