from typing import Optional, Protocol

from ...domain.user import User


class UserLookup(Protocol):
    """Protocol for resolving users by id."""

    async def get_by_id(self, id: int) -> Optional[User]: ...
