import asyncio
from typing import Any, Mapping

from ...domain.errors import DeliveryError


class MockNotificationSender:
    """Records sent contexts instead of delivering them.

    Set ``fail_with`` to make the next sends raise ``DeliveryError``.
    """

    def __init__(self):
        self.sent: list[dict[str, Any]] = []
        self.fail_with: str | None = None

    async def send(self, context: Mapping[str, Any]) -> None:
        # simulate async send
        await asyncio.sleep(0)
        if self.fail_with is not None:
            raise DeliveryError(self.fail_with)
        self.sent.append(dict(context))
