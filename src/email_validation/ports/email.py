from typing import Any, Mapping, Protocol


class NotificationSender(Protocol):
    """Protocol for rendering and dispatching templated notifications.

    ``context`` carries the template parameters, for validation emails
    ``{"user": User, "linkUrl": str}``. Implementations raise
    ``DeliveryError`` when the transport rejects the message.
    """

    async def send(self, context: Mapping[str, Any]) -> None: ...
