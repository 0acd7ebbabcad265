"""Base classes for delivery channel integrations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from futurely.delivery.schemas import DeliveryPayload, DeliveryResult


class DeliveryChannel(ABC):
    """Abstract base class for delivery channel integrations.

    Every delivery channel (email, Telegram) inherits from this class and
    implements ``deliver``. Implementations report failures through the
    returned ``DeliveryResult`` instead of raising, so one letter's failure
    never escapes into the caller's batch.
    """

    @property
    @abstractmethod
    def channel_name(self) -> str:
        """Return the name identifier for this delivery channel.

        This is used to identify the channel type in logs and results.
        """
        ...

    @abstractmethod
    async def deliver(self, payload: DeliveryPayload) -> DeliveryResult:
        """Deliver a letter via this channel.

        Args:
            payload: The rendered-ready letter content and recipient.

        Returns:
            A DeliveryResult indicating success or failure.
        """
        ...

    async def health_check(self) -> bool:
        """Check if the delivery channel is configured.

        Returns:
            True if the channel is available, False otherwise.
        """
        return True
