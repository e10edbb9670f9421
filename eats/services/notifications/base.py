"""
Notification Service Abstract Base Class

Defines the interface used to announce order events (a new order for a
restaurant owner, a status change for the customer).

Version: 1.0.0
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from eats.models import Order


@dataclass
class NotificationResult:
    """Result from publishing a notification."""
    success: bool
    message_id: Optional[str] = None
    error_message: Optional[str] = None
    provider: str = "unknown"


class BaseNotificationService(ABC):
    """Abstract base class for notification services."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name."""
        pass

    @abstractmethod
    async def notify_new_order(self, order: Order, owner_id: int) -> NotificationResult:
        """Tell a restaurant owner that an order was placed."""
        pass

    @abstractmethod
    async def notify_order_status(self, order: Order) -> NotificationResult:
        """Tell the customer that their order changed status."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check service connectivity."""
        pass
