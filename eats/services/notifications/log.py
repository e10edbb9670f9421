"""
Logging Notification Service

Publishes order events to the application log. No message leaves the
process; this is the default provider until a push channel is configured.

Version: 1.0.0
"""

import logging
import uuid

from eats.models import Order
from eats.services.notifications.base import (
    BaseNotificationService,
    NotificationResult,
)

logger = logging.getLogger(__name__)


class LoggingNotificationService(BaseNotificationService):
    """Writes every notification to the logger."""

    @property
    def provider_name(self) -> str:
        return "log"

    def _publish(self, message: str) -> NotificationResult:
        message_id = f"log_{uuid.uuid4().hex[:12]}"
        logger.info(f"{message} (ID: {message_id})")
        return NotificationResult(success=True, message_id=message_id, provider="log")

    async def notify_new_order(self, order: Order, owner_id: int) -> NotificationResult:
        return self._publish(
            f"New order #{order.id} (total {order.total:.2f}) for restaurant "
            f"#{order.restaurant_id}, owner #{owner_id}"
        )

    async def notify_order_status(self, order: Order) -> NotificationResult:
        return self._publish(
            f"Order #{order.id} for customer #{order.customer_id} is now {order.status.value}"
        )

    async def health_check(self) -> bool:
        return True
