"""
Notification Service Factory

Returns the configured notification service.

Version: 1.0.0
"""

import logging
from functools import lru_cache

from eats.services.notifications.base import (
    BaseNotificationService,
    NotificationResult,
)
from eats.services.notifications.log import LoggingNotificationService

logger = logging.getLogger(__name__)


@lru_cache()
def get_notification_service() -> BaseNotificationService:
    """Get the configured notification service."""
    logger.info("Notification Service: Using LoggingNotificationService")
    return LoggingNotificationService()


def reset_notification_service() -> None:
    """Clear the cached service instance."""
    get_notification_service.cache_clear()


__all__ = [
    "get_notification_service",
    "reset_notification_service",
    "BaseNotificationService",
    "NotificationResult",
]
