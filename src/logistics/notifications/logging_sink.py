"""Notification sink that writes every notification to the structured log."""

from logistics.notifications.port import NotificationSink
from logistics.utils.logging import get_logger

logger = get_logger(__name__)


class LoggingNotificationSink(NotificationSink):
    def publish(self, notification) -> None:
        logger.info("order_notification", **notification.to_dict())
