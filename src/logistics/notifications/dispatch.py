"""Post-commit dispatch of order notifications.

Runs after the order's transaction has committed. A failing sink is logged
and otherwise ignored; the committed transition stands.
"""

from logistics.notifications import get_notifier
from logistics.notifications.port import NotificationDeliveryError
from logistics.utils.logging import get_logger

logger = get_logger(__name__)


def publish_best_effort(*notifications) -> int:
    """Publish each notification, returning how many the sink accepted."""
    notifier = get_notifier()
    delivered = 0
    for notification in notifications:
        try:
            notifier.publish(notification)
        except (NotificationDeliveryError, ConnectionError, TimeoutError) as exc:
            logger.warning(
                "notification_publish_failed",
                order_id=notification.order_id,
                notification_type=notification.type.value,
                error=str(exc),
            )
            continue
        delivered += 1
    return delivered
