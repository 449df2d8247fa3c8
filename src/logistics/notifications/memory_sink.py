"""In-memory notification sink, records notifications for tests and local runs."""

from logistics.notifications.port import NotificationDeliveryError, NotificationSink


class InMemoryNotificationSink(NotificationSink):
    def __init__(self):
        self.published: list = []
        self.should_succeed = True
        self.failure_reason = "Notification sink unavailable"

    def configure(self, should_succeed: bool = True, failure_reason: str = "Notification sink unavailable"):
        """Configure the sink behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def publish(self, notification) -> None:
        if not self.should_succeed:
            raise NotificationDeliveryError(self.failure_reason)
        self.published.append(notification)

    def for_order(self, order_id) -> list:
        return [n for n in self.published if n.order_id == str(order_id)]

    def reset(self):
        self.published.clear()
        self.should_succeed = True
        self.failure_reason = "Notification sink unavailable"
