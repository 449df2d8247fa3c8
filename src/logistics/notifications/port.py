"""Notification sink port, the abstract interface for publishing order notifications."""

from abc import ABC, abstractmethod


class NotificationDeliveryError(RuntimeError):
    """A sink could not accept a notification."""


class NotificationSink(ABC):
    """Abstract interface for notification sinks.

    Publishing happens after the order's transaction has committed, so a sink
    failure never undoes the transition that triggered it.
    """

    @abstractmethod
    def publish(self, notification) -> None:
        """Hand one ``OrderNotification`` to the sink.

        Raises ``NotificationDeliveryError`` when the sink refuses it.
        """
        ...
