"""Notification sink registry.

Provides singleton access to the configured sink. ``NOTIFICATION_SINK``
selects it: ``memory`` (default) records in process, ``logging`` writes to the
structured log and ``inbox`` stores a readable row per recipient.
"""

import os

from logistics.notifications.port import NotificationSink

_notifier_instance: NotificationSink | None = None


def get_notifier() -> NotificationSink:
    global _notifier_instance
    if _notifier_instance is None:
        sink = os.environ.get("NOTIFICATION_SINK", "memory").lower()
        if sink == "memory":
            from logistics.notifications.memory_sink import InMemoryNotificationSink

            _notifier_instance = InMemoryNotificationSink()
        elif sink == "logging":
            from logistics.notifications.logging_sink import LoggingNotificationSink

            _notifier_instance = LoggingNotificationSink()
        elif sink == "inbox":
            from logistics.notifications.inbox import InboxNotificationSink

            _notifier_instance = InboxNotificationSink()
        else:
            raise ValueError(f"Unknown notification sink: {sink}")
    return _notifier_instance


def set_notifier(notifier: NotificationSink):
    """Override the sink (e.g. for tests or a custom transport)."""
    global _notifier_instance
    _notifier_instance = notifier


def reset_notifier():
    """Reset to the default sink."""
    global _notifier_instance
    _notifier_instance = None
