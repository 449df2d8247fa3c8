"""Per-recipient notification inbox.

``InboxNotificationSink`` stores one ``InboxNotification`` row for every
recipient of a published notification. Recipients read their own unread rows
and mark them read; every read and write is limited to the caller's user id
and tenant.
"""

from datetime import datetime

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, DateTime, Identifier, String, Text
from protean.utils.globals import current_domain
from sqlalchemy.exc import OperationalError

from logistics.domain import logistics
from logistics.errors import NotFound
from logistics.notifications.notification import NotificationType
from logistics.notifications.port import NotificationDeliveryError, NotificationSink
from logistics.order.order import OrderStatus
from logistics.order.transaction import run_command
from logistics.shared.paging import fetch_all
from logistics.tenancy.caller import CallerIdentity
from logistics.utils.logging import get_logger

logger = get_logger(__name__)

UNREAD_LIMIT = 50


@logistics.aggregate
class InboxNotification:
    type: String(required=True, choices=NotificationType)
    order_id: Identifier(required=True)
    tenant_id: Identifier(required=True)
    recipient_id: Identifier(required=True)
    status: String(choices=OrderStatus)
    message: Text(required=True)
    is_read: Boolean(default=False)
    created_at: DateTime(default=datetime.now)

    @classmethod
    def deliver(cls, notification, recipient_id):
        return cls(
            type=notification.type.value,
            order_id=notification.order_id,
            tenant_id=notification.tenant_id,
            recipient_id=str(recipient_id),
            status=notification.status.value,
            message=notification.message,
            is_read=False,
            created_at=notification.created_at,
        )

    def belongs_to(self, caller: CallerIdentity) -> bool:
        return str(self.recipient_id) == caller.user_id and str(self.tenant_id) == caller.tenant_id

    def mark_read(self):
        self.is_read = True


@logistics.repository(part_of=InboxNotification)
class InboxNotificationRepository:
    def _unread(self, recipient_id, tenant_id):
        return self._dao.query.filter(recipient_id=str(recipient_id), tenant_id=str(tenant_id), is_read=False)

    def unread_for(self, recipient_id, tenant_id, limit=UNREAD_LIMIT) -> list[InboxNotification]:
        """Newest unread rows first."""
        return self._unread(recipient_id, tenant_id).order_by("-created_at").limit(limit).all().items

    def all_unread_for(self, recipient_id, tenant_id) -> list[InboxNotification]:
        return fetch_all(self._unread(recipient_id, tenant_id))


class InboxNotificationSink(NotificationSink):
    def publish(self, notification) -> None:
        repo = current_domain.repository_for(InboxNotification)
        try:
            for recipient_id in notification.recipient_ids:
                repo.add(InboxNotification.deliver(notification, recipient_id))
        except (ConnectionError, OperationalError) as exc:
            raise NotificationDeliveryError(f"Inbox unavailable: {exc}") from exc


@logistics.command(part_of="InboxNotification")
class MarkNotificationRead:
    notification_id: Identifier(required=True)
    caller_user_id: Identifier(required=True)
    caller_role: String(required=True, max_length=20)
    caller_tenant_id: Identifier()


@logistics.command(part_of="InboxNotification")
class MarkAllNotificationsRead:
    caller_user_id: Identifier(required=True)
    caller_role: String(required=True, max_length=20)
    caller_tenant_id: Identifier()


@logistics.command_handler(part_of=InboxNotification)
class InboxNotificationHandler:
    @handle(MarkNotificationRead)
    def mark_notification_read(self, command):
        caller = CallerIdentity.from_command(command)
        repo = current_domain.repository_for(InboxNotification)
        try:
            notification = repo.get(command.notification_id)
        except ObjectNotFoundError:
            notification = None
        # Someone else's notification reads as missing
        if notification is None or not notification.belongs_to(caller):
            raise NotFound(
                f"Notification {command.notification_id} not found",
                notification_id=command.notification_id,
            )

        notification.mark_read()
        repo.add(notification)
        return notification

    @handle(MarkAllNotificationsRead)
    def mark_all_notifications_read(self, command):
        caller = CallerIdentity.from_command(command)
        if caller.tenant_id is None:
            return 0

        repo = current_domain.repository_for(InboxNotification)
        unread = repo.all_unread_for(caller.user_id, caller.tenant_id)
        for notification in unread:
            notification.mark_read()
            repo.add(notification)

        logger.info("notifications_marked_read", recipient_id=caller.user_id, count=len(unread))
        return len(unread)


def unread_notifications(caller: CallerIdentity) -> list[InboxNotification]:
    if caller.tenant_id is None:
        return []
    return current_domain.repository_for(InboxNotification).unread_for(caller.user_id, caller.tenant_id)


def mark_notification_as_read(notification_id, caller: CallerIdentity) -> InboxNotification:
    return run_command(MarkNotificationRead(notification_id=notification_id, **caller.as_command_fields()))


def mark_all_notifications_as_read(caller: CallerIdentity) -> int:
    """Returns how many notifications were marked."""
    return run_command(MarkAllNotificationsRead(**caller.as_command_fields()))
