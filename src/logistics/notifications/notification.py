"""Order notifications and how they are built from a committed order."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from logistics.order.order import OrderStatus
from logistics.tenancy.profiles import CourierProfile, MerchantProfile


class NotificationType(Enum):
    ORDER_STATUS_CHANGE = "ORDER_STATUS_CHANGE"
    ORDER_ASSIGNED = "ORDER_ASSIGNED"


STATUS_MESSAGES = {
    OrderStatus.CREATED: "Order has been created",
    OrderStatus.ASSIGNED: "Order has been assigned to a courier",
    OrderStatus.PICKED_UP: "Order has been picked up",
    OrderStatus.IN_TRANSIT: "Order is in transit",
    OrderStatus.DELIVERED: "Order has been delivered",
    OrderStatus.CANCELLED: "Order has been cancelled",
    OrderStatus.RETURNED: "Order has been returned",
}


@dataclass(frozen=True)
class OrderNotification:
    type: NotificationType
    order_id: str
    tenant_id: str
    tracking_code: str
    status: OrderStatus
    message: str
    recipient_ids: tuple = ()
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "order_id": self.order_id,
            "tenant_id": self.tenant_id,
            "tracking_code": self.tracking_code,
            "status": self.status.value,
            "message": self.message,
            "recipient_ids": list(self.recipient_ids),
            "created_at": self.created_at.isoformat(),
        }


def _profile_user_id(profile_cls, profile_id):
    if not profile_id:
        return None
    try:
        return str(current_domain.repository_for(profile_cls).get(profile_id).user_id)
    except ObjectNotFoundError:
        return None


def status_change_notification(order) -> OrderNotification:
    """Tell the merchant, and the courier once there is one, where the order is."""
    status = OrderStatus(order.status)
    recipients = [_profile_user_id(MerchantProfile, order.merchant_id)]
    if status != OrderStatus.CREATED:
        recipients.append(_profile_user_id(CourierProfile, order.courier_id))

    return OrderNotification(
        type=NotificationType.ORDER_STATUS_CHANGE,
        order_id=str(order.id),
        tenant_id=str(order.tenant_id),
        tracking_code=order.tracking_code,
        status=status,
        message=f"Order {order.tracking_code}: {STATUS_MESSAGES[status]}",
        recipient_ids=tuple(r for r in recipients if r),
    )


def assignment_notification(order) -> OrderNotification:
    courier_user_id = _profile_user_id(CourierProfile, order.courier_id)
    return OrderNotification(
        type=NotificationType.ORDER_ASSIGNED,
        order_id=str(order.id),
        tenant_id=str(order.tenant_id),
        tracking_code=order.tracking_code,
        status=OrderStatus.ASSIGNED,
        message=f"You have been assigned to deliver order {order.tracking_code}",
        recipient_ids=(courier_user_id,) if courier_user_id else (),
    )
