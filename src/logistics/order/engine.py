"""Order lifecycle engine, the in-process entry point for order writes.

Each operation takes the caller's identity explicitly, processes one command
inside the serialized write boundary and, once that has committed, publishes
the matching notifications.
"""

from logistics.notifications.dispatch import publish_best_effort
from logistics.notifications.notification import assignment_notification, status_change_notification
from logistics.order.assignment import AssignCourier
from logistics.order.creation import CreateOrder
from logistics.order.lifecycle import UpdateOrderStatus
from logistics.order.order import OrderStatus, parse_amount
from logistics.order.transaction import run_command
from logistics.tenancy.caller import CallerIdentity, UserRole, require_role


def create_order(
    caller: CallerIdentity,
    recipient_name,
    recipient_phone,
    address,
    city,
    price,
    cod_amount,
):
    """Book a new order for the caller's merchant profile.

    ``price`` and ``cod_amount`` may be decimal strings, ``Decimal`` or ``int``;
    floats and negative amounts raise ``InvalidAmount``.
    """
    require_role(caller, UserRole.MERCHANT, UserRole.ADMIN, action="create orders")
    command = CreateOrder(
        recipient_name=recipient_name,
        recipient_phone=recipient_phone,
        address=address,
        city=city,
        price=str(parse_amount(price, "price")),
        cod_amount=str(parse_amount(cod_amount, "cod_amount")),
        **caller.as_command_fields(),
    )
    order = run_command(command)
    publish_best_effort(status_change_notification(order))
    return order


def update_order_status(order_id, target_status, caller: CallerIdentity):
    transition = run_command(
        UpdateOrderStatus(
            order_id=order_id,
            target_status=target_status.value if isinstance(target_status, OrderStatus) else str(target_status),
            **caller.as_command_fields(),
        )
    )
    publish_best_effort(status_change_notification(transition.order))
    return transition.order


def assign_courier(order_id, courier_id, caller: CallerIdentity):
    transition = run_command(
        AssignCourier(
            order_id=order_id,
            courier_id=courier_id,
            **caller.as_command_fields(),
        )
    )
    publish_best_effort(
        assignment_notification(transition.order),
        status_change_notification(transition.order),
    )
    return transition.order

