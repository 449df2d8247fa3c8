"""Order status updates, command and handler.

A status update persists the order, appends one history row and, when the
order reaches DELIVERED, posts the ledger, all in the handler's Unit of Work.
"""

from dataclasses import dataclass

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from logistics.domain import logistics
from logistics.ledger.ledger import LedgerPosting, apply_delivery_ledger, load_ledger_targets
from logistics.order.history import OrderHistory
from logistics.order.order import Order, OrderStatus, parse_status
from logistics.tenancy.caller import CallerIdentity, UserRole, require_role
from logistics.tenancy.scope import resolve_scope
from logistics.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Transition:
    """What a committed status change did."""

    order: Order
    previous_status: OrderStatus
    history: OrderHistory
    posting: LedgerPosting | None = None


@logistics.command(part_of="Order")
class UpdateOrderStatus:
    order_id: Identifier(required=True)
    target_status: String(required=True, max_length=20)
    caller_user_id: Identifier(required=True)
    caller_role: String(required=True, max_length=20)
    caller_tenant_id: Identifier()


def record_transition(order, previous_status, changed_by) -> OrderHistory:
    """Append the history row for a transition the order just made."""
    history_repo = current_domain.repository_for(OrderHistory)
    row = OrderHistory.record(
        order,
        status_from=previous_status,
        changed_by=changed_by,
        sequence=history_repo.next_sequence(order.id),
    )
    history_repo.add(row)
    return row


@logistics.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        caller = CallerIdentity.from_command(command)
        require_role(
            caller,
            UserRole.ADMIN,
            UserRole.COURIER,
            action="update order status",
        )
        target = parse_status(command.target_status)

        repo = current_domain.repository_for(Order)
        order = repo.get_scoped(command.order_id, resolve_scope(caller))

        previous = order.transition_to(target, changed_by=caller.user_id)

        targets = None
        if target == OrderStatus.DELIVERED:
            targets = load_ledger_targets(order)

        repo.add(order)
        history = record_transition(order, previous, caller.user_id)

        posting = None
        if targets is not None:
            posting = apply_delivery_ledger(order, targets)

        logger.info(
            "order_status_changed",
            order_id=str(order.id),
            tenant_id=str(order.tenant_id),
            status_from=previous.value,
            status_to=order.status,
            changed_by=caller.user_id,
        )
        return Transition(order=order, previous_status=previous, history=history, posting=posting)
