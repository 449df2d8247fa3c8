"""Courier assignment, command and handler.

Only an ADMIN may assign, only a courier of the admin's own tenant may be
assigned, and only an order still in CREATED can take one.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from logistics.domain import logistics
from logistics.errors import Forbidden, NotFound
from logistics.order.lifecycle import Transition, record_transition
from logistics.order.order import Order
from logistics.tenancy.caller import CallerIdentity, UserRole, require_role
from logistics.tenancy.profiles import CourierProfile
from logistics.tenancy.scope import resolve_scope
from logistics.utils.logging import get_logger

logger = get_logger(__name__)


@logistics.command(part_of="Order")
class AssignCourier:
    order_id: Identifier(required=True)
    courier_id: Identifier(required=True)
    caller_user_id: Identifier(required=True)
    caller_role: String(required=True, max_length=20)
    caller_tenant_id: Identifier()


@logistics.command_handler(part_of=Order)
class AssignCourierHandler:
    @handle(AssignCourier)
    def assign_courier(self, command):
        caller = CallerIdentity.from_command(command)
        require_role(caller, UserRole.ADMIN, action="assign couriers")

        repo = current_domain.repository_for(Order)
        order = repo.get_scoped(command.order_id, resolve_scope(caller))

        try:
            courier = current_domain.repository_for(CourierProfile).get(command.courier_id)
        except ObjectNotFoundError:
            raise NotFound(f"Courier {command.courier_id} not found", courier_id=command.courier_id) from None

        if str(courier.tenant_id) != caller.tenant_id:
            raise Forbidden(
                "Couriers can only be assigned within the caller's tenant",
                courier_id=command.courier_id,
            )

        previous = order.assign_courier(courier.id, assigned_by=caller.user_id)
        repo.add(order)
        history = record_transition(order, previous, caller.user_id)

        logger.info(
            "courier_assigned",
            order_id=str(order.id),
            tenant_id=str(order.tenant_id),
            courier_id=str(courier.id),
            assigned_by=caller.user_id,
        )
        return Transition(order=order, previous_status=previous, history=history)
