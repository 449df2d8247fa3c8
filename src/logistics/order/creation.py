"""Order creation, command and handler."""

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from logistics.domain import logistics
from logistics.errors import MerchantProfileMissing
from logistics.order.order import Order
from logistics.tenancy.caller import CallerIdentity, UserRole, require_role
from logistics.tenancy.profiles import MerchantProfile
from logistics.utils.logging import get_logger

logger = get_logger(__name__)


@logistics.command(part_of="Order")
class CreateOrder:
    """Book a new COD shipment for the caller's merchant profile.

    Amounts travel as decimal strings and are parsed exactly.
    """

    recipient_name: String(required=True, max_length=255)
    recipient_phone: String(required=True, max_length=30)
    address: Text(required=True)
    city: String(required=True, max_length=100)
    price: String(required=True, max_length=40)
    cod_amount: String(required=True, max_length=40)
    caller_user_id: Identifier(required=True)
    caller_role: String(required=True, max_length=20)
    caller_tenant_id: Identifier()


@logistics.command_handler(part_of=Order)
class CreateOrderHandler:
    @handle(CreateOrder)
    def create_order(self, command):
        caller = CallerIdentity.from_command(command)
        require_role(caller, UserRole.MERCHANT, UserRole.ADMIN, action="create orders")

        merchant = current_domain.repository_for(MerchantProfile).find_by_user(caller.user_id)
        if merchant is None:
            raise MerchantProfileMissing(
                f"User {caller.user_id} has no merchant profile",
                user_id=caller.user_id,
            )

        order = Order.create(
            tenant_id=caller.tenant_id or merchant.tenant_id,
            merchant_id=merchant.id,
            recipient_name=command.recipient_name,
            recipient_phone=command.recipient_phone,
            address=command.address,
            city=command.city,
            price=command.price,
            cod_amount=command.cod_amount,
        )
        current_domain.repository_for(Order).add(order)

        logger.info(
            "order_created",
            order_id=str(order.id),
            tenant_id=str(order.tenant_id),
            merchant_id=str(merchant.id),
            tracking_code=order.tracking_code,
        )
        return order
