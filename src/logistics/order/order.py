"""Order aggregate, the shipment at the centre of the lifecycle engine.

State Machine (7 states):
    CREATED → ASSIGNED → PICKED_UP → IN_TRANSIT → DELIVERED
    CREATED/ASSIGNED → CANCELLED
    PICKED_UP/IN_TRANSIT → RETURNED

DELIVERED, CANCELLED and RETURNED are terminal. The move to ASSIGNED only
happens through ``assign_courier``, which sets the courier and the status in
one step.
"""

import time
from datetime import datetime
from enum import Enum
from uuid import uuid4

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, String, Text

from logistics.domain import logistics
from logistics.errors import InvalidAmount, InvalidTransition
from logistics.order.events import CourierAssigned, OrderCreated, OrderStatusChanged
from logistics.shared.money import Money, MoneyError


class OrderStatus(Enum):
    CREATED = "CREATED"
    ASSIGNED = "ASSIGNED"
    PICKED_UP = "PICKED_UP"
    IN_TRANSIT = "IN_TRANSIT"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"
    RETURNED = "RETURNED"


_VALID_TRANSITIONS = {
    OrderStatus.CREATED: {OrderStatus.ASSIGNED, OrderStatus.CANCELLED},
    OrderStatus.ASSIGNED: {OrderStatus.PICKED_UP, OrderStatus.CANCELLED},
    OrderStatus.PICKED_UP: {OrderStatus.IN_TRANSIT, OrderStatus.RETURNED},
    OrderStatus.IN_TRANSIT: {OrderStatus.DELIVERED, OrderStatus.RETURNED},
}

# Amounts are whole currency units with at most cent precision
MAX_AMOUNT_SCALE = 2
MAX_AMOUNT_INTEGER_DIGITS = 15

TERMINAL_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED, OrderStatus.RETURNED})

# Statuses in which the order must carry a courier
_COURIER_STATUSES = frozenset(
    {
        OrderStatus.ASSIGNED,
        OrderStatus.PICKED_UP,
        OrderStatus.IN_TRANSIT,
        OrderStatus.DELIVERED,
        OrderStatus.RETURNED,
    }
)


def allowed_transitions(status: OrderStatus) -> frozenset:
    return frozenset(_VALID_TRANSITIONS.get(status, ()))


def parse_status(value) -> OrderStatus:
    """Read a status from its wire name; unknown names are not reachable."""
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus(str(value).upper())
    except ValueError:
        raise InvalidTransition(f"Unknown order status {value!r}", target=value) from None


def parse_amount(value, field_name) -> Money:
    """Parse a price or COD amount: no floats, no negatives, cent precision at most."""
    try:
        amount = Money.of(value)
    except MoneyError as exc:
        raise InvalidAmount(f"{field_name} must be an exact decimal amount", field=field_name, value=value) from exc
    if amount.is_negative:
        raise InvalidAmount(f"{field_name} must not be negative", field=field_name, value=value)
    if amount.scale > MAX_AMOUNT_SCALE:
        raise InvalidAmount(
            f"{field_name} must have at most {MAX_AMOUNT_SCALE} decimal places", field=field_name, value=value
        )
    if amount.integer_digits > MAX_AMOUNT_INTEGER_DIGITS:
        raise InvalidAmount(
            f"{field_name} must have at most {MAX_AMOUNT_INTEGER_DIGITS} whole digits", field=field_name, value=value
        )
    return amount


def generate_tracking_code() -> str:
    return f"SHP-{int(time.time() * 1000)}-{uuid4().hex[:8].upper()}"


@logistics.aggregate
class Order:
    """A single COD shipment from a merchant to a recipient."""

    tenant_id: Identifier(required=True)
    tracking_code: String(required=True, max_length=40, unique=True)
    recipient_name: String(required=True, max_length=255)
    recipient_phone: String(required=True, max_length=30)
    address: Text(required=True)
    city: String(required=True, max_length=100)
    price: String(required=True, max_length=40)  # serialized decimal
    cod_amount: String(required=True, max_length=40)  # serialized decimal
    status: String(choices=OrderStatus, default=OrderStatus.CREATED.value)
    merchant_id: Identifier(required=True)
    courier_id: Identifier()
    created_at: DateTime(default=datetime.now)
    updated_at: DateTime(default=datetime.now)

    @invariant.post
    def amounts_must_not_be_negative(self):
        for field_name in ("price", "cod_amount"):
            value = getattr(self, field_name)
            if value is None:
                continue
            try:
                amount = Money.of(value)
            except MoneyError:
                raise ValidationError({field_name: [f"{field_name} must be a decimal amount"]}) from None
            if amount.is_negative:
                raise ValidationError({field_name: [f"{field_name} must not be negative"]})

    @invariant.post
    def courier_must_match_status(self):
        status = OrderStatus(self.status)
        if status == OrderStatus.CREATED and self.courier_id:
            raise ValidationError({"courier_id": ["A new order cannot have a courier"]})
        if status in _COURIER_STATUSES and not self.courier_id:
            raise ValidationError({"courier_id": [f"An order in {status.value} must have a courier"]})

    @classmethod
    def create(
        cls,
        tenant_id,
        merchant_id,
        recipient_name,
        recipient_phone,
        address,
        city,
        price,
        cod_amount,
    ):
        price_amount = parse_amount(price, "price")
        cod = parse_amount(cod_amount, "cod_amount")
        now = datetime.now()

        order = cls(
            tenant_id=tenant_id,
            merchant_id=merchant_id,
            tracking_code=generate_tracking_code(),
            recipient_name=recipient_name,
            recipient_phone=recipient_phone,
            address=address,
            city=city,
            price=str(price_amount),
            cod_amount=str(cod),
            status=OrderStatus.CREATED.value,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderCreated(
                order_id=str(order.id),
                tenant_id=str(tenant_id),
                merchant_id=str(merchant_id),
                tracking_code=order.tracking_code,
                price=order.price,
                cod_amount=order.cod_amount,
                status=order.status,
                created_at=now,
            )
        )
        return order

    @property
    def current_status(self) -> OrderStatus:
        return OrderStatus(self.status)

    @property
    def price_amount(self) -> Money:
        return Money.of(self.price)

    @property
    def cod(self) -> Money:
        return Money.of(self.cod_amount)

    @property
    def is_terminal(self) -> bool:
        return self.current_status in TERMINAL_STATUSES

    def can_transition_to(self, target_status: OrderStatus) -> bool:
        return target_status in allowed_transitions(self.current_status)

    def _assert_can_transition(self, target_status: OrderStatus):
        current = self.current_status
        if self.is_terminal:
            raise InvalidTransition(
                f"Order is already {current.value} and cannot move to {target_status.value}",
                order_id=self.id,
                current=current.value,
                target=target_status.value,
            )
        if not self.can_transition_to(target_status):
            raise InvalidTransition(
                f"Cannot transition from {current.value} to {target_status.value}",
                order_id=self.id,
                current=current.value,
                target=target_status.value,
            )

    def _status_changed(self, previous: OrderStatus, changed_by, now):
        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                tenant_id=str(self.tenant_id),
                tracking_code=self.tracking_code,
                previous_status=previous.value,
                new_status=self.status,
                changed_by=str(changed_by),
                changed_at=now,
            )
        )

    def transition_to(self, target_status: OrderStatus, changed_by) -> OrderStatus:
        """Move along the lifecycle and return the status left behind."""
        previous = self.current_status
        if target_status == OrderStatus.ASSIGNED:
            raise InvalidTransition(
                "Orders are assigned through courier assignment, not a status update",
                order_id=self.id,
                current=previous.value,
                target=target_status.value,
            )
        self._assert_can_transition(target_status)

        now = datetime.now()
        self.status = target_status.value
        self.updated_at = now
        self._status_changed(previous, changed_by, now)
        return previous

    def assign_courier(self, courier_id, assigned_by) -> OrderStatus:
        previous = self.current_status
        self._assert_can_transition(OrderStatus.ASSIGNED)

        now = datetime.now()
        with atomic_change(self):
            self.courier_id = courier_id
            self.status = OrderStatus.ASSIGNED.value
            self.updated_at = now

        self.raise_(
            CourierAssigned(
                order_id=str(self.id),
                tenant_id=str(self.tenant_id),
                courier_id=str(courier_id),
                assigned_by=str(assigned_by),
                assigned_at=now,
            )
        )
        self._status_changed(previous, assigned_by, now)
        return previous
