"""Domain events for the Order aggregate.

Raised by the aggregate as it changes, persisted alongside it by the Unit of
Work, and available to any handler that wants to react to deliveries.
"""

from protean.fields import DateTime, Identifier, String

from logistics.domain import logistics


@logistics.event(part_of="Order")
class OrderCreated:
    """A merchant booked a new shipment."""

    __version__ = 1

    order_id = Identifier(required=True)
    tenant_id = Identifier(required=True)
    merchant_id = Identifier(required=True)
    tracking_code = String(required=True)
    price = String(required=True)  # serialized decimal
    cod_amount = String(required=True)  # serialized decimal
    status = String(required=True)
    created_at = DateTime(required=True)


@logistics.event(part_of="Order")
class CourierAssigned:
    """A courier of the order's tenant took over the shipment."""

    __version__ = 1

    order_id = Identifier(required=True)
    tenant_id = Identifier(required=True)
    courier_id = Identifier(required=True)
    assigned_by = Identifier(required=True)
    assigned_at = DateTime(required=True)


@logistics.event(part_of="Order")
class OrderStatusChanged:
    """The order moved one step along its lifecycle."""

    __version__ = 1

    order_id = Identifier(required=True)
    tenant_id = Identifier(required=True)
    tracking_code = String(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_by = Identifier(required=True)
    changed_at = DateTime(required=True)
