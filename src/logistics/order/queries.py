"""Read side of the order engine: single order lookup and paged listing.

Both go through the caller's resolved scope, so merchants only ever see
their own orders and nobody but a super-admin sees another tenant's.
"""

import math
from dataclasses import dataclass

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from logistics.order.history import OrderHistory
from logistics.order.order import Order, OrderStatus
from logistics.tenancy.caller import CallerIdentity
from logistics.tenancy.scope import resolve_scope

MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class OrderDetail:
    order: Order
    history: list  # newest first


@dataclass(frozen=True)
class OrderPage:
    items: list
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


def _status_filter(value) -> OrderStatus:
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus(str(value).upper())
    except ValueError:
        raise ValidationError({"status": [f"Unknown order status {value!r}"]}) from None


def get_order(order_id, caller: CallerIdentity) -> OrderDetail:
    order = current_domain.repository_for(Order).get_scoped(order_id, resolve_scope(caller))
    history = current_domain.repository_for(OrderHistory).for_order(order.id)
    return OrderDetail(order=order, history=list(reversed(history)))


def list_orders(
    caller: CallerIdentity,
    status=None,
    start_date=None,
    end_date=None,
    page: int = 1,
    limit: int = 10,
) -> OrderPage:
    page = max(int(page), 1)
    limit = min(max(int(limit), 1), MAX_PAGE_SIZE)

    items, total = current_domain.repository_for(Order).search(
        resolve_scope(caller),
        status=_status_filter(status) if status else None,
        start_date=start_date,
        end_date=end_date,
        offset=(page - 1) * limit,
        limit=limit,
    )
    return OrderPage(items=items, total=total, page=page, limit=limit)
