"""Scoped access to orders.

Every lookup takes a ``TenantScope``. An order outside the scope is reported
exactly like a missing one.
"""

from protean.exceptions import ObjectNotFoundError

from logistics.domain import logistics
from logistics.errors import NotFound
from logistics.order.order import Order, OrderStatus
from logistics.shared.paging import fetch_all
from logistics.tenancy.scope import TenantScope


@logistics.repository(part_of=Order)
class OrderRepository:
    def get_scoped(self, order_id, scope: TenantScope) -> Order:
        try:
            order = self.get(order_id)
        except ObjectNotFoundError:
            order = None
        if order is None or not scope.permits(order.tenant_id, order.merchant_id):
            raise NotFound(f"Order {order_id} not found", order_id=order_id)
        return order

    def search(self, scope: TenantScope, status=None, start_date=None, end_date=None, offset=0, limit=10):
        """One page of orders within ``scope``, newest first.

        Returns ``(items, total)`` where ``total`` counts every match.
        """
        criteria = scope.filters()
        if status is not None:
            criteria["status"] = status.value if isinstance(status, OrderStatus) else status
        if start_date is not None:
            criteria["created_at__gte"] = start_date
        if end_date is not None:
            criteria["created_at__lte"] = end_date

        result = self._dao.query.filter(**criteria).order_by("-created_at").offset(offset).limit(limit).all()
        return result.items, result.total

    def delivered_for_merchant(self, merchant_id) -> list[Order]:
        return fetch_all(self._dao.query.filter(merchant_id=str(merchant_id), status=OrderStatus.DELIVERED.value))
