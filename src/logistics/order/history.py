"""Append-only audit trail of order transitions.

One ``OrderHistory`` row is written per transition, in the same Unit of Work
as the order itself. Rows are never updated. Ordering them by
``(changed_at, sequence)`` and replaying from CREATED reconstructs the path an
order took through the state machine.
"""

from datetime import datetime

from protean.fields import DateTime, Identifier, Integer, String

from logistics.domain import logistics
from logistics.order.order import OrderStatus, allowed_transitions
from logistics.shared.paging import fetch_all


class HistoryReplayError(ValueError):
    """The history rows do not describe a legal path from CREATED."""


@logistics.aggregate
class OrderHistory:
    order_id: Identifier(required=True)
    tenant_id: Identifier(required=True)
    status_from: String(required=True, choices=OrderStatus)
    status_to: String(required=True, choices=OrderStatus)
    changed_by: Identifier(required=True)
    changed_at: DateTime(required=True)
    sequence: Integer(required=True, min_value=1)

    @classmethod
    def record(cls, order, status_from: OrderStatus, changed_by, sequence, changed_at=None):
        return cls(
            order_id=str(order.id),
            tenant_id=str(order.tenant_id),
            status_from=status_from.value,
            status_to=order.status,
            changed_by=str(changed_by),
            changed_at=changed_at or order.updated_at or datetime.now(),
            sequence=sequence,
        )


@logistics.repository(part_of=OrderHistory)
class OrderHistoryRepository:
    def for_order(self, order_id) -> list[OrderHistory]:
        """All rows of one order, oldest first."""
        rows = fetch_all(self._dao.query.filter(order_id=str(order_id)))
        return sorted(rows, key=lambda row: (row.changed_at, row.sequence))

    def next_sequence(self, order_id) -> int:
        rows = self.for_order(order_id)
        return max((row.sequence for row in rows), default=0) + 1


def replay_status_path(rows) -> list[OrderStatus]:
    """Rebuild the sequence of statuses an order went through.

    Always starts with CREATED. Raises ``HistoryReplayError`` when a row does
    not continue from the previous status or follows an edge the state
    machine does not have.
    """
    path = [OrderStatus.CREATED]
    for row in sorted(rows, key=lambda r: (r.changed_at, r.sequence)):
        status_from = OrderStatus(row.status_from)
        status_to = OrderStatus(row.status_to)
        if status_from != path[-1]:
            raise HistoryReplayError(
                f"Row {row.sequence} starts at {status_from.value} but the order was {path[-1].value}"
            )
        if status_to not in allowed_transitions(status_from):
            raise HistoryReplayError(f"Row {row.sequence} follows illegal edge {status_from.value} -> {status_to.value}")
        path.append(status_to)
    return path
