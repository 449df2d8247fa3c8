"""Logistics bounded context: shipment orders, courier assignment and the COD ledger.

Handles the delivery order lifecycle for a multi-tenant courier operation:
merchants create orders, admins assign couriers, couriers move orders through
pickup and transit, and delivery completion posts cash-on-delivery amounts to
the merchant balance and the courier wallet in the same transaction.
"""

from protean.domain import Domain

from logistics.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

logistics = Domain(name="logistics")
