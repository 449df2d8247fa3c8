"""Ledger mutator: posts a delivered order's COD to the merchant and courier.

On delivery the merchant balance moves by ``cod_amount - price`` (which may be
negative when the delivery fee exceeds the collected cash) and, when a courier
carried the order, the courier wallet grows by the full ``cod_amount``.

Posting happens inside the status-change Unit of Work and only once per order:
DELIVERED is terminal, so the transition that reaches it cannot repeat.
"""

from dataclasses import dataclass

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from logistics.errors import InvalidAmount, InvalidTransition, LedgerTargetMissing
from logistics.order.order import OrderStatus
from logistics.shared.money import Money, MoneyError
from logistics.tenancy.profiles import CourierProfile, MerchantProfile
from logistics.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class LedgerTargets:
    merchant: MerchantProfile
    courier: CourierProfile | None = None


@dataclass(frozen=True)
class LedgerPosting:
    order_id: str
    merchant_id: str
    merchant_delta: Money
    merchant_balance: Money
    courier_id: str | None = None
    courier_delta: Money | None = None
    courier_wallet: Money | None = None


def load_ledger_targets(order) -> LedgerTargets:
    """Load the profiles a delivery of ``order`` will post to.

    Called before anything is written so a missing profile aborts the
    transition cleanly.
    """
    try:
        merchant = current_domain.repository_for(MerchantProfile).get(order.merchant_id)
    except ObjectNotFoundError:
        raise LedgerTargetMissing(
            f"Merchant {order.merchant_id} of order {order.id} no longer exists",
            order_id=order.id,
            merchant_id=order.merchant_id,
        ) from None

    courier = None
    if order.courier_id:
        try:
            courier = current_domain.repository_for(CourierProfile).get(order.courier_id)
        except ObjectNotFoundError:
            raise LedgerTargetMissing(
                f"Courier {order.courier_id} of order {order.id} no longer exists",
                order_id=order.id,
                courier_id=order.courier_id,
            ) from None

    return LedgerTargets(merchant=merchant, courier=courier)


def apply_delivery_ledger(order, targets: LedgerTargets | None = None) -> LedgerPosting:
    if order.current_status != OrderStatus.DELIVERED:
        raise InvalidTransition(
            f"Ledger postings are only made for delivered orders, order {order.id} is {order.status}",
            order_id=order.id,
            current=order.status,
        )
    if targets is None:
        targets = load_ledger_targets(order)

    courier_id = courier_delta = courier_wallet = None
    try:
        merchant_delta = order.cod - order.price_amount
        merchant_balance = targets.merchant.credit_delivery(order.id, merchant_delta)
        current_domain.repository_for(MerchantProfile).add(targets.merchant)

        if targets.courier is not None:
            courier_id = str(targets.courier.id)
            courier_delta = order.cod
            courier_wallet = targets.courier.collect_cod(order.id, courier_delta)
            current_domain.repository_for(CourierProfile).add(targets.courier)
    except MoneyError as exc:
        raise InvalidAmount(
            f"Order {order.id} amounts cannot be posted exactly", order_id=order.id, field="cod_amount"
        ) from exc

    posting = LedgerPosting(
        order_id=str(order.id),
        merchant_id=str(targets.merchant.id),
        merchant_delta=merchant_delta,
        merchant_balance=merchant_balance,
        courier_id=courier_id,
        courier_delta=courier_delta,
        courier_wallet=courier_wallet,
    )
    logger.info(
        "ledger_posted",
        order_id=posting.order_id,
        merchant_id=posting.merchant_id,
        merchant_delta=str(merchant_delta),
        courier_id=courier_id,
        courier_delta=str(courier_delta) if courier_delta is not None else None,
    )
    return posting
