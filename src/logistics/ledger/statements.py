"""Ledger reads: merchant balances, courier wallets and reconciliation.

A profile outside the caller's scope reads as missing. Merchants may read
only their own balance and couriers only their own wallet.
"""

from dataclasses import dataclass

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from logistics.errors import NotFound
from logistics.order.order import Order
from logistics.shared.money import Money, total
from logistics.tenancy.caller import CallerIdentity, UserRole, require_role
from logistics.tenancy.profiles import CourierProfile, MerchantProfile
from logistics.tenancy.scope import can_access


@dataclass(frozen=True)
class MerchantStatement:
    merchant_id: str
    tenant_id: str
    company_name: str
    balance: Money


@dataclass(frozen=True)
class CourierStatement:
    courier_id: str
    tenant_id: str
    wallet: Money


@dataclass(frozen=True)
class Reconciliation:
    """Running balance next to the balance recomputed from delivered orders."""

    merchant_id: str
    running_balance: Money
    computed_balance: Money
    delivered_orders: int

    @property
    def is_balanced(self) -> bool:
        return self.running_balance == self.computed_balance


def _load_visible(profile_cls, profile_id, caller: CallerIdentity, owner_role: UserRole):
    try:
        profile = current_domain.repository_for(profile_cls).get(profile_id)
    except ObjectNotFoundError:
        profile = None

    visible = profile is not None and can_access(caller, profile.tenant_id)
    if visible and caller.role == owner_role:
        visible = str(profile.user_id) == caller.user_id
    if not visible:
        raise NotFound(f"{profile_cls.__name__} {profile_id} not found", profile_id=profile_id)
    return profile


def _load_merchant(merchant_id, caller: CallerIdentity) -> MerchantProfile:
    require_role(
        caller,
        UserRole.MERCHANT,
        UserRole.ADMIN,
        UserRole.SUPER_ADMIN,
        action="read merchant balances",
    )
    return _load_visible(MerchantProfile, merchant_id, caller, owner_role=UserRole.MERCHANT)


def get_merchant_balance(merchant_id, caller: CallerIdentity) -> MerchantStatement:
    merchant = _load_merchant(merchant_id, caller)
    return MerchantStatement(
        merchant_id=str(merchant.id),
        tenant_id=str(merchant.tenant_id),
        company_name=merchant.company_name,
        balance=merchant.balance_amount,
    )


def get_courier_wallet(courier_id, caller: CallerIdentity) -> CourierStatement:
    require_role(
        caller,
        UserRole.COURIER,
        UserRole.ADMIN,
        UserRole.SUPER_ADMIN,
        action="read courier wallets",
    )
    courier = _load_visible(CourierProfile, courier_id, caller, owner_role=UserRole.COURIER)
    return CourierStatement(
        courier_id=str(courier.id),
        tenant_id=str(courier.tenant_id),
        wallet=courier.wallet_amount,
    )


def calculate_merchant_balance(merchant_id, caller: CallerIdentity) -> Reconciliation:
    """Recompute the balance as the sum of ``cod - price`` over delivered orders."""
    merchant = _load_merchant(merchant_id, caller)
    delivered = current_domain.repository_for(Order).delivered_for_merchant(merchant.id)
    computed = total(order.cod - order.price_amount for order in delivered)
    return Reconciliation(
        merchant_id=str(merchant.id),
        running_balance=merchant.balance_amount,
        computed_balance=computed,
        delivered_orders=len(delivered),
    )
