"""Merchant and courier profiles, the two ledger accounts of the platform.

A MerchantProfile's ``balance`` is what the platform owes the merchant from
completed deliveries; a CourierProfile's ``wallet`` is the COD cash the courier
holds. Both are serialized decimals and only ever move through the ledger
posting of a delivered order (see ``logistics.ledger.ledger``).
"""

from datetime import datetime

from protean.fields import DateTime, Identifier, String

from logistics.domain import logistics
from logistics.ledger.events import CourierWalletCredited, MerchantBalanceCredited
from logistics.shared.money import Money
from logistics.tenancy.events import CourierProfileRegistered, MerchantProfileRegistered


@logistics.aggregate
class MerchantProfile:
    user_id: Identifier(required=True, unique=True)
    tenant_id: Identifier(required=True)
    company_name: String(required=True, max_length=255)
    balance: String(max_length=40, default="0")  # serialized decimal
    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def register(cls, user_id, tenant_id, company_name):
        now = datetime.now()
        merchant = cls(
            user_id=user_id,
            tenant_id=tenant_id,
            company_name=company_name,
            balance=str(Money.zero()),
            created_at=now,
            updated_at=now,
        )
        merchant.raise_(
            MerchantProfileRegistered(
                merchant_id=str(merchant.id),
                user_id=str(user_id),
                tenant_id=str(tenant_id),
                company_name=company_name,
                registered_at=now,
            )
        )
        return merchant

    @property
    def balance_amount(self) -> Money:
        return Money.of(self.balance)

    def credit_delivery(self, order_id, delta: Money) -> Money:
        """Apply one delivered order's ``cod - price`` to the balance."""
        new_balance = self.balance_amount + delta
        now = datetime.now()
        self.balance = str(new_balance)
        self.updated_at = now
        self.raise_(
            MerchantBalanceCredited(
                merchant_id=str(self.id),
                order_id=str(order_id),
                delta=str(delta),
                new_balance=str(new_balance),
                posted_at=now,
            )
        )
        return new_balance


@logistics.aggregate
class CourierProfile:
    user_id: Identifier(required=True, unique=True)
    tenant_id: Identifier(required=True)
    vehicle_info: String(max_length=255)
    wallet: String(max_length=40, default="0")  # serialized decimal
    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def register(cls, user_id, tenant_id, vehicle_info=None):
        now = datetime.now()
        courier = cls(
            user_id=user_id,
            tenant_id=tenant_id,
            vehicle_info=vehicle_info,
            wallet=str(Money.zero()),
            created_at=now,
            updated_at=now,
        )
        courier.raise_(
            CourierProfileRegistered(
                courier_id=str(courier.id),
                user_id=str(user_id),
                tenant_id=str(tenant_id),
                vehicle_info=vehicle_info,
                registered_at=now,
            )
        )
        return courier

    @property
    def wallet_amount(self) -> Money:
        return Money.of(self.wallet)

    def collect_cod(self, order_id, cod_amount: Money) -> Money:
        """Record that the courier now holds the COD cash of a delivered order."""
        new_wallet = self.wallet_amount + cod_amount
        now = datetime.now()
        self.wallet = str(new_wallet)
        self.updated_at = now
        self.raise_(
            CourierWalletCredited(
                courier_id=str(self.id),
                order_id=str(order_id),
                delta=str(cod_amount),
                new_wallet=str(new_wallet),
                posted_at=now,
            )
        )
        return new_wallet


@logistics.repository(part_of=MerchantProfile)
class MerchantProfileRepository:
    def find_by_user(self, user_id) -> MerchantProfile | None:
        """The profile owned by ``user_id``, if the user is a merchant."""
        results = self._dao.query.filter(user_id=str(user_id)).all()
        return results.items[0] if results.items else None


@logistics.repository(part_of=CourierProfile)
class CourierProfileRepository:
    def find_by_user(self, user_id) -> CourierProfile | None:
        results = self._dao.query.filter(user_id=str(user_id)).all()
        return results.items[0] if results.items else None
