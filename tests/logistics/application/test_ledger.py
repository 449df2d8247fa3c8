"""Ledger posting inside the status transaction."""

import pytest
from logistics.errors import InvalidAmount, InvalidTransition, LedgerTargetMissing, StorageUnavailable
from logistics.ledger.ledger import apply_delivery_ledger
from logistics.order import engine
from logistics.order.history import OrderHistory
from logistics.order.order import Order, OrderStatus
from logistics.shared.money import Money
from logistics.tenancy.profiles import CourierProfile, MerchantProfile
from protean import current_domain


def _in_transit(world):
    order = world.create_order(price="10", cod_amount="100")
    engine.assign_courier(order.id, world.courier_a_profile.id, world.admin_a)
    engine.update_order_status(order.id, "PICKED_UP", world.courier_a)
    return engine.update_order_status(order.id, "IN_TRANSIT", world.courier_a)


class TestLedgerTargetMissing:
    def test_missing_merchant_rolls_back_delivery(self, world):
        order = _in_transit(world)
        merchant_repo = current_domain.repository_for(MerchantProfile)
        merchant_repo._dao.delete(merchant_repo.get(world.merchant_a_profile.id))

        with pytest.raises(LedgerTargetMissing):
            engine.update_order_status(order.id, "DELIVERED", world.courier_a)

        assert current_domain.repository_for(Order).get(order.id).status == OrderStatus.IN_TRANSIT.value
        assert len(current_domain.repository_for(OrderHistory).for_order(order.id)) == 3
        courier = current_domain.repository_for(CourierProfile).get(world.courier_a_profile.id)
        assert courier.wallet_amount == Money.zero()

    def test_missing_courier_rolls_back_delivery(self, world):
        order = _in_transit(world)
        courier_repo = current_domain.repository_for(CourierProfile)
        courier_repo._dao.delete(courier_repo.get(world.courier_a_profile.id))

        with pytest.raises(LedgerTargetMissing):
            engine.update_order_status(order.id, "DELIVERED", world.courier_a)

        assert current_domain.repository_for(Order).get(order.id).status == OrderStatus.IN_TRANSIT.value
        merchant = current_domain.repository_for(MerchantProfile).get(world.merchant_a_profile.id)
        assert merchant.balance_amount == Money.zero()


class TestRollbackAfterWrites:
    def test_failure_while_posting_undoes_order_history_and_balance(self, world, monkeypatch):
        order = _in_transit(world)

        def lost_connection(self, order_id, cod_amount):
            raise ConnectionError("wallet store went away")

        monkeypatch.setattr(CourierProfile, "collect_cod", lost_connection)

        with pytest.raises(StorageUnavailable):
            engine.update_order_status(order.id, "DELIVERED", world.courier_a)

        assert current_domain.repository_for(Order).get(order.id).status == OrderStatus.IN_TRANSIT.value
        assert len(current_domain.repository_for(OrderHistory).for_order(order.id)) == 3
        merchant = current_domain.repository_for(MerchantProfile).get(world.merchant_a_profile.id)
        assert merchant.balance_amount == Money.zero()

    def test_amount_that_cannot_be_posted_exactly(self, world):
        order = _in_transit(world)
        repo = current_domain.repository_for(Order)
        stored = repo.get(order.id)
        stored.cod_amount = "1" * 39
        repo.add(stored)

        with pytest.raises(InvalidAmount) as exc:
            engine.update_order_status(order.id, "DELIVERED", world.courier_a)

        assert exc.value.details["order_id"] == order.id
        assert repo.get(order.id).status == OrderStatus.IN_TRANSIT.value
        merchant = current_domain.repository_for(MerchantProfile).get(world.merchant_a_profile.id)
        assert merchant.balance_amount == Money.zero()


class TestApplyDeliveryLedger:
    def test_refuses_orders_that_are_not_delivered(self, world):
        order = _in_transit(world)
        with pytest.raises(InvalidTransition):
            apply_delivery_ledger(order)

    def test_posting_describes_both_deltas(self, world):
        order = _in_transit(world)
        order.transition_to(OrderStatus.DELIVERED, changed_by="courier-a")

        posting = apply_delivery_ledger(order)

        assert posting.merchant_delta == Money.of("90")
        assert posting.merchant_balance == Money.of("90")
        assert posting.courier_id == world.courier_a_profile.id
        assert posting.courier_delta == Money.of("100")
        assert posting.courier_wallet == Money.of("100")
