import pytest
from logistics.errors import Forbidden, NotFound
from logistics.ledger.statements import calculate_merchant_balance, get_courier_wallet, get_merchant_balance
from logistics.order import engine
from logistics.shared.money import Money


def _deliver(world, price, cod_amount):
    order = world.create_order(price=price, cod_amount=cod_amount)
    engine.assign_courier(order.id, world.courier_a_profile.id, world.admin_a)
    for status in ("PICKED_UP", "IN_TRANSIT", "DELIVERED"):
        engine.update_order_status(order.id, status, world.courier_a)
    return order


class TestMerchantBalance:
    def test_reads_running_balance(self, world):
        _deliver(world, "10", "100")
        statement = get_merchant_balance(world.merchant_a_profile.id, world.admin_a)
        assert statement.balance == Money.of("90")
        assert statement.company_name == "Alpha Goods"

    def test_merchant_reads_own_balance(self, world):
        statement = get_merchant_balance(world.merchant_a_profile.id, world.merchant_a)
        assert statement.balance == Money.zero()

    def test_merchant_cannot_read_another_merchant(self, world):
        from logistics.tenancy.registration import register_merchant

        other = register_merchant(world.admin_a, user_id="merchant-a2", company_name="Second Shop")
        with pytest.raises(NotFound):
            get_merchant_balance(other.id, world.merchant_a)

    def test_other_tenant_is_not_found(self, world):
        with pytest.raises(NotFound):
            get_merchant_balance(world.merchant_a_profile.id, world.admin_b)

    def test_courier_cannot_read_merchant_balance(self, world):
        with pytest.raises(Forbidden):
            get_merchant_balance(world.merchant_a_profile.id, world.courier_a)


class TestCourierWallet:
    def test_courier_reads_own_wallet(self, world):
        _deliver(world, "10", "100")
        statement = get_courier_wallet(world.courier_a_profile.id, world.courier_a)
        assert statement.wallet == Money.of("100")

    def test_admin_reads_wallet_in_tenant(self, world):
        assert get_courier_wallet(world.courier_a_profile.id, world.admin_a).wallet == Money.zero()

    def test_other_tenant_is_not_found(self, world):
        with pytest.raises(NotFound):
            get_courier_wallet(world.courier_a_profile.id, world.admin_b)

    def test_unknown_courier(self, world):
        with pytest.raises(NotFound):
            get_courier_wallet("no-such-courier", world.super_admin)


class TestReconciliation:
    def test_recomputed_balance_matches_running_balance(self, world):
        _deliver(world, "10", "100")
        _deliver(world, "7.50", "0")
        world.create_order(price="3", cod_amount="300")

        result = calculate_merchant_balance(world.merchant_a_profile.id, world.admin_a)

        assert result.delivered_orders == 2
        assert result.computed_balance == Money.of("82.50")
        assert result.running_balance == Money.of("82.50")
        assert result.is_balanced

    def test_no_deliveries(self, world):
        result = calculate_merchant_balance(world.merchant_a_profile.id, world.super_admin)
        assert result.computed_balance == Money.zero()
        assert result.is_balanced
