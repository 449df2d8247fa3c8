from decimal import Decimal

import pytest
from logistics.errors import Forbidden, InvalidAmount, MerchantProfileMissing
from logistics.order import engine
from logistics.order.creation import CreateOrder
from logistics.order.order import Order, OrderStatus
from logistics.shared.money import Money
from logistics.tenancy.caller import CallerIdentity, UserRole
from logistics.tenancy.profiles import MerchantProfile
from protean import current_domain


class TestCreateOrder:
    def test_creates_order_in_callers_tenant(self, world):
        order = world.create_order()

        stored = current_domain.repository_for(Order).get(order.id)
        assert stored.status == OrderStatus.CREATED.value
        assert stored.tenant_id == str(world.tenant_a.id)
        assert stored.merchant_id == world.merchant_a_profile.id
        assert stored.courier_id is None
        assert stored.tracking_code.startswith("SHP-")

    def test_balance_is_unchanged(self, world):
        world.create_order(price="10", cod_amount="100")
        merchant = current_domain.repository_for(MerchantProfile).get(world.merchant_a_profile.id)
        assert merchant.balance_amount == Money.zero()

    def test_accepts_decimal_and_int_amounts(self, world):
        order = world.create_order(price=Decimal("12.34"), cod_amount=200)
        assert order.price_amount == Money.of("12.34")
        assert order.cod == Money.of("200")

    def test_float_amounts_are_rejected(self, world):
        with pytest.raises(InvalidAmount):
            world.create_order(price=9.99)

    def test_negative_cod_is_rejected(self, world):
        with pytest.raises(InvalidAmount):
            world.create_order(cod_amount="-5")
        assert current_domain.repository_for(Order)._dao.query.all().total == 0

    @pytest.mark.parametrize("cod_amount", ["1e50", "1e-50", "1" * 39])
    def test_unbookable_amounts_are_rejected_up_front(self, world, cod_amount):
        with pytest.raises(InvalidAmount) as exc:
            world.create_order(cod_amount=cod_amount)
        assert exc.value.code.value == "INVALID_AMOUNT"
        assert current_domain.repository_for(Order)._dao.query.all().total == 0

    def test_user_without_merchant_profile(self, world):
        stranger = CallerIdentity(user_id="nobody", role=UserRole.MERCHANT, tenant_id=str(world.tenant_a.id))
        with pytest.raises(MerchantProfileMissing):
            world.create_order(caller=stranger)

    def test_courier_cannot_create(self, world):
        with pytest.raises(Forbidden):
            world.create_order(caller=world.courier_a)

    def test_admin_with_merchant_profile_can_create(self, world):
        from logistics.tenancy.registration import register_merchant

        register_merchant(world.admin_a, user_id="admin-a", company_name="Admin Shop")
        order = world.create_order(caller=world.admin_a)
        assert order.tenant_id == str(world.tenant_a.id)

    def test_tracking_codes_differ(self, world):
        first = world.create_order()
        second = world.create_order()
        assert first.tracking_code != second.tracking_code

    def test_handler_guards_role_too(self, world):
        command = CreateOrder(
            recipient_name="A",
            recipient_phone="1",
            address="Somewhere",
            city="Cairo",
            price="1",
            cod_amount="1",
            **world.courier_a.as_command_fields(),
        )
        with pytest.raises(Forbidden):
            current_domain.process(command, asynchronous=False)
