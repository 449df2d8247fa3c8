import os

import pytest


@pytest.fixture(scope="session")
def _logistics_domain(request):
    """Initialize the logistics domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from logistics.domain import logistics

    logistics.init()
    return logistics


@pytest.fixture(scope="session", autouse=True)
def setup_db(_logistics_domain):
    from logistics.utils.db import drop_db, setup_db

    setup_db(_logistics_domain)

    yield

    drop_db(_logistics_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_logistics_domain):
    """Push domain context before each test, cleanup after."""
    from logistics.notifications import reset_notifier

    ctx = _logistics_domain.domain_context()
    ctx.push()
    reset_notifier()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    for _, broker in current_domain.brokers.items():
        broker._data_reset()

    current_domain.event_store.store._data_reset()
    reset_notifier()
    ctx.pop()


@pytest.fixture()
def notifier():
    """The in-memory sink the engine publishes to during this test."""
    from logistics.notifications import set_notifier
    from logistics.notifications.memory_sink import InMemoryNotificationSink

    sink = InMemoryNotificationSink()
    set_notifier(sink)
    return sink


@pytest.fixture()
def inbox():
    """Route published notifications into the stored per-recipient inbox."""
    from logistics.notifications import set_notifier
    from logistics.notifications.inbox import InboxNotificationSink

    sink = InboxNotificationSink()
    set_notifier(sink)
    return sink


class World:
    """Two tenants, each with an admin, a merchant and a courier."""

    def __init__(self):
        from logistics.tenancy.caller import CallerIdentity, UserRole
        from logistics.tenancy.registration import register_courier, register_merchant
        from logistics.tenancy.tenant import register_tenant

        self.super_admin = CallerIdentity(user_id="root", role=UserRole.SUPER_ADMIN)

        self.tenant_a = register_tenant(self.super_admin, name="Acme Express", slug="acme-express")
        self.tenant_b = register_tenant(self.super_admin, name="Bolt Couriers", slug="bolt-couriers")
        tenant_a_id = str(self.tenant_a.id)
        tenant_b_id = str(self.tenant_b.id)

        self.admin_a = CallerIdentity(user_id="admin-a", role=UserRole.ADMIN, tenant_id=tenant_a_id)
        self.admin_b = CallerIdentity(user_id="admin-b", role=UserRole.ADMIN, tenant_id=tenant_b_id)

        self.merchant_a = CallerIdentity(user_id="merchant-a", role=UserRole.MERCHANT, tenant_id=tenant_a_id)
        self.merchant_b = CallerIdentity(user_id="merchant-b", role=UserRole.MERCHANT, tenant_id=tenant_b_id)
        self.merchant_a_profile = register_merchant(self.admin_a, user_id="merchant-a", company_name="Alpha Goods")
        self.merchant_b_profile = register_merchant(self.admin_b, user_id="merchant-b", company_name="Beta Wares")

        self.courier_a = CallerIdentity(user_id="courier-a", role=UserRole.COURIER, tenant_id=tenant_a_id)
        self.courier_b = CallerIdentity(user_id="courier-b", role=UserRole.COURIER, tenant_id=tenant_b_id)
        self.courier_a_profile = register_courier(self.admin_a, user_id="courier-a", vehicle_info="Scooter")
        self.courier_b_profile = register_courier(self.admin_b, user_id="courier-b", vehicle_info="Van")

    def create_order(self, caller=None, price="10", cod_amount="100", **overrides):
        from logistics.order import engine

        fields = {
            "recipient_name": "Amina Yusuf",
            "recipient_phone": "+20-100-555-0123",
            "address": "12 Nile Corniche",
            "city": "Cairo",
        }
        fields.update(overrides)
        return engine.create_order(caller or self.merchant_a, price=price, cod_amount=cod_amount, **fields)


@pytest.fixture()
def world():
    return World()
