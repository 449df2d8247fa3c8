"""Domain events for tenants and merchant/courier profiles."""

from protean.fields import DateTime, Identifier, String

from logistics.domain import logistics


@logistics.event(part_of="Tenant")
class TenantRegistered:
    """A new organisation was onboarded onto the platform."""

    __version__ = 1

    tenant_id: Identifier(required=True)
    name: String(required=True)
    slug: String(required=True)
    registered_at: DateTime(required=True)


@logistics.event(part_of="MerchantProfile")
class MerchantProfileRegistered:
    """A merchant user got a profile and a zero balance."""

    __version__ = 1

    merchant_id: Identifier(required=True)
    user_id: Identifier(required=True)
    tenant_id: Identifier(required=True)
    company_name: String(required=True)
    registered_at: DateTime(required=True)


@logistics.event(part_of="CourierProfile")
class CourierProfileRegistered:
    """A courier user got a profile and an empty wallet."""

    __version__ = 1

    courier_id: Identifier(required=True)
    user_id: Identifier(required=True)
    tenant_id: Identifier(required=True)
    vehicle_info: String()
    registered_at: DateTime(required=True)
