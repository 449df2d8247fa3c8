"""Tenant aggregate, registration command and the super-admin tenant reads."""

import re
from datetime import datetime

from protean import handle, invariant
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, Identifier, String
from protean.utils.globals import current_domain

from logistics.domain import logistics
from logistics.errors import NotFound
from logistics.order.transaction import run_command
from logistics.shared.paging import fetch_all
from logistics.tenancy.caller import CallerIdentity, UserRole, require_role
from logistics.tenancy.events import TenantRegistered

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


@logistics.aggregate
class Tenant:
    """An organisation on the platform. Owns orders, merchants and couriers."""

    name: String(required=True, max_length=255)
    slug: String(required=True, max_length=100, unique=True)
    created_at: DateTime(default=datetime.now)

    @invariant.post
    def slug_must_be_url_safe(self):
        if self.slug and not SLUG_PATTERN.match(self.slug):
            raise ValidationError({"slug": ["Slug must contain only lowercase alphanumeric characters and hyphens"]})

    @classmethod
    def register(cls, name, slug):
        now = datetime.now()
        tenant = cls(name=name, slug=slug, created_at=now)
        tenant.raise_(
            TenantRegistered(
                tenant_id=str(tenant.id),
                name=name,
                slug=slug,
                registered_at=now,
            )
        )
        return tenant


@logistics.repository(part_of=Tenant)
class TenantRepository:
    def find_by_slug(self, slug) -> Tenant | None:
        results = self._dao.query.filter(slug=slug).all()
        return results.items[0] if results.items else None

    def all_tenants(self) -> list[Tenant]:
        return fetch_all(self._dao.query.order_by("-created_at"))


@logistics.command(part_of="Tenant")
class RegisterTenant:
    name: String(required=True, max_length=255)
    slug: String(required=True, max_length=100)
    caller_user_id: Identifier(required=True)
    caller_role: String(required=True, max_length=20)
    caller_tenant_id: Identifier()


@logistics.command_handler(part_of=Tenant)
class RegisterTenantHandler:
    @handle(RegisterTenant)
    def register_tenant(self, command):
        caller = CallerIdentity.from_command(command)
        require_role(caller, UserRole.SUPER_ADMIN, action="register tenants")

        repo = current_domain.repository_for(Tenant)
        if repo.find_by_slug(command.slug) is not None:
            raise ValidationError({"slug": [f"Tenant slug '{command.slug}' is already taken"]})

        tenant = Tenant.register(name=command.name, slug=command.slug)
        repo.add(tenant)
        return tenant


def register_tenant(caller: CallerIdentity, name, slug) -> Tenant:
    return run_command(RegisterTenant(name=name, slug=slug, **caller.as_command_fields()))


def list_tenants(caller: CallerIdentity) -> list[Tenant]:
    require_role(caller, UserRole.SUPER_ADMIN, action="list tenants")
    return current_domain.repository_for(Tenant).all_tenants()


def get_tenant(tenant_id, caller: CallerIdentity) -> Tenant:
    require_role(caller, UserRole.SUPER_ADMIN, action="read tenants")
    try:
        return current_domain.repository_for(Tenant).get(tenant_id)
    except ObjectNotFoundError:
        raise NotFound(f"Tenant {tenant_id} not found", tenant_id=tenant_id) from None
