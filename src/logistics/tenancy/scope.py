"""Tenant isolation policy.

``scope_filter`` and ``can_access`` are pure: they look only at the caller's
role and tenant. ``resolve_scope`` adds the one narrowing that needs storage,
limiting merchants to the orders of their own profile. Every read and write
path in the engine goes through one of these before touching a repository.
"""

from dataclasses import dataclass

from protean.utils.globals import current_domain

from logistics.tenancy.caller import CallerIdentity, UserRole

# Matches no merchant id; used when a merchant caller has no profile yet
_NO_MERCHANT = "__no-merchant-profile__"


@dataclass(frozen=True)
class TenantScope:
    tenant_id: str | None = None
    merchant_id: str | None = None
    unrestricted: bool = False

    def permits(self, tenant_id, merchant_id=None) -> bool:
        if not self.unrestricted and str(tenant_id) != self.tenant_id:
            return False
        if self.merchant_id is not None and str(merchant_id) != self.merchant_id:
            return False
        return True

    def filters(self) -> dict:
        """Field filters to apply to an order query."""
        criteria = {}
        if not self.unrestricted:
            criteria["tenant_id"] = self.tenant_id
        if self.merchant_id is not None:
            criteria["merchant_id"] = self.merchant_id
        return criteria


def scope_filter(caller: CallerIdentity) -> TenantScope:
    """Restrict to the caller's tenant, or nothing at all for a super-admin."""
    if caller.is_super_admin:
        return TenantScope(unrestricted=True)
    return TenantScope(tenant_id=caller.tenant_id)


def can_access(caller: CallerIdentity, tenant_id) -> bool:
    if caller.is_super_admin:
        return True
    return caller.tenant_id is not None and str(tenant_id) == caller.tenant_id


def resolve_scope(caller: CallerIdentity) -> TenantScope:
    """``scope_filter`` plus merchant narrowing for MERCHANT callers."""
    scope = scope_filter(caller)
    if caller.role != UserRole.MERCHANT:
        return scope

    from logistics.tenancy.profiles import MerchantProfile

    merchant = current_domain.repository_for(MerchantProfile).find_by_user(caller.user_id)
    merchant_id = str(merchant.id) if merchant is not None else _NO_MERCHANT
    return TenantScope(tenant_id=scope.tenant_id, merchant_id=merchant_id)
