import pytest
from logistics.errors import ErrorCode, Forbidden
from logistics.tenancy.caller import CallerIdentity, UserRole, require_role
from logistics.tenancy.scope import TenantScope, can_access, scope_filter


def _caller(role, tenant_id="tenant-a", user_id="user-1"):
    return CallerIdentity(user_id=user_id, role=role, tenant_id=tenant_id)


class TestCallerIdentity:
    def test_role_string_is_coerced(self):
        caller = CallerIdentity(user_id="u", role="COURIER", tenant_id="t")
        assert caller.role == UserRole.COURIER

    def test_unknown_role_rejected(self):
        with pytest.raises(ValueError):
            CallerIdentity(user_id="u", role="JANITOR")

    def test_command_fields_round_trip(self):
        caller = _caller(UserRole.ADMIN)
        fields = caller.as_command_fields()
        assert fields == {"caller_user_id": "user-1", "caller_role": "ADMIN", "caller_tenant_id": "tenant-a"}


class TestRequireRole:
    def test_allowed_role_passes(self):
        require_role(_caller(UserRole.ADMIN), UserRole.ADMIN, UserRole.SUPER_ADMIN, action="do things")

    def test_other_role_is_forbidden(self):
        with pytest.raises(Forbidden) as exc:
            require_role(_caller(UserRole.MERCHANT), UserRole.ADMIN, action="assign couriers")
        assert exc.value.code == ErrorCode.FORBIDDEN
        assert exc.value.http_status == 403


class TestScopeFilter:
    @pytest.mark.parametrize("role", [UserRole.ADMIN, UserRole.MERCHANT, UserRole.COURIER])
    def test_restricts_to_own_tenant(self, role):
        scope = scope_filter(_caller(role))
        assert scope == TenantScope(tenant_id="tenant-a")
        assert scope.filters() == {"tenant_id": "tenant-a"}

    def test_super_admin_is_unrestricted(self):
        scope = scope_filter(_caller(UserRole.SUPER_ADMIN, tenant_id=None))
        assert scope.unrestricted
        assert scope.filters() == {}

    def test_is_pure(self):
        caller = _caller(UserRole.ADMIN)
        assert scope_filter(caller) == scope_filter(caller)


class TestTenantScope:
    def test_permits_own_tenant(self):
        assert TenantScope(tenant_id="tenant-a").permits("tenant-a")

    def test_denies_other_tenant(self):
        assert not TenantScope(tenant_id="tenant-a").permits("tenant-b")

    def test_merchant_narrowing(self):
        scope = TenantScope(tenant_id="tenant-a", merchant_id="m-1")
        assert scope.permits("tenant-a", "m-1")
        assert not scope.permits("tenant-a", "m-2")
        assert scope.filters() == {"tenant_id": "tenant-a", "merchant_id": "m-1"}

    def test_unrestricted_permits_everything(self):
        assert TenantScope(unrestricted=True).permits("any-tenant", "any-merchant")


class TestCanAccess:
    def test_same_tenant(self):
        assert can_access(_caller(UserRole.ADMIN), "tenant-a")

    def test_other_tenant(self):
        assert not can_access(_caller(UserRole.ADMIN), "tenant-b")

    def test_super_admin(self):
        assert can_access(_caller(UserRole.SUPER_ADMIN, tenant_id=None), "tenant-b")

    def test_caller_without_tenant(self):
        assert not can_access(_caller(UserRole.ADMIN, tenant_id=None), "tenant-a")
