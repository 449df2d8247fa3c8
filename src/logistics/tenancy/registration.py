"""Merchant and courier profile registration, commands and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from logistics.domain import logistics
from logistics.errors import Forbidden, NotFound
from logistics.order.transaction import run_command
from logistics.tenancy.caller import CallerIdentity, UserRole, require_role
from logistics.tenancy.profiles import CourierProfile, MerchantProfile
from logistics.tenancy.scope import can_access
from logistics.tenancy.tenant import Tenant


@logistics.command(part_of="MerchantProfile")
class RegisterMerchantProfile:
    user_id: Identifier(required=True)
    tenant_id: Identifier(required=True)
    company_name: String(required=True, max_length=255)
    caller_user_id: Identifier(required=True)
    caller_role: String(required=True, max_length=20)
    caller_tenant_id: Identifier()


@logistics.command(part_of="CourierProfile")
class RegisterCourierProfile:
    user_id: Identifier(required=True)
    tenant_id: Identifier(required=True)
    vehicle_info: String(max_length=255)
    caller_user_id: Identifier(required=True)
    caller_role: String(required=True, max_length=20)
    caller_tenant_id: Identifier()


def _authorize_registration(command):
    caller = CallerIdentity.from_command(command)
    require_role(caller, UserRole.ADMIN, UserRole.SUPER_ADMIN, action="register profiles")
    if not can_access(caller, command.tenant_id):
        raise Forbidden(
            "Profiles can only be registered within the caller's tenant",
            tenant_id=command.tenant_id,
        )
    try:
        current_domain.repository_for(Tenant).get(command.tenant_id)
    except ObjectNotFoundError:
        raise NotFound(f"Tenant {command.tenant_id} not found", tenant_id=command.tenant_id) from None


@logistics.command_handler(part_of=MerchantProfile)
class RegisterMerchantProfileHandler:
    @handle(RegisterMerchantProfile)
    def register_merchant(self, command):
        _authorize_registration(command)

        repo = current_domain.repository_for(MerchantProfile)
        if repo.find_by_user(command.user_id) is not None:
            raise ValidationError({"user_id": [f"User {command.user_id} already has a merchant profile"]})

        merchant = MerchantProfile.register(
            user_id=command.user_id,
            tenant_id=command.tenant_id,
            company_name=command.company_name,
        )
        repo.add(merchant)
        return merchant


@logistics.command_handler(part_of=CourierProfile)
class RegisterCourierProfileHandler:
    @handle(RegisterCourierProfile)
    def register_courier(self, command):
        _authorize_registration(command)

        repo = current_domain.repository_for(CourierProfile)
        if repo.find_by_user(command.user_id) is not None:
            raise ValidationError({"user_id": [f"User {command.user_id} already has a courier profile"]})

        courier = CourierProfile.register(
            user_id=command.user_id,
            tenant_id=command.tenant_id,
            vehicle_info=command.vehicle_info,
        )
        repo.add(courier)
        return courier


def register_merchant(caller: CallerIdentity, user_id, company_name, tenant_id=None) -> MerchantProfile:
    """Give ``user_id`` a merchant profile; admins default to their own tenant."""
    return run_command(
        RegisterMerchantProfile(
            user_id=user_id,
            tenant_id=tenant_id or caller.tenant_id,
            company_name=company_name,
            **caller.as_command_fields(),
        )
    )


def register_courier(caller: CallerIdentity, user_id, vehicle_info=None, tenant_id=None) -> CourierProfile:
    return run_command(
        RegisterCourierProfile(
            user_id=user_id,
            tenant_id=tenant_id or caller.tenant_id,
            vehicle_info=vehicle_info,
            **caller.as_command_fields(),
        )
    )
