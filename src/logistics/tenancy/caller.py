"""Caller identity and role guards.

The identity provider verifies credentials; the domain only ever sees the
resulting ``CallerIdentity``, passed explicitly into every operation.
"""

from dataclasses import dataclass
from enum import Enum

from logistics.errors import Forbidden


class UserRole(Enum):
    SUPER_ADMIN = "SUPER_ADMIN"
    ADMIN = "ADMIN"
    MERCHANT = "MERCHANT"
    COURIER = "COURIER"


@dataclass(frozen=True)
class CallerIdentity:
    user_id: str
    role: UserRole
    tenant_id: str | None = None

    def __post_init__(self):
        # Accept the raw role string carried by commands and headers
        if not isinstance(self.role, UserRole):
            object.__setattr__(self, "role", UserRole(self.role))

    @property
    def is_super_admin(self) -> bool:
        return self.role == UserRole.SUPER_ADMIN

    def as_command_fields(self) -> dict:
        """Flatten into the ``caller_*`` fields every write command carries."""
        return {
            "caller_user_id": self.user_id,
            "caller_role": self.role.value,
            "caller_tenant_id": self.tenant_id,
        }

    @classmethod
    def from_command(cls, command) -> "CallerIdentity":
        return cls(
            user_id=str(command.caller_user_id),
            role=command.caller_role,
            tenant_id=str(command.caller_tenant_id) if command.caller_tenant_id else None,
        )


def require_role(caller: CallerIdentity, *allowed: UserRole, action: str) -> None:
    """Raise ``Forbidden`` unless the caller holds one of ``allowed``."""
    if caller.role not in allowed:
        raise Forbidden(
            f"Role {caller.role.value} may not {action}",
            role=caller.role.value,
            allowed=",".join(role.value for role in allowed),
        )
