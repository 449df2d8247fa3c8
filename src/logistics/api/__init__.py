"""Logistics domain API package."""

from logistics.api.errors import register_error_handlers
from logistics.api.routes import finance_router, notification_router, order_router, profile_router, tenant_router

ROUTERS = [order_router, tenant_router, profile_router, finance_router, notification_router]

__all__ = [
    "ROUTERS",
    "finance_router",
    "notification_router",
    "order_router",
    "profile_router",
    "register_error_handlers",
    "tenant_router",
]
