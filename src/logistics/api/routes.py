"""FastAPI endpoints for the Logistics domain.

The authenticating gateway in front of the service verifies credentials and
forwards the caller as ``X-User-Id``, ``X-User-Role`` and ``X-Tenant-Id``.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, Header

from logistics.api.schemas import (
    AssignCourierRequest,
    CourierResponse,
    CourierWalletResponse,
    CreateOrderRequest,
    HistoryEntryResponse,
    MarkedReadResponse,
    MerchantBalanceResponse,
    MerchantResponse,
    NotificationResponse,
    OrderDetailResponse,
    OrderPageResponse,
    OrderResponse,
    ReconciliationResponse,
    RegisterCourierRequest,
    RegisterMerchantRequest,
    RegisterTenantRequest,
    TenantResponse,
    UpdateStatusRequest,
)
from logistics.errors import Forbidden
from logistics.ledger.statements import calculate_merchant_balance, get_courier_wallet, get_merchant_balance
from logistics.notifications.inbox import mark_all_notifications_as_read, mark_notification_as_read, unread_notifications
from logistics.order import engine
from logistics.order.queries import get_order, list_orders
from logistics.tenancy.caller import CallerIdentity, UserRole
from logistics.tenancy.registration import register_courier, register_merchant
from logistics.tenancy.tenant import get_tenant, list_tenants, register_tenant

order_router = APIRouter(prefix="/orders", tags=["orders"])
tenant_router = APIRouter(prefix="/tenants", tags=["tenants"])
profile_router = APIRouter(tags=["profiles"])
finance_router = APIRouter(prefix="/finance", tags=["finance"])
notification_router = APIRouter(prefix="/notifications", tags=["notifications"])


def get_caller(
    x_user_id: str = Header(...),
    x_user_role: str = Header(...),
    x_tenant_id: str | None = Header(None),
) -> CallerIdentity:
    try:
        role = UserRole(x_user_role.upper())
    except ValueError:
        raise Forbidden(f"Unknown role {x_user_role}", role=x_user_role) from None
    return CallerIdentity(user_id=x_user_id, role=role, tenant_id=x_tenant_id or None)


def _tenant_response(tenant) -> TenantResponse:
    return TenantResponse(id=str(tenant.id), name=tenant.name, slug=tenant.slug, created_at=tenant.created_at)


# --- Order endpoints ---


@order_router.post("", status_code=201, response_model=OrderResponse)
async def create_order(body: CreateOrderRequest, caller: CallerIdentity = Depends(get_caller)) -> OrderResponse:
    order = engine.create_order(
        caller,
        recipient_name=body.recipient_name,
        recipient_phone=body.recipient_phone,
        address=body.address,
        city=body.city,
        price=body.price,
        cod_amount=body.cod_amount,
    )
    return OrderResponse.from_order(order)


@order_router.get("", response_model=OrderPageResponse)
async def search_orders(
    status: str | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    page: int = 1,
    limit: int = 10,
    caller: CallerIdentity = Depends(get_caller),
) -> OrderPageResponse:
    result = list_orders(caller, status=status, start_date=start_date, end_date=end_date, page=page, limit=limit)
    return OrderPageResponse(
        items=[OrderResponse.from_order(order) for order in result.items],
        total=result.total,
        page=result.page,
        limit=result.limit,
        total_pages=result.total_pages,
    )


@order_router.get("/{order_id}", response_model=OrderDetailResponse)
async def read_order(order_id: str, caller: CallerIdentity = Depends(get_caller)) -> OrderDetailResponse:
    detail = get_order(order_id, caller)
    return OrderDetailResponse(
        **OrderResponse.from_order(detail.order).model_dump(),
        history=[
            HistoryEntryResponse(
                status_from=row.status_from,
                status_to=row.status_to,
                changed_by=str(row.changed_by),
                changed_at=row.changed_at,
                sequence=row.sequence,
            )
            for row in detail.history
        ],
    )


@order_router.patch("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: str, body: UpdateStatusRequest, caller: CallerIdentity = Depends(get_caller)
) -> OrderResponse:
    order = engine.update_order_status(order_id, body.status, caller)
    return OrderResponse.from_order(order)


@order_router.patch("/{order_id}/assign", response_model=OrderResponse)
async def assign_courier(
    order_id: str, body: AssignCourierRequest, caller: CallerIdentity = Depends(get_caller)
) -> OrderResponse:
    order = engine.assign_courier(order_id, body.courier_id, caller)
    return OrderResponse.from_order(order)


# --- Tenant endpoints ---


@tenant_router.post("", status_code=201, response_model=TenantResponse)
async def create_tenant(body: RegisterTenantRequest, caller: CallerIdentity = Depends(get_caller)) -> TenantResponse:
    return _tenant_response(register_tenant(caller, name=body.name, slug=body.slug))


@tenant_router.get("", response_model=list[TenantResponse])
async def all_tenants(caller: CallerIdentity = Depends(get_caller)) -> list[TenantResponse]:
    return [_tenant_response(tenant) for tenant in list_tenants(caller)]


@tenant_router.get("/{tenant_id}", response_model=TenantResponse)
async def read_tenant(tenant_id: str, caller: CallerIdentity = Depends(get_caller)) -> TenantResponse:
    return _tenant_response(get_tenant(tenant_id, caller))


# --- Profile endpoints ---


@profile_router.post("/merchants", status_code=201, response_model=MerchantResponse)
async def create_merchant(
    body: RegisterMerchantRequest, caller: CallerIdentity = Depends(get_caller)
) -> MerchantResponse:
    merchant = register_merchant(caller, user_id=body.user_id, company_name=body.company_name, tenant_id=body.tenant_id)
    return MerchantResponse(
        id=str(merchant.id),
        user_id=str(merchant.user_id),
        tenant_id=str(merchant.tenant_id),
        company_name=merchant.company_name,
        balance=str(merchant.balance_amount),
    )


@profile_router.post("/couriers", status_code=201, response_model=CourierResponse)
async def create_courier(body: RegisterCourierRequest, caller: CallerIdentity = Depends(get_caller)) -> CourierResponse:
    courier = register_courier(caller, user_id=body.user_id, vehicle_info=body.vehicle_info, tenant_id=body.tenant_id)
    return CourierResponse(
        id=str(courier.id),
        user_id=str(courier.user_id),
        tenant_id=str(courier.tenant_id),
        vehicle_info=courier.vehicle_info,
        wallet=str(courier.wallet_amount),
    )


# --- Finance endpoints ---


@finance_router.get("/merchants/{merchant_id}/balance", response_model=MerchantBalanceResponse)
async def merchant_balance(merchant_id: str, caller: CallerIdentity = Depends(get_caller)) -> MerchantBalanceResponse:
    statement = get_merchant_balance(merchant_id, caller)
    return MerchantBalanceResponse(
        merchant_id=statement.merchant_id,
        tenant_id=statement.tenant_id,
        company_name=statement.company_name,
        balance=str(statement.balance),
    )


@finance_router.get("/merchants/{merchant_id}/reconciliation", response_model=ReconciliationResponse)
async def merchant_reconciliation(
    merchant_id: str, caller: CallerIdentity = Depends(get_caller)
) -> ReconciliationResponse:
    result = calculate_merchant_balance(merchant_id, caller)
    return ReconciliationResponse(
        merchant_id=result.merchant_id,
        running_balance=str(result.running_balance),
        computed_balance=str(result.computed_balance),
        delivered_orders=result.delivered_orders,
        is_balanced=result.is_balanced,
    )


@finance_router.get("/couriers/{courier_id}/wallet", response_model=CourierWalletResponse)
async def courier_wallet(courier_id: str, caller: CallerIdentity = Depends(get_caller)) -> CourierWalletResponse:
    statement = get_courier_wallet(courier_id, caller)
    return CourierWalletResponse(
        courier_id=statement.courier_id,
        tenant_id=statement.tenant_id,
        wallet=str(statement.wallet),
    )


# --- Notification endpoints ---


@notification_router.get("/unread", response_model=list[NotificationResponse])
async def read_unread_notifications(caller: CallerIdentity = Depends(get_caller)) -> list[NotificationResponse]:
    return [NotificationResponse.from_notification(n) for n in unread_notifications(caller)]


@notification_router.patch("/mark-all-read", response_model=MarkedReadResponse)
async def mark_all_read(caller: CallerIdentity = Depends(get_caller)) -> MarkedReadResponse:
    return MarkedReadResponse(marked=mark_all_notifications_as_read(caller))


@notification_router.patch("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(notification_id: str, caller: CallerIdentity = Depends(get_caller)) -> NotificationResponse:
    return NotificationResponse.from_notification(mark_notification_as_read(notification_id, caller))
