"""Pydantic request/response schemas for the Logistics API.

Money values travel as decimal strings in both directions.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

# --- Request Schemas ---


class CreateOrderRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "recipient_name": "Amina Yusuf",
                    "recipient_phone": "+20-100-555-0123",
                    "address": "12 Nile Corniche, Apt 4",
                    "city": "Cairo",
                    "price": "10.00",
                    "cod_amount": "100.00",
                }
            ]
        }
    }

    recipient_name: str = Field(..., max_length=255)
    recipient_phone: str = Field(..., max_length=30)
    address: str = Field(..., min_length=1)
    city: str = Field(..., max_length=100)
    price: str | int
    cod_amount: str | int


class UpdateStatusRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"status": "PICKED_UP"}]}}

    status: str = Field(..., max_length=20)


class AssignCourierRequest(BaseModel):
    courier_id: str


class RegisterTenantRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"name": "Acme Express", "slug": "acme-express"}]}}

    name: str = Field(..., max_length=255)
    slug: str = Field(..., max_length=100)


class RegisterMerchantRequest(BaseModel):
    user_id: str
    company_name: str = Field(..., max_length=255)
    tenant_id: str | None = None


class RegisterCourierRequest(BaseModel):
    user_id: str
    vehicle_info: str | None = Field(None, max_length=255)
    tenant_id: str | None = None


# --- Response Schemas ---


class OrderResponse(BaseModel):
    id: str
    tenant_id: str
    tracking_code: str
    recipient_name: str
    recipient_phone: str
    address: str
    city: str
    price: str
    cod_amount: str
    status: str
    merchant_id: str
    courier_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_order(cls, order) -> OrderResponse:
        return cls(
            id=str(order.id),
            tenant_id=str(order.tenant_id),
            tracking_code=order.tracking_code,
            recipient_name=order.recipient_name,
            recipient_phone=order.recipient_phone,
            address=order.address,
            city=order.city,
            price=str(order.price_amount),
            cod_amount=str(order.cod),
            status=order.status,
            merchant_id=str(order.merchant_id),
            courier_id=str(order.courier_id) if order.courier_id else None,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class HistoryEntryResponse(BaseModel):
    status_from: str
    status_to: str
    changed_by: str
    changed_at: datetime
    sequence: int


class OrderDetailResponse(OrderResponse):
    history: list[HistoryEntryResponse] = []


class OrderPageResponse(BaseModel):
    items: list[OrderResponse]
    total: int
    page: int
    limit: int
    total_pages: int


class TenantResponse(BaseModel):
    id: str
    name: str
    slug: str
    created_at: datetime | None = None


class MerchantResponse(BaseModel):
    id: str
    user_id: str
    tenant_id: str
    company_name: str
    balance: str


class CourierResponse(BaseModel):
    id: str
    user_id: str
    tenant_id: str
    vehicle_info: str | None = None
    wallet: str


class MerchantBalanceResponse(BaseModel):
    merchant_id: str
    tenant_id: str
    company_name: str
    balance: str


class CourierWalletResponse(BaseModel):
    courier_id: str
    tenant_id: str
    wallet: str


class ReconciliationResponse(BaseModel):
    merchant_id: str
    running_balance: str
    computed_balance: str
    delivered_orders: int
    is_balanced: bool


class NotificationResponse(BaseModel):
    id: str
    type: str
    order_id: str
    status: str | None = None
    message: str
    is_read: bool
    created_at: datetime | None = None

    @classmethod
    def from_notification(cls, notification) -> NotificationResponse:
        return cls(
            id=str(notification.id),
            type=notification.type,
            order_id=str(notification.order_id),
            status=notification.status,
            message=notification.message,
            is_read=notification.is_read,
            created_at=notification.created_at,
        )


class MarkedReadResponse(BaseModel):
    marked: int
