"""Pydantic request/response schemas for the Marketplace API.

These are external contracts, kept separate from the internal Protean
commands and projections they are translated to.
"""

import json
from datetime import date, datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class ShippingAddressSchema(BaseModel):
    full_name: str
    street: str
    city: str
    zip_code: str
    country: str


class CartItemSchema(BaseModel):
    product_id: str
    name: str
    price: float = Field(ge=0)
    image_url: str | None = None
    seller_id: str
    seller_name: str | None = None
    selling_mode: str = "secure"
    condition: str = "new"
    quantity: int = Field(ge=1, default=1)


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class PlaceOrderRequest(BaseModel):
    items: list[CartItemSchema]
    total: float = Field(ge=0)
    shipping_address: ShippingAddressSchema
    discount_code: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [
                        {
                            "product_id": "prod-1",
                            "name": "Vintage Camera",
                            "price": 199.99,
                            "seller_id": "99",
                            "seller_name": "Camera Shop",
                            "selling_mode": "secure",
                            "condition": "used_good",
                            "quantity": 1,
                        }
                    ],
                    "total": 199.99,
                    "shipping_address": {
                        "full_name": "John Doe",
                        "street": "123 Main St",
                        "city": "Springfield",
                        "zip_code": "62701",
                        "country": "US",
                    },
                }
            ]
        }
    }


class RateSellerRequest(BaseModel):
    rating: int | None = Field(default=None, ge=1, le=5)
    comment: str | None = None


# ---------------------------------------------------------------------------
# Discount Code Request Schemas
# ---------------------------------------------------------------------------
class AddDiscountCodeRequest(BaseModel):
    code: str = Field(min_length=1, max_length=50)
    percentage: int = Field(ge=1, le=100)
    start_date: date
    expiry_date: date


class UpdateDiscountCodeRequest(BaseModel):
    code: str | None = Field(default=None, min_length=1, max_length=50)
    percentage: int | None = Field(default=None, ge=1, le=100)
    start_date: date | None = None
    expiry_date: date | None = None


class SetDiscountCodeActiveRequest(BaseModel):
    is_active: bool


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"


class DiscountCodeIdResponse(BaseModel):
    discount_code_id: str


class OrderResponse(BaseModel):
    """One participant's view of an order."""

    order_id: str
    role: str
    buyer_id: str
    seller_id: str
    status: str
    selling_mode: str
    items: list[dict]
    total: float
    shipping_address: dict
    discount_code: str | None = None
    buyer_rated: bool = False
    placed_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_entry(cls, entry) -> "OrderResponse":
        return cls(
            order_id=str(entry.order_id),
            role=entry.role,
            buyer_id=str(entry.buyer_id),
            seller_id=str(entry.seller_id),
            status=entry.status,
            selling_mode=entry.selling_mode,
            items=json.loads(entry.items) if entry.items else [],
            total=entry.total or 0.0,
            shipping_address=json.loads(entry.shipping_address) if entry.shipping_address else {},
            discount_code=entry.discount_code,
            buyer_rated=bool(entry.buyer_rated),
            placed_at=entry.placed_at,
            updated_at=entry.updated_at,
        )


class AdminOrderResponse(BaseModel):
    """The authoritative order record, as the admin panel sees it."""

    order_id: str
    buyer_id: str
    seller_id: str
    status: str
    selling_mode: str
    total: float
    item_count: int
    buyer_rated: bool = False
    placed_at: datetime | None = None

    @classmethod
    def from_order(cls, order) -> "AdminOrderResponse":
        return cls(
            order_id=str(order.id),
            buyer_id=str(order.buyer_id),
            seller_id=str(order.seller_id),
            status=order.status,
            selling_mode=order.selling_mode,
            total=order.total,
            item_count=sum(item.quantity for item in order.items),
            buyer_rated=order.is_rated,
            placed_at=order.placed_at,
        )


class DiscountCodeResponse(BaseModel):
    discount_code_id: str
    code: str
    percentage: int
    start_date: date
    expiry_date: date
    is_active: bool

    @classmethod
    def from_discount(cls, discount) -> "DiscountCodeResponse":
        return cls(
            discount_code_id=str(discount.id),
            code=discount.code,
            percentage=discount.percentage,
            start_date=discount.start_date,
            expiry_date=discount.expiry_date,
            is_active=bool(discount.is_active),
        )


class NotificationResponse(BaseModel):
    notification_id: str
    notification_type: str
    message: str
    link: str | None = None
    is_read: bool
    created_at: datetime | None = None

    @classmethod
    def from_notification(cls, notification) -> "NotificationResponse":
        return cls(
            notification_id=str(notification.id),
            notification_type=notification.notification_type,
            message=notification.render(),
            link=notification.link,
            is_read=bool(notification.is_read),
            created_at=notification.created_at,
        )


class NotificationListResponse(BaseModel):
    unread_count: int
    notifications: list[NotificationResponse]


class MarkAllReadResponse(BaseModel):
    marked: int


class SellerRatingResponse(BaseModel):
    order_id: str
    buyer_name: str | None = None
    rating: int
    comment: str | None = None
    created_at: datetime | None = None


class SellerProfileResponse(BaseModel):
    seller_id: str
    rating_count: int
    average_rating: float | None = None
    ratings: list[SellerRatingResponse]

    @classmethod
    def from_profile(cls, profile) -> "SellerProfileResponse":
        return cls(
            seller_id=str(profile.id),
            rating_count=profile.rating_count,
            average_rating=profile.average_rating,
            ratings=[
                SellerRatingResponse(
                    order_id=str(r.order_id),
                    buyer_name=r.buyer_name,
                    rating=r.rating,
                    comment=r.comment,
                    created_at=r.created_at,
                )
                for r in profile.ratings
            ],
        )
