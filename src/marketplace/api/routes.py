"""FastAPI routes for the Marketplace — orders, ledgers, discount codes,
notifications and seller profiles.

Every route acts on behalf of the user named in the ``X-Actor-Id`` header.
Storefront failures are translated to HTTP status codes at this edge.
"""

from fastapi import APIRouter, Depends, Header, HTTPException

from marketplace.api.schemas import (
    AddDiscountCodeRequest,
    AdminOrderResponse,
    DiscountCodeIdResponse,
    DiscountCodeResponse,
    MarkAllReadResponse,
    NotificationListResponse,
    NotificationResponse,
    OrderResponse,
    PlaceOrderRequest,
    RateSellerRequest,
    SellerProfileResponse,
    SetDiscountCodeActiveRequest,
    StatusResponse,
    UpdateDiscountCodeRequest,
)
from marketplace.storefront import Actor, Failure, Outcome, Storefront
from marketplace.utils.logging import bind_actor

_FAILURE_STATUS = {
    Failure.NOT_FOUND: 404,
    Failure.UNAUTHORIZED: 403,
    Failure.CONFLICT: 409,
    Failure.INVALID: 422,
    Failure.STORAGE_FAILURE: 503,
}


def current_storefront(
    x_actor_id: str = Header(...),
    x_actor_name: str | None = Header(default=None),
    x_actor_role: str | None = Header(default=None),
) -> Storefront:
    """Storefront bound to the user making the request."""
    bind_actor(x_actor_id, actor_role=x_actor_role or "user")
    return Storefront(Actor(id=x_actor_id, name=x_actor_name or "", role=x_actor_role or "user"))


def _ensure(outcome: Outcome) -> Outcome:
    if not outcome:
        raise HTTPException(
            status_code=_FAILURE_STATUS[outcome.failure],
            detail={"failure": outcome.failure.value, "messages": outcome.messages},
        )
    return outcome


def _ensure_self(storefront: Storefront, user_id: str) -> None:
    if str(storefront.actor.id) != str(user_id):
        raise HTTPException(status_code=403, detail="Not allowed to read another user's records")


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderResponse)
async def place_order(body: PlaceOrderRequest, storefront: Storefront = Depends(current_storefront)) -> OrderResponse:
    outcome = _ensure(
        storefront.place_order(
            items=[item.model_dump() for item in body.items],
            total=body.total,
            shipping_address=body.shipping_address.model_dump(),
            discount_code=body.discount_code,
        )
    )
    return OrderResponse.from_entry(outcome.value)


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, storefront: Storefront = Depends(current_storefront)) -> OrderResponse:
    entry = storefront.get_order_by_id(order_id)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"Order {order_id} not found")
    return OrderResponse.from_entry(entry)


@order_router.post("/{order_id}/ship", response_model=StatusResponse)
async def mark_as_shipped(order_id: str, storefront: Storefront = Depends(current_storefront)) -> StatusResponse:
    _ensure(storefront.mark_as_shipped(order_id))
    return StatusResponse()


@order_router.post("/{order_id}/receipt", response_model=StatusResponse)
async def confirm_receipt(order_id: str, storefront: Storefront = Depends(current_storefront)) -> StatusResponse:
    _ensure(storefront.confirm_receipt(order_id))
    return StatusResponse()


@order_router.post("/{order_id}/rating", response_model=StatusResponse)
async def rate_order(
    order_id: str,
    body: RateSellerRequest,
    storefront: Storefront = Depends(current_storefront),
) -> StatusResponse:
    if body.rating is None:
        _ensure(storefront.add_rating_to_order(order_id))
    else:
        _ensure(storefront.rate_seller(order_id, rating=body.rating, comment=body.comment))
    return StatusResponse()


# ---------------------------------------------------------------------------
# Ledger Router
# ---------------------------------------------------------------------------
ledger_router = APIRouter(prefix="/ledgers", tags=["ledgers"])


@ledger_router.get("/{user_id}", response_model=list[OrderResponse])
async def get_ledger(user_id: str, storefront: Storefront = Depends(current_storefront)) -> list[OrderResponse]:
    _ensure_self(storefront, user_id)
    return [OrderResponse.from_entry(entry) for entry in storefront.orders()]


# ---------------------------------------------------------------------------
# Admin Router
# ---------------------------------------------------------------------------
admin_router = APIRouter(prefix="/admin", tags=["admin"])


@admin_router.get("/orders", response_model=list[AdminOrderResponse])
async def get_all_orders(storefront: Storefront = Depends(current_storefront)) -> list[AdminOrderResponse]:
    outcome = _ensure(storefront.get_all_orders_for_admin())
    return [AdminOrderResponse.from_order(order) for order in outcome.value]


# ---------------------------------------------------------------------------
# Discount Code Router
# ---------------------------------------------------------------------------
discount_router = APIRouter(prefix="/discount-codes", tags=["discount-codes"])


@discount_router.get("", response_model=list[DiscountCodeResponse])
async def list_discount_codes(storefront: Storefront = Depends(current_storefront)) -> list[DiscountCodeResponse]:
    return [DiscountCodeResponse.from_discount(d) for d in storefront.list_discount_codes()]


@discount_router.post("", status_code=201, response_model=DiscountCodeIdResponse)
async def add_discount_code(
    body: AddDiscountCodeRequest,
    storefront: Storefront = Depends(current_storefront),
) -> DiscountCodeIdResponse:
    outcome = _ensure(storefront.add_discount_code(body.model_dump()))
    return DiscountCodeIdResponse(discount_code_id=outcome.value)


@discount_router.put("/{discount_code_id}", response_model=StatusResponse)
async def update_discount_code(
    discount_code_id: str,
    body: UpdateDiscountCodeRequest,
    storefront: Storefront = Depends(current_storefront),
) -> StatusResponse:
    _ensure(storefront.update_discount_code(discount_code_id, body.model_dump()))
    return StatusResponse()


@discount_router.put("/{discount_code_id}/activation", response_model=StatusResponse)
async def set_discount_code_active(
    discount_code_id: str,
    body: SetDiscountCodeActiveRequest,
    storefront: Storefront = Depends(current_storefront),
) -> StatusResponse:
    _ensure(storefront.set_discount_code_active(discount_code_id, body.is_active))
    return StatusResponse()


@discount_router.delete("/{discount_code_id}", response_model=StatusResponse)
async def delete_discount_code(
    discount_code_id: str,
    storefront: Storefront = Depends(current_storefront),
) -> StatusResponse:
    _ensure(storefront.delete_discount_code(discount_code_id))
    return StatusResponse()


@discount_router.get("/{code}/validation", response_model=DiscountCodeResponse)
async def validate_discount_code(code: str, storefront: Storefront = Depends(current_storefront)) -> DiscountCodeResponse:
    discount = storefront.validate_discount_code(code)
    if discount is None:
        raise HTTPException(status_code=404, detail=f"Discount code {code} is not valid")
    return DiscountCodeResponse.from_discount(discount)


# ---------------------------------------------------------------------------
# Notification Router
# ---------------------------------------------------------------------------
notification_router = APIRouter(prefix="/notifications", tags=["notifications"])


@notification_router.get("/{user_id}", response_model=NotificationListResponse)
async def get_notifications(
    user_id: str,
    storefront: Storefront = Depends(current_storefront),
) -> NotificationListResponse:
    _ensure_self(storefront, user_id)
    return NotificationListResponse(
        unread_count=storefront.unread_count(),
        notifications=[NotificationResponse.from_notification(n) for n in storefront.notifications()],
    )


@notification_router.post("/{notification_id}/read", response_model=StatusResponse)
async def mark_read(notification_id: str, storefront: Storefront = Depends(current_storefront)) -> StatusResponse:
    _ensure(storefront.mark_notification_read(notification_id))
    return StatusResponse()


@notification_router.post("/{notification_id}/unread", response_model=StatusResponse)
async def mark_unread(notification_id: str, storefront: Storefront = Depends(current_storefront)) -> StatusResponse:
    _ensure(storefront.mark_notification_unread(notification_id))
    return StatusResponse()


@notification_router.post("/{user_id}/read-all", response_model=MarkAllReadResponse)
async def mark_all_read(user_id: str, storefront: Storefront = Depends(current_storefront)) -> MarkAllReadResponse:
    _ensure_self(storefront, user_id)
    outcome = _ensure(storefront.mark_all_notifications_read())
    return MarkAllReadResponse(marked=outcome.value or 0)


# ---------------------------------------------------------------------------
# Seller Router
# ---------------------------------------------------------------------------
seller_router = APIRouter(prefix="/sellers", tags=["sellers"])


@seller_router.get("/{seller_id}", response_model=SellerProfileResponse)
async def get_seller_profile(
    seller_id: str,
    storefront: Storefront = Depends(current_storefront),
) -> SellerProfileResponse:
    profile = storefront.seller_profile(seller_id)
    if profile is None:
        raise HTTPException(status_code=404, detail=f"Seller {seller_id} has no ratings yet")
    return SellerProfileResponse.from_profile(profile)
