"""Order aggregate (CQRS) — the single authoritative record of a marketplace sale.

An order is stored once, keyed by its id. Buyer and seller each see a
role-specific view of it through their ledgers (see ``marketplace.ledger``),
so there is never a second physical copy to keep in step.

State Machine:
    direct:  → COMPLETED (final at creation, the item changes hands outside the platform)
    secure:  → PAYMENT_HELD → SHIPPED → COMPLETED (+ one-time buyer rating)

The buyer's view renders PAYMENT_HELD as AWAITING_SHIPMENT. PENDING,
DELIVERED and CANCELLED are part of the vocabulary but no operation reaches them.
"""

import json
import time
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    ValueObject,
)

from marketplace.domain import marketplace
from marketplace.errors import UnauthorizedActionError
from marketplace.order.events import (
    OrderPlaced,
    OrderShipped,
    ReceiptConfirmed,
    SellerRated,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "Pending"
    AWAITING_SHIPMENT = "AwaitingShipment"
    PAYMENT_HELD = "PaymentHeld"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class SellingMode(Enum):
    SECURE = "secure"
    DIRECT = "direct"


class ProductCondition(Enum):
    NEW = "new"
    USED_LIKE_NEW = "used_like_new"
    USED_GOOD = "used_good"
    USED_ACCEPTABLE = "used_acceptable"


class ParticipantRole(Enum):
    BUYER = "buyer"
    SELLER = "seller"


# State machine transition map (canonical statuses only)
_VALID_TRANSITIONS = {
    OrderStatus.PAYMENT_HELD: {OrderStatus.SHIPPED},
    OrderStatus.SHIPPED: {OrderStatus.COMPLETED},
    OrderStatus.COMPLETED: set(),  # Terminal
    OrderStatus.PENDING: set(),
    OrderStatus.AWAITING_SHIPMENT: set(),  # View-only status
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: set(),  # Terminal
}

_ITEM_FIELDS = (
    "product_id",
    "name",
    "price",
    "image_url",
    "seller_id",
    "seller_name",
    "selling_mode",
    "condition",
    "quantity",
)

_last_order_stamp = 0


def next_order_id() -> str:
    """Time-derived order id: epoch microseconds, strictly increasing in this process."""
    global _last_order_stamp

    stamp = time.time_ns() // 1000
    if stamp <= _last_order_stamp:
        stamp = _last_order_stamp + 1
    _last_order_stamp = stamp
    return str(stamp)


def initial_status_for(selling_mode: str) -> OrderStatus:
    if SellingMode(selling_mode) == SellingMode.SECURE:
        return OrderStatus.PAYMENT_HELD
    return OrderStatus.COMPLETED


def project_status(status: str, role: str) -> str:
    """Render a canonical status the way the given participant sees it."""
    if role == ParticipantRole.BUYER.value and status == OrderStatus.PAYMENT_HELD.value:
        return OrderStatus.AWAITING_SHIPMENT.value
    return status


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@marketplace.value_object(part_of="Order")
class ShippingAddress:
    """Delivery address captured at checkout. Never changes once the order is placed."""

    full_name = String(required=True, max_length=255, sanitize=False)
    street = String(required=True, max_length=255, sanitize=False)
    city = String(required=True, max_length=100, sanitize=False)
    zip_code = String(required=True, max_length=20, sanitize=False)
    country = String(required=True, max_length=100, sanitize=False)


@marketplace.value_object(part_of="Order")
class BuyerRating:
    rated = Boolean(default=False)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@marketplace.entity(part_of="Order")
class OrderItem:
    """Product data frozen at purchase time, plus the purchased quantity.

    Not a reference into the live catalogue: the listing may change or be
    removed after the sale without affecting the order.
    """

    product_id = Identifier(required=True)
    name = String(required=True, max_length=255, sanitize=False)
    price = Float(required=True, min_value=0.0)
    image_url = String(max_length=1024, sanitize=False)
    seller_id = Identifier(required=True)
    seller_name = String(max_length=255, sanitize=False)
    selling_mode = String(choices=SellingMode, required=True)
    condition = String(choices=ProductCondition, default=ProductCondition.NEW.value)
    quantity = Integer(required=True, min_value=1)

    def snapshot(self) -> dict:
        return {
            "product_id": str(self.product_id),
            "name": self.name,
            "price": self.price,
            "image_url": self.image_url,
            "seller_id": str(self.seller_id),
            "seller_name": self.seller_name,
            "selling_mode": self.selling_mode,
            "condition": self.condition,
            "quantity": self.quantity,
        }


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@marketplace.aggregate
class Order:
    buyer_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    items = HasMany(OrderItem)
    total = Float(required=True, min_value=0.0)
    discount_code = String(max_length=50)
    shipping_address = ValueObject(ShippingAddress)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    selling_mode = String(choices=SellingMode, required=True)
    buyer_rating = ValueObject(BuyerRating)
    placed_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, buyer_id, items_data, total, shipping_address, discount_code=None):
        """Create an order from a checked-out cart.

        The first item decides the seller and the selling mode of the whole
        order; secure orders start with the payment held by the platform,
        direct orders are final immediately.

        Args:
            buyer_id: The user checking out.
            items_data: List of dicts with product_id, name, price, seller_id,
                        selling_mode, quantity and optionally image_url,
                        seller_name, condition.
            total: Amount charged, already net of any discount.
            shipping_address: Dict with full_name, street, city, zip_code, country.
            discount_code: Code applied at checkout, if any.
        """
        if not items_data:
            raise ValidationError({"items": ["An order needs at least one item"]})

        first = items_data[0]
        selling_mode = first.get("selling_mode")
        if selling_mode not in {mode.value for mode in SellingMode}:
            raise ValidationError({"selling_mode": [f"Unknown selling mode: {selling_mode}"]})

        now = datetime.now(UTC)
        order = cls(
            id=next_order_id(),
            buyer_id=str(buyer_id),
            seller_id=str(first["seller_id"]),
            items=[OrderItem(**{k: v for k, v in item.items() if k in _ITEM_FIELDS}) for item in items_data],
            total=total,
            discount_code=discount_code,
            shipping_address=ShippingAddress(**shipping_address),
            status=initial_status_for(selling_mode).value,
            selling_mode=selling_mode,
            buyer_rating=BuyerRating(rated=False),
            placed_at=now,
            updated_at=now,
        )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                buyer_id=str(order.buyer_id),
                seller_id=str(order.seller_id),
                selling_mode=order.selling_mode,
                status=order.status,
                items=json.dumps([item.snapshot() for item in order.items]),
                total=order.total,
                shipping_address=json.dumps(shipping_address),
                discount_code=discount_code,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Participants
    # -------------------------------------------------------------------
    def role_of(self, user_id):
        """The role ``user_id`` plays in this order, or None for outsiders."""
        if str(user_id) == str(self.buyer_id):
            return ParticipantRole.BUYER.value
        if str(user_id) == str(self.seller_id):
            return ParticipantRole.SELLER.value
        return None

    def status_for(self, user_id) -> str:
        return project_status(self.status, self.role_of(user_id))

    @property
    def is_rated(self) -> bool:
        return bool(self.buyer_rating and self.buyer_rating.rated)

    # -------------------------------------------------------------------
    # State transition helpers
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def _assert_actor(self, actor_id, expected_id, action):
        if str(actor_id) != str(expected_id):
            raise UnauthorizedActionError({"actor": [f"User {actor_id} is not allowed to {action} this order"]})

    # -------------------------------------------------------------------
    # Lifecycle transitions
    # -------------------------------------------------------------------
    def mark_shipped(self, actor_id):
        """Seller hands the item over for delivery (secure mode only)."""
        self._assert_actor(actor_id, self.seller_id, "ship")
        self._assert_can_transition(OrderStatus.SHIPPED)

        now = datetime.now(UTC)
        self.status = OrderStatus.SHIPPED.value
        self.updated_at = now

        self.raise_(
            OrderShipped(
                order_id=str(self.id),
                buyer_id=str(self.buyer_id),
                seller_id=str(self.seller_id),
                shipped_by=str(actor_id),
                shipped_at=now,
            )
        )

    def confirm_receipt(self, actor_id):
        """Buyer confirms the item arrived, completing the order."""
        self._assert_actor(actor_id, self.buyer_id, "confirm receipt of")
        self._assert_can_transition(OrderStatus.COMPLETED)

        now = datetime.now(UTC)
        self.status = OrderStatus.COMPLETED.value
        self.updated_at = now

        self.raise_(
            ReceiptConfirmed(
                order_id=str(self.id),
                buyer_id=str(self.buyer_id),
                seller_id=str(self.seller_id),
                confirmed_by=str(actor_id),
                completed_at=now,
            )
        )

    def record_buyer_rating(self, actor_id, rating=None, comment=None, buyer_name=None):
        """Record that the buyer rated the seller. Allowed once per order."""
        self._assert_actor(actor_id, self.buyer_id, "rate the seller of")
        if OrderStatus(self.status) != OrderStatus.COMPLETED:
            raise ValidationError({"status": ["Only completed orders can be rated"]})
        if self.is_rated:
            raise ValidationError({"buyer_rating": ["The seller has already been rated for this order"]})
        if rating is not None and not 1 <= rating <= 5:
            raise ValidationError({"rating": ["Rating must be between 1 and 5"]})

        now = datetime.now(UTC)
        self.buyer_rating = BuyerRating(rated=True)
        self.updated_at = now

        self.raise_(
            SellerRated(
                order_id=str(self.id),
                buyer_id=str(self.buyer_id),
                seller_id=str(self.seller_id),
                rating=rating,
                comment=comment,
                buyer_name=buyer_name,
                rated_at=now,
            )
        )
