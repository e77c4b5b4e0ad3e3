"""Storefront — the operations the marketplace UI calls, bound to the acting user.

Domain code raises; the storefront never does. Every mutation returns an
``Outcome`` that is truthy on success and otherwise names the failure kind
(not found, unauthorized, conflict, invalid, storage failure). Reads return
the value or ``None``/an empty list, falling back to empty when the store
cannot be read. The admin order listing and discount code changes refuse
actors without an administrator role as unauthorized.

Usage:
    with marketplace.domain_context():
        shop = Storefront(Actor(id="2", name="John Doe"))
        placed = shop.place_order(items, 199.99, address)
        if placed:
            order_id = placed.value.order_id
"""

import json
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Callable

import structlog
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from marketplace.errors import DuplicateDiscountCodeError, UnauthorizedActionError
from marketplace.ledger.ledger import LedgerEntry
from marketplace.ledger.queries import find_entry, ledger_for
from marketplace.marketing.discount import DiscountCode, apply_discount
from marketplace.marketing.management import (
    AddDiscountCode,
    DeleteDiscountCode,
    SetDiscountCodeActive,
    UpdateDiscountCode,
)
from marketplace.marketing.queries import list_discount_codes, validate_discount_code
from marketplace.notification.notification import Notification
from marketplace.notification.queries import notifications_for, unread_count
from marketplace.notification.reading import (
    MarkAllNotificationsRead,
    MarkNotificationRead,
    MarkNotificationUnread,
)
from marketplace.order.placement import PlaceOrder
from marketplace.order.queries import all_orders_newest_first
from marketplace.order.rating import RateSeller
from marketplace.order.receipt import ConfirmReceipt
from marketplace.order.shipment import MarkAsShipped
from marketplace.seller.order_events import profile_for
from marketplace.seller.profile import SellerProfile

logger = structlog.get_logger(__name__)

ADMIN_ROLES = ("admin", "super_admin")


class Failure(Enum):
    NOT_FOUND = "NotFound"
    UNAUTHORIZED = "Unauthorized"
    CONFLICT = "Conflict"
    INVALID = "Invalid"
    STORAGE_FAILURE = "StorageFailure"


@dataclass(frozen=True)
class Outcome:
    ok: bool
    value: Any = None
    failure: Failure | None = None
    messages: dict = field(default_factory=dict)

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, value=None) -> "Outcome":
        return cls(ok=True, value=value)

    @classmethod
    def failed(cls, failure: Failure, messages: dict | None = None) -> "Outcome":
        return cls(ok=False, failure=failure, messages=messages or {})


@dataclass(frozen=True)
class Actor:
    """The signed-in user, as supplied by the auth collaborator."""

    id: str
    name: str = ""
    role: str = "user"

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES


def _parse_date(value):
    if isinstance(value, str):
        return date.fromisoformat(value)
    return value


class Storefront:
    def __init__(self, actor: Actor):
        self.actor = actor

    def _refuse_non_admin(self, action: str) -> Outcome:
        logger.warning("Admin action refused", action=action, actor_id=str(self.actor.id), actor_role=self.actor.role)
        return Outcome.failed(Failure.UNAUTHORIZED, {"actor": [f"User {self.actor.id} is not an administrator"]})

    # -------------------------------------------------------------------
    # Command execution
    # -------------------------------------------------------------------
    def _execute(self, action: str, build_command: Callable[[], Any]) -> Outcome:
        log = logger.bind(action=action, actor_id=str(self.actor.id))
        try:
            result = current_domain.process(build_command(), asynchronous=False)
        except ObjectNotFoundError as exc:
            log.info("Target not found", error=str(exc))
            return Outcome.failed(Failure.NOT_FOUND, {"_entity": [str(exc)]})
        except UnauthorizedActionError as exc:
            log.warning("Unauthorized action refused", messages=exc.messages)
            return Outcome.failed(Failure.UNAUTHORIZED, exc.messages)
        except DuplicateDiscountCodeError as exc:
            log.info("Conflicting discount code", messages=exc.messages)
            return Outcome.failed(Failure.CONFLICT, exc.messages)
        except ValidationError as exc:
            log.info("Action rejected", messages=exc.messages)
            return Outcome.failed(Failure.INVALID, exc.messages)
        except ValueError as exc:
            log.info("Malformed input", error=str(exc))
            return Outcome.failed(Failure.INVALID, {"_input": [str(exc)]})
        except Exception as exc:
            log.exception("Storage failure")
            return Outcome.failed(Failure.STORAGE_FAILURE, {"_storage": [str(exc)]})

        log.info("Action completed")
        return Outcome.success(result)

    # -------------------------------------------------------------------
    # Orders
    # -------------------------------------------------------------------
    def place_order(self, items: list[dict], total: float, shipping_address: dict, discount_code=None) -> Outcome:
        """Check out ``items``; on success ``value`` is the buyer's ledger entry."""
        if not items:
            return Outcome.failed(Failure.INVALID, {"items": ["An order needs at least one item"]})

        outcome = self._execute(
            "place_order",
            lambda: PlaceOrder(
                buyer_id=str(self.actor.id),
                items=json.dumps(items, default=str),
                total=total,
                shipping_address=json.dumps(shipping_address),
                discount_code=discount_code,
            ),
        )
        if not outcome:
            return outcome
        return Outcome.success(find_entry(outcome.value, self.actor.id))

    def mark_as_shipped(self, order_id) -> Outcome:
        return self._execute(
            "mark_as_shipped",
            lambda: MarkAsShipped(order_id=str(order_id), actor_id=str(self.actor.id)),
        )

    def confirm_receipt(self, order_id) -> Outcome:
        return self._execute(
            "confirm_receipt",
            lambda: ConfirmReceipt(order_id=str(order_id), actor_id=str(self.actor.id)),
        )

    def add_rating_to_order(self, order_id) -> Outcome:
        """Flag the order as rated without recording a score."""
        return self._execute(
            "add_rating_to_order",
            lambda: RateSeller(order_id=str(order_id), actor_id=str(self.actor.id)),
        )

    def rate_seller(self, order_id, rating: int, comment: str | None = None) -> Outcome:
        return self._execute(
            "rate_seller",
            lambda: RateSeller(
                order_id=str(order_id),
                actor_id=str(self.actor.id),
                rating=rating,
                comment=comment,
                buyer_name=self.actor.name or None,
            ),
        )

    def get_order_by_id(self, order_id) -> LedgerEntry | None:
        """The acting user's view of an order, or None if it is not in their ledger."""
        return find_entry(order_id, self.actor.id)

    def orders(self) -> list[LedgerEntry]:
        return ledger_for(self.actor.id)

    def get_all_orders_for_admin(self) -> Outcome:
        """Every order, newest first, as ``value``. Administrators only."""
        if not self.actor.is_admin:
            return self._refuse_non_admin("get_all_orders_for_admin")
        return Outcome.success(all_orders_newest_first())

    # -------------------------------------------------------------------
    # Discount codes
    # -------------------------------------------------------------------
    def validate_discount_code(self, code: str, now: datetime | None = None) -> DiscountCode | None:
        return validate_discount_code(code, now=now)

    def price_with_discount(self, subtotal: float, code: str | None, now: datetime | None = None):
        """Net total for ``subtotal`` and the discount code that was applied, if any."""
        discount = validate_discount_code(code, now=now) if code else None
        if discount is None:
            return subtotal, None
        return apply_discount(subtotal, discount.percentage), discount

    def add_discount_code(self, data: dict) -> Outcome:
        if not self.actor.is_admin:
            return self._refuse_non_admin("add_discount_code")
        return self._execute(
            "add_discount_code",
            lambda: AddDiscountCode(
                code=data.get("code"),
                percentage=data.get("percentage"),
                start_date=_parse_date(data.get("start_date")),
                expiry_date=_parse_date(data.get("expiry_date")),
            ),
        )

    def update_discount_code(self, discount_code_id, data: dict) -> Outcome:
        if not self.actor.is_admin:
            return self._refuse_non_admin("update_discount_code")
        return self._execute(
            "update_discount_code",
            lambda: UpdateDiscountCode(
                discount_code_id=str(discount_code_id),
                code=data.get("code"),
                percentage=data.get("percentage"),
                start_date=_parse_date(data.get("start_date")),
                expiry_date=_parse_date(data.get("expiry_date")),
            ),
        )

    def set_discount_code_active(self, discount_code_id, is_active: bool) -> Outcome:
        if not self.actor.is_admin:
            return self._refuse_non_admin("set_discount_code_active")
        return self._execute(
            "set_discount_code_active",
            lambda: SetDiscountCodeActive(discount_code_id=str(discount_code_id), is_active=is_active),
        )

    def delete_discount_code(self, discount_code_id) -> Outcome:
        if not self.actor.is_admin:
            return self._refuse_non_admin("delete_discount_code")
        return self._execute(
            "delete_discount_code",
            lambda: DeleteDiscountCode(discount_code_id=str(discount_code_id)),
        )

    def list_discount_codes(self) -> list[DiscountCode]:
        return list_discount_codes()

    # -------------------------------------------------------------------
    # Notifications
    # -------------------------------------------------------------------
    def notifications(self) -> list[Notification]:
        return notifications_for(self.actor.id)

    def unread_count(self) -> int:
        return unread_count(self.actor.id)

    def mark_notification_read(self, notification_id) -> Outcome:
        return self._execute(
            "mark_notification_read",
            lambda: MarkNotificationRead(notification_id=str(notification_id), actor_id=str(self.actor.id)),
        )

    def mark_notification_unread(self, notification_id) -> Outcome:
        return self._execute(
            "mark_notification_unread",
            lambda: MarkNotificationUnread(notification_id=str(notification_id), actor_id=str(self.actor.id)),
        )

    def mark_all_notifications_read(self) -> Outcome:
        return self._execute(
            "mark_all_notifications_read",
            lambda: MarkAllNotificationsRead(actor_id=str(self.actor.id)),
        )

    # -------------------------------------------------------------------
    # Sellers
    # -------------------------------------------------------------------
    def seller_profile(self, seller_id) -> SellerProfile | None:
        return profile_for(seller_id)
